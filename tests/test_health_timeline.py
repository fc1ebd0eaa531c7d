from services.timeline.health_timeline import (
    DEFAULT_WORKOUT_EMOJI,
    empty_slots,
    format_heart_rate,
    format_hourly_distance,
    generate_health_time_slots,
    workout_emoji,
)
from services.timeline.models import TimelineDataType, TimelineItem
from services.timeline.records import (
    DayHealthData,
    DistanceSummary,
    HeartRateSummary,
    HourlyDistance,
    HourlySteps,
    MetricSummary,
    SleepRecord,
    SleepStage,
    TimedReading,
    WaterRecord,
    WorkoutRecord,
)

DAY = "2024-01-15"


def items_of(slot, item_type):
    return [item for item in slot.items if item.type == item_type]


def test_empty_day_has_96_empty_slots():
    slots = generate_health_time_slots(DayHealthData(date=DAY))
    assert len(slots) == 96
    assert all(not slot.has_data and slot.items == [] for slot in slots)
    assert [slot.index for slot in slots] == list(range(96))
    assert slots[37].slot_label == "09:15"


def test_has_data_matches_items():
    health = DayHealthData(date=DAY, steps=[HourlySteps(hour=9, count=120)])
    for slot in generate_health_time_slots(health):
        assert slot.has_data == bool(slot.items)


def test_sleep_stages_fill_their_range_across_midnight():
    sleep = SleepRecord(
        start="23:30",
        end="01:00",
        duration=90,
        stages=[SleepStage("core", "23:30", "00:30", 60), SleepStage("deep", "00:30", "01:00", 30)],
    )
    slots = generate_health_time_slots(DayHealthData(date=DAY, sleep=sleep))
    core = [s.index for s in slots if items_of(s, TimelineDataType.SLEEP_CORE)]
    deep = [s.index for s in slots if items_of(s, TimelineDataType.SLEEP_DEEP)]
    assert core == [0, 1, 94, 95]
    assert deep == [2, 3]
    assert items_of(slots[94], TimelineDataType.SLEEP_CORE)[0].label == "浅睡"


def test_sleep_stage_duplicates_are_merged():
    stages = [SleepStage("rem", "02:00", "02:30", 30), SleepStage("rem", "02:15", "02:45", 30)]
    sleep = SleepRecord(start="02:00", end="02:45", duration=60, stages=stages)
    slots = generate_health_time_slots(DayHealthData(date=DAY, sleep=sleep))
    for idx in (8, 9, 10):
        assert len(items_of(slots[idx], TimelineDataType.SLEEP_REM)) == 1


def test_workout_slots_and_label():
    workout = WorkoutRecord(
        id="w1",
        type="HKWorkoutActivityTypeRunning",
        type_name="Running",
        start="2024-01-15 19:00:00 +0800",
        end="2024-01-15 19:30:00 +0800",
        duration=30,
    )
    slots = generate_health_time_slots(DayHealthData(date=DAY, workouts=[workout, workout]))
    covered = [s.index for s in slots if items_of(s, TimelineDataType.WORKOUT)]
    assert covered == [76, 77]
    assert len(items_of(slots[76], TimelineDataType.WORKOUT)) == 1
    assert items_of(slots[76], TimelineDataType.WORKOUT)[0].label == "🏃 Running"


def test_workout_emoji_falls_back():
    assert workout_emoji("HKWorkoutActivityTypeCycling") == "🚴"
    assert workout_emoji("HKWorkoutActivityTypeYoga") == DEFAULT_WORKOUT_EMOJI


def test_heart_rate_is_averaged_per_slot():
    heart_rate = HeartRateSummary(
        avg=70,
        min=60,
        max=81,
        records=[TimedReading("08:00", 60), TimedReading("08:05", 81), TimedReading("12:00", 70)],
    )
    slots = generate_health_time_slots(DayHealthData(date=DAY, heart_rate=heart_rate))
    items = items_of(slots[32], TimelineDataType.HEART_RATE)
    assert len(items) == 1
    assert items[0].value == 71
    assert items[0].label == format_heart_rate(70.5)
    assert format_heart_rate(70.5) == "♥ 71"
    assert len(items_of(slots[48], TimelineDataType.HEART_RATE)) == 1


def test_point_metrics_are_not_averaged():
    hrv = MetricSummary(avg=45, min=40, max=50, records=[TimedReading("05:00", 40), TimedReading("05:05", 50)])
    spo2 = MetricSummary(avg=97, min=97, max=97, records=[TimedReading("04:00", 97)])
    resp = MetricSummary(avg=14.5, min=14.5, max=14.5, records=[TimedReading("04:30", 14.5)])
    health = DayHealthData(date=DAY, hrv=hrv, oxygen_saturation=spo2, respiratory_rate=resp)
    slots = generate_health_time_slots(health)

    assert [i.label for i in items_of(slots[20], TimelineDataType.HRV)] == ["HRV 40", "HRV 50"]
    assert items_of(slots[16], TimelineDataType.OXYGEN_SATURATION)[0].label == "SpO₂ 97%"
    assert items_of(slots[18], TimelineDataType.RESPIRATORY_RATE)[0].label == "🫁 14.5"


def test_water_steps_and_distance():
    health = DayHealthData(
        date=DAY,
        water=[WaterRecord("10:00", 250), WaterRecord("10:05", 300)],
        steps=[HourlySteps(hour=8, count=5500), HourlySteps(hour=9, count=0)],
        distance=DistanceSummary(
            total=2.9,
            records=[HourlyDistance(8, 2.5), HourlyDistance(12, 0.4), HourlyDistance(13, 0)],
        ),
    )
    slots = generate_health_time_slots(health)
    assert [i.label for i in items_of(slots[40], TimelineDataType.WATER)] == ["💧 250ml", "💧 300ml"]
    assert items_of(slots[32], TimelineDataType.STEPS)[0].label == "👣 5500"
    assert not items_of(slots[36], TimelineDataType.STEPS)
    assert items_of(slots[32], TimelineDataType.DISTANCE)[0].label == "📏 2.5km"
    assert items_of(slots[48], TimelineDataType.DISTANCE)[0].label == "📏 400m"
    assert not slots[52].has_data


def test_malformed_records_are_dropped():
    heart_rate = HeartRateSummary(avg=60, min=60, max=60, records=[TimedReading("??", 60)])
    workout = WorkoutRecord(id="w", type="x", type_name="x", start="bad", end="worse")
    slots = generate_health_time_slots(DayHealthData(date=DAY, heart_rate=heart_rate, workouts=[workout]))
    assert len(slots) == 96
    assert not any(slot.has_data for slot in slots)


def test_out_of_range_times_are_dropped():
    heart_rate = HeartRateSummary(avg=60, min=60, max=60, records=[TimedReading("24:10", 60), TimedReading("08:75", 70)])
    water = [WaterRecord(time="25:00", amount=250)]
    slots = generate_health_time_slots(DayHealthData(date=DAY, heart_rate=heart_rate, water=water))
    assert len(slots) == 96
    assert not any(slot.has_data for slot in slots)


def test_hourly_distance_format():
    assert format_hourly_distance(1.0) == "📏 1.0km"
    assert format_hourly_distance(0.25) == "📏 250m"


def test_every_data_type_has_side_and_color():
    for data_type in TimelineDataType:
        assert data_type.side in ("left", "right")
        assert data_type.color.startswith("bg-")
    assert TimelineDataType.SLEEP_DEEP.side == "left"
    assert TimelineDataType.HEART_RATE.side == "right"


def test_slot_serialisation():
    slot = empty_slots()[33]
    slot.items.append(TimelineItem(TimelineDataType.STEPS, "👣 10", 10))
    slot.has_data = True
    payload = slot.to_dict()
    assert payload["slot"] == "08:15"
    assert payload["hour"] == 8 and payload["quarter"] == 1
    assert payload["items"] == [
        {"type": "steps", "label": "👣 10", "value": 10, "side": "right", "color": "bg-amber-700"}
    ]
