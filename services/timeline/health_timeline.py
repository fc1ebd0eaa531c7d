"""Build the 96-slot day timeline from normalised Apple Health data."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List

from .models import TimelineDataType, TimelineItem, TimeSlot
from .records import DayHealthData
from .slots import (
    SLOTS_PER_DAY,
    TimestampParseError,
    extract_time,
    round_half_up,
    slot_index_to_time,
    slots_in_range,
    time_to_slot_index,
)

logger = logging.getLogger("lifelog.timeline")

SLEEP_STAGE_LABELS = {
    "deep": "深睡",
    "core": "浅睡",
    "rem": "快眼",
    "awake": "清醒",
}

SLEEP_STAGE_TYPES = {
    "deep": TimelineDataType.SLEEP_DEEP,
    "core": TimelineDataType.SLEEP_CORE,
    "rem": TimelineDataType.SLEEP_REM,
    "awake": TimelineDataType.SLEEP_AWAKE,
}

WORKOUT_EMOJI = (
    ("Running", "🏃"),
    ("Walking", "🚶"),
    ("Cycling", "🚴"),
    ("Swimming", "🏊"),
)
DEFAULT_WORKOUT_EMOJI = "🏋️"


def empty_slots() -> List[TimeSlot]:
    return [TimeSlot(slot_label=slot_index_to_time(i), hour=i // 4, quarter=i % 4) for i in range(SLOTS_PER_DAY)]


def workout_emoji(workout_type: str) -> str:
    for needle, emoji in WORKOUT_EMOJI:
        if needle in workout_type:
            return emoji
    return DEFAULT_WORKOUT_EMOJI


def format_heart_rate(value: float) -> str:
    return f"♥{round_half_up(value):>3}"


def format_hourly_distance(km: float) -> str:
    if km >= 1:
        return f"📏 {km:.1f}km"
    return f"📏 {round_half_up(km * 1000)}m"


def _has_type(slot: TimeSlot, item_type: TimelineDataType) -> bool:
    return any(item.type == item_type for item in slot.items)


def generate_health_time_slots(health: DayHealthData) -> List[TimeSlot]:
    slots = empty_slots()
    dropped: Dict[str, int] = defaultdict(int)

    if health.sleep:
        for stage in health.sleep.stages:
            item_type = SLEEP_STAGE_TYPES.get(stage.type)
            if item_type is None:
                dropped["sleep"] += 1
                continue
            try:
                indices = slots_in_range(stage.start, stage.end)
            except TimestampParseError:
                dropped["sleep"] += 1
                continue
            for idx in indices:
                if not _has_type(slots[idx], item_type):
                    slots[idx].items.append(TimelineItem(item_type, SLEEP_STAGE_LABELS[stage.type]))

    for workout in health.workouts:
        try:
            indices = slots_in_range(extract_time(workout.start), extract_time(workout.end))
        except TimestampParseError:
            dropped["workout"] += 1
            continue
        label = f"{workout_emoji(workout.type)} {workout.type_name}"
        for idx in indices:
            if not _has_type(slots[idx], TimelineDataType.WORKOUT):
                slots[idx].items.append(TimelineItem(TimelineDataType.WORKOUT, label))

    if health.heart_rate:
        by_slot: Dict[int, List[float]] = {}
        for reading in health.heart_rate.records:
            try:
                idx = time_to_slot_index(reading.time)
            except TimestampParseError:
                dropped["heart_rate"] += 1
                continue
            by_slot.setdefault(idx, []).append(reading.value)
        for idx, values in by_slot.items():
            avg = round_half_up(sum(values) / len(values))
            slots[idx].items.append(TimelineItem(TimelineDataType.HEART_RATE, format_heart_rate(avg), avg))

    point_metrics = (
        (health.hrv, TimelineDataType.HRV, lambda v: f"HRV {round_half_up(v)}"),
        (health.oxygen_saturation, TimelineDataType.OXYGEN_SATURATION, lambda v: f"SpO₂ {round_half_up(v)}%"),
        (health.respiratory_rate, TimelineDataType.RESPIRATORY_RATE, lambda v: f"🫁 {v:.1f}"),
    )
    for summary, item_type, fmt in point_metrics:
        if not summary:
            continue
        for reading in summary.records:
            try:
                idx = time_to_slot_index(reading.time)
            except TimestampParseError:
                dropped[item_type.value] += 1
                continue
            slots[idx].items.append(TimelineItem(item_type, fmt(reading.value), reading.value))

    for record in health.water:
        try:
            idx = time_to_slot_index(record.time)
        except TimestampParseError:
            dropped["water"] += 1
            continue
        slots[idx].items.append(TimelineItem(TimelineDataType.WATER, f"💧 {record.amount}ml", record.amount))

    for record in health.steps:
        if record.count > 0:
            slots[record.hour * 4].items.append(
                TimelineItem(TimelineDataType.STEPS, f"👣 {record.count}", record.count)
            )

    if health.distance:
        for record in health.distance.records:
            if record.distance > 0:
                slots[record.hour * 4].items.append(
                    TimelineItem(TimelineDataType.DISTANCE, format_hourly_distance(record.distance), record.distance)
                )

    for slot in slots:
        slot.has_data = bool(slot.items)

    if dropped:
        logger.warning("timeline_records_dropped date=%s counts=%s", health.date, dict(dropped))
    return slots
