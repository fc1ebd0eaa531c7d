"""Turn one day of raw source rows into view models.

Apple Health rows become a :class:`DayHealthData` (which also feeds the slot
timeline), footprint and pixiu rows become plain dict payloads.
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, time as dt_time, timedelta
from typing import Any, Dict, List, Optional

from services.timeline.footprint import (
    aggregate_footprint_data,
    format_elevation,
    format_movement_summary,
    format_speed,
)
from services.timeline.geo import haversine_distance_m
from services.timeline.health_timeline import generate_health_time_slots
from services.timeline.records import (
    ActivitySummary,
    DayHealthData,
    DistanceSummary,
    HeartRateSummary,
    HourlyDistance,
    HourlySteps,
    MetricSummary,
    SleepRecord,
    SleepStage,
    TimedReading,
    TrackPoint,
    WorkoutRecord,
)
from services.timeline.slots import TimestampParseError, extract_time, parse_timestamp, round_half_up
from services.timeline.sun import day_sun_track

from . import healthkit as hk
from .ledger import category_breakdown, totals_from_agg

logger = logging.getLogger("lifelog.timeline")

MAX_SLEEP_GAP = timedelta(hours=2)


def _round1(value: float) -> float:
    return round_half_up(value * 10) / 10


def _round3(value: float) -> float:
    return round_half_up(value * 1000) / 1000


def _time_or_none(value: Optional[str]) -> Optional[str]:
    try:
        return extract_time(value or "")
    except TimestampParseError:
        return None


def _readings(rows: List[Dict[str, Any]], scale: float = 1.0, decimals: int = 0) -> List[TimedReading]:
    readings = []
    for row in rows:
        at = _time_or_none(row.get("start_date"))
        value = hk.to_number(row.get("value"))
        if at is None or value is None:
            logger.debug("skip_reading id=%s type=%s", row.get("id"), row.get("type"))
            continue
        value *= scale
        value = _round1(value) if decimals == 1 else round_half_up(value)
        readings.append(TimedReading(time=at, value=value))
    return readings


def _metric_summary(rows: List[Dict[str, Any]], scale: float = 1.0, decimals: int = 0) -> Optional[MetricSummary]:
    values = hk.numeric_values(rows, scale)
    if not values:
        return None
    rnd = _round1 if decimals == 1 else round_half_up
    return MetricSummary(
        avg=rnd(sum(values) / len(values)),
        min=rnd(min(values)),
        max=rnd(max(values)),
        records=_readings(rows, scale, decimals),
    )


def build_sleep(records: List[Dict[str, Any]], date: str) -> Optional[SleepRecord]:
    """First continuous overnight session ending before noon of ``date``.

    Stages are ordered by start; a gap of more than two hours between one
    stage's end and the next stage's start ends the session.
    """
    stages = []
    for row in hk.records_of(records, hk.SLEEP):
        stage_type = hk.SLEEP_STAGE_VALUES.get(row["value"])
        start = parse_timestamp(row.get("start_date"))
        end = parse_timestamp(row.get("end_date"))
        if stage_type is None or start is None or end is None:
            continue
        noon = datetime.combine(datetime.fromisoformat(date).date(), dt_time(12, 0), tzinfo=end.tzinfo)
        if end >= noon:
            continue
        stages.append((start.timestamp(), end.timestamp(), stage_type, row))
    if not stages:
        return None
    stages.sort(key=lambda s: s[0])

    session = [stages[0]]
    for stage in stages[1:]:
        if stage[0] - session[-1][1] > MAX_SLEEP_GAP.total_seconds():
            break
        session.append(stage)

    minutes = {"deep": 0, "core": 0, "rem": 0, "awake": 0}
    out_stages = []
    for start, end, stage_type, row in session:
        duration = round_half_up((end - start) / 60)
        minutes[stage_type] += duration
        out_stages.append(
            SleepStage(
                type=stage_type,
                start=extract_time(row["start_date"]),
                end=extract_time(row["end_date"]),
                duration=duration,
            )
        )
    return SleepRecord(
        start=out_stages[0].start,
        end=out_stages[-1].end,
        duration=sum(minutes.values()),
        stages=out_stages,
        deep_minutes=minutes["deep"],
        core_minutes=minutes["core"],
        rem_minutes=minutes["rem"],
        awake_minutes=minutes["awake"],
    )


def build_heart_rate(records: List[Dict[str, Any]]) -> Optional[HeartRateSummary]:
    summary = _metric_summary(hk.records_of(records, hk.HEART_RATE))
    if summary is None:
        return None
    resting = hk.numeric_values(hk.records_of(records, hk.RESTING_HEART_RATE))
    walking = hk.numeric_values(hk.records_of(records, hk.WALKING_HEART_RATE))
    return HeartRateSummary(
        avg=summary.avg,
        min=summary.min,
        max=summary.max,
        records=summary.records,
        resting_heart_rate=round_half_up(resting[0]) if resting else None,
        walking_average=round_half_up(walking[0]) if walking else None,
    )


def _hourly_totals(rows: List[Dict[str, Any]]) -> Dict[int, float]:
    by_hour: Dict[int, float] = {}
    for row in rows:
        at = _time_or_none(row.get("start_date"))
        value = hk.to_number(row.get("value"))
        if at is None or value is None:
            continue
        hour = int(at.split(":")[0])
        by_hour[hour] = by_hour.get(hour, 0.0) + value
    return by_hour


def build_steps(records: List[Dict[str, Any]]) -> List[HourlySteps]:
    by_hour = _hourly_totals(hk.records_of(records, hk.STEP_COUNT))
    return [HourlySteps(hour=hour, count=int(count)) for hour, count in sorted(by_hour.items())]


def build_distance(records: List[Dict[str, Any]]) -> Optional[DistanceSummary]:
    rows = hk.records_of(records, hk.DISTANCE_WALKING_RUNNING)
    if not rows:
        return None
    hourly = [HourlyDistance(hour=hour, distance=_round3(km)) for hour, km in sorted(_hourly_totals(rows).items())]
    return DistanceSummary(total=_round3(sum(h.distance for h in hourly)), records=hourly)


def build_workouts(workouts: List[Dict[str, Any]]) -> List[WorkoutRecord]:
    return [
        WorkoutRecord(
            id=f"workout-{w['id']}",
            type=w["workout_type"],
            type_name=hk.workout_type_name(w["workout_type"]),
            start=w["start_date"],
            end=w["end_date"],
            duration=round_half_up(w["duration"] / 60) if w.get("duration") else 0,
            distance=w.get("total_distance"),
            calories=w.get("total_energy"),
        )
        for w in workouts
    ]


def build_day_health(raw: Dict[str, Any]) -> DayHealthData:
    records = raw.get("records") or []
    steps = build_steps(records)
    flights = hk.numeric_values(hk.records_of(records, hk.FLIGHTS_CLIMBED))
    wrist_temp = hk.numeric_values(hk.records_of(records, hk.SLEEPING_WRIST_TEMPERATURE))
    activity_row = raw.get("activity_summary")
    activity = None
    if activity_row:
        activity = ActivitySummary(
            active_energy=activity_row.get("active_energy") or 0,
            exercise_minutes=activity_row.get("exercise_time") or 0,
            stand_hours=activity_row.get("stand_hours") or 0,
        )
    return DayHealthData(
        date=raw["date"],
        sleep=build_sleep(records, raw["date"]),
        heart_rate=build_heart_rate(records),
        steps=steps,
        total_steps=sum(s.count for s in steps),
        distance=build_distance(records),
        oxygen_saturation=_metric_summary(hk.records_of(records, hk.OXYGEN_SATURATION), scale=100),
        respiratory_rate=_metric_summary(hk.records_of(records, hk.RESPIRATORY_RATE), decimals=1),
        hrv=_metric_summary(hk.records_of(records, hk.HRV_SDNN)),
        workouts=build_workouts(raw.get("workouts") or []),
        activity=activity,
        flights_climbed=int(sum(flights)),
        sleeping_wrist_temperature=_round1(wrist_temp[0]) if wrist_temp else None,
    )


def empty_day_health(date: str) -> DayHealthData:
    return DayHealthData(date=date)


def day_health_payload(health: DayHealthData) -> Dict[str, Any]:
    return asdict(health)


def track_points(rows: List[Dict[str, Any]]) -> List[TrackPoint]:
    points = []
    for row in rows:
        speed = row.get("speed")
        points.append(
            TrackPoint(
                ts=row["ts"],
                lat=row["lat"],
                lon=row["lon"],
                ele=row.get("ele"),
                speed=speed if speed is not None and speed >= 0 else None,
            )
        )
    return points


def path_distance_m(rows: List[Dict[str, Any]]) -> float:
    total = 0.0
    for prev, current in zip(rows, rows[1:]):
        total += haversine_distance_m(prev["lat"], prev["lon"], current["lat"], current["lon"])
    return total


def build_track_summary(rows: List[Dict[str, Any]], day_agg: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not rows and not day_agg:
        return None
    distance = round_half_up(path_distance_m(rows)) if len(rows) > 1 else 0
    if day_agg:
        return {
            "point_count": day_agg.get("point_count") or 0,
            "total_distance": distance,
            "avg_speed": day_agg.get("avg_speed") or 0,
            "min_time": _time_or_none(day_agg.get("min_ts")) or "00:00",
            "max_time": _time_or_none(day_agg.get("max_ts")) or "23:59",
        }
    times = sorted(t for t in (_time_or_none(r.get("ts")) for r in rows) if t)
    return {
        "point_count": len(rows),
        "total_distance": distance,
        "avg_speed": 0,
        "min_time": times[0] if times else "00:00",
        "max_time": times[-1] if times else "23:59",
    }


def build_day_footprint(raw: Dict[str, Any]) -> Dict[str, Any]:
    rows = raw.get("track_points") or []
    return {
        "date": raw["date"],
        "summary": build_track_summary(rows, raw.get("day_agg")),
        "track_points": [asdict(p) for p in track_points(rows)],
    }


def build_transactions(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    transactions = []
    for row in rows:
        inflow = row.get("inflow") or 0
        transactions.append(
            {
                "id": f"tx-{row['id']}",
                "time": _time_or_none(row.get("tx_date")),
                "category_l1": row.get("category_l1"),
                "category_l2": row.get("category_l2"),
                "amount": inflow if inflow > 0 else (row.get("outflow") or 0),
                "is_income": inflow > 0,
                "account": row.get("account"),
                "tags": row.get("tags"),
                "note": row.get("note"),
            }
        )
    return transactions


def build_day_pixiu(raw: Dict[str, Any]) -> Dict[str, Any]:
    rows = raw.get("transactions") or []
    summary = totals_from_agg(raw.get("day_agg"), rows) if (rows or raw.get("day_agg")) else None
    return {
        "date": raw["date"],
        "summary": summary,
        "transactions": build_transactions(rows),
        "expense_by_category": category_breakdown(rows, income=False),
        "income_by_category": category_breakdown(rows, income=True),
    }


def build_day_summary(
    date: str,
    health: DayHealthData,
    footprint: Optional[Dict[str, Any]],
    pixiu: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    track = (footprint or {}).get("summary") or {}
    ledger = (pixiu or {}).get("summary") or {}
    return {
        "date": date,
        "steps": health.total_steps,
        "heart_rate_avg": health.heart_rate.avg if health.heart_rate else None,
        "heart_rate_min": health.heart_rate.min if health.heart_rate else None,
        "heart_rate_max": health.heart_rate.max if health.heart_rate else None,
        "active_energy": health.activity.active_energy if health.activity else None,
        "exercise_minutes": health.activity.exercise_minutes if health.activity else None,
        "stand_hours": health.activity.stand_hours if health.activity else None,
        "sleep_hours": _round1(health.sleep.duration / 60) if health.sleep else None,
        "distance": track.get("total_distance"),
        "location_count": track.get("point_count") or 0,
        "income": ledger.get("income") or 0,
        "expense": ledger.get("expense") or 0,
        "net": ledger.get("net") or 0,
        "transaction_count": ledger.get("transaction_count") or 0,
    }


def build_day_timeline(date: str, health: DayHealthData, track_rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Health slots, footprint slots and the sun backdrop for one day."""
    slots = generate_health_time_slots(health)
    aggregation = aggregate_footprint_data(track_points(track_rows))
    footprint = aggregation.to_dict()
    for slot_payload, slot in zip(footprint["slots"], aggregation.slots):
        slot_payload["elevation_label"] = format_elevation(slot)
        slot_payload["speed_label"] = format_speed(slot.avg_speed_kmh)
    footprint["movement_summaries"] = [format_movement_summary(seg) for seg in aggregation.movement_segments]
    return {
        "date": date,
        "slots": [slot.to_dict() for slot in slots],
        "footprint": footprint,
        "sun": day_sun_track(),
    }
