"""Apple Health statistics over a month or a year.

Every builder returns ``None`` when the period has no rows of its kind.
With ``monthly=True`` (year views) builders add per-month series next to the
per-day ones.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, List, Optional

from services.timeline.slots import parse_timestamp, round_half_up

from . import healthkit as hk

MOVE_GOAL_KCAL = 500
EXERCISE_GOAL_MIN = 30
STAND_GOAL_HOURS = 12


def group_by(rows: Iterable[Dict[str, Any]], key: Callable[[Dict[str, Any]], str]) -> Dict[str, List[Dict[str, Any]]]:
    groups: Dict[str, List[Dict[str, Any]]] = OrderedDict()
    for row in rows:
        groups.setdefault(key(row), []).append(row)
    return groups


def by_day(row: Dict[str, Any]) -> str:
    return row["day"]


def by_month(row: Dict[str, Any]) -> str:
    return row["day"][:7]


def _series(points: Dict[str, float], label: str = "date") -> List[Dict[str, Any]]:
    return [{label: key, "value": value} for key, value in sorted(points.items())]


def _avg(values: List[float]) -> float:
    return sum(values) / len(values)


def _group_means(
    rows: List[Dict[str, Any]], key: Callable[[Dict[str, Any]], str], scale: float = 1.0
) -> Dict[str, int]:
    """Rounded mean per group; groups without a numeric value are left out."""
    means = {}
    for group, group_rows in group_by(rows, key).items():
        values = hk.numeric_values(group_rows, scale)
        if values:
            means[group] = round_half_up(_avg(values))
    return means


def _round_to(value: float, places: int) -> float:
    factor = 10 ** places
    return round_half_up(value * factor) / factor


def _duration_minutes(row: Dict[str, Any]) -> float:
    start = parse_timestamp(row.get("start_date"))
    end = parse_timestamp(row.get("end_date"))
    if start is None or end is None:
        return 0.0
    return (end.timestamp() - start.timestamp()) / 60


def sleep_stats(records: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    rows = hk.records_of(records, hk.SLEEP)
    if not rows:
        return None
    stage_totals = {"deep": 0.0, "core": 0.0, "rem": 0.0, "awake": 0.0}
    daily: Dict[str, float] = {}
    for day, day_rows in group_by(rows, by_day).items():
        day_stages = {"deep": 0.0, "core": 0.0, "rem": 0.0, "awake": 0.0}
        for row in day_rows:
            stage = hk.SLEEP_STAGE_VALUES.get(row["value"])
            if stage:
                day_stages[stage] += _duration_minutes(row)
        day_total = sum(day_stages.values())
        if day_total > 0:
            daily[day] = day_total
            for stage, minutes in day_stages.items():
                stage_totals[stage] += minutes
    if not daily:
        return None
    days = len(daily)
    total_minutes = sum(daily.values())
    stats = {
        "avg_duration": total_minutes / 60 / days,
        "total_hours": total_minutes / 60,
        "days_with_data": days,
        "avg_deep_minutes": stage_totals["deep"] / days,
        "avg_core_minutes": stage_totals["core"] / days,
        "avg_rem_minutes": stage_totals["rem"] / days,
        "avg_awake_minutes": stage_totals["awake"] / days,
        "daily_duration": _series({day: minutes / 60 for day, minutes in daily.items()}),
    }
    if monthly:
        per_month: Dict[str, List[float]] = {}
        for day, minutes in daily.items():
            per_month.setdefault(day[:7], []).append(minutes)
        stats["monthly_duration"] = _series({m: _avg(v) / 60 for m, v in per_month.items()}, "month")
    return stats


def heart_rate_stats(records: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    rows = hk.records_of(records, hk.HEART_RATE)
    if not rows:
        return None
    values = hk.numeric_values(rows)
    if not values:
        return None
    resting_rows = hk.records_of(records, hk.RESTING_HEART_RATE)
    resting_values = hk.numeric_values(resting_rows)
    daily_groups = group_by(rows, by_day)
    resting_by_day = group_by(resting_rows, by_day)

    daily_avg = {}
    daily_resting = {}
    for day, day_rows in daily_groups.items():
        day_values = hk.numeric_values(day_rows)
        if day_values:
            daily_avg[day] = round_half_up(_avg(day_values))
        first_resting = hk.numeric_values(resting_by_day.get(day, [])[:1])
        if first_resting:
            daily_resting[day] = round_half_up(first_resting[0])

    stats = {
        "avg_heart_rate": round_half_up(_avg(values)),
        "min_heart_rate": round_half_up(min(values)),
        "max_heart_rate": round_half_up(max(values)),
        "avg_resting_heart_rate": round_half_up(_avg(resting_values)) if resting_values else 0,
        "days_with_data": len(daily_avg),
        "daily_avg": _series(daily_avg),
        "daily_resting": _series(daily_resting),
    }
    if monthly:
        stats["monthly_avg"] = _series(_group_means(rows, by_month), "month")
        stats["monthly_resting"] = _series(_group_means(resting_rows, by_month), "month")
    return stats


def _daily_sums(rows: List[Dict[str, Any]]) -> Dict[str, float]:
    return {day: sum(hk.numeric_values(day_rows)) for day, day_rows in group_by(rows, by_day).items()}


def _monthly_sums(daily: Dict[str, float]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for day, value in daily.items():
        totals[day[:7]] = totals.get(day[:7], 0) + value
    return totals


def _peak(daily: Dict[str, float]) -> tuple:
    best_day, best = "", 0
    for day, value in sorted(daily.items()):
        if value > best:
            best_day, best = day, value
    return best, best_day


def steps_stats(records: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    rows = hk.records_of(records, hk.STEP_COUNT)
    if not rows:
        return None
    daily = {day: int(total) for day, total in _daily_sums(rows).items()}
    total = sum(daily.values())
    max_steps, max_date = _peak(daily)
    stats = {
        "total_steps": total,
        "avg_steps": round_half_up(total / len(daily)),
        "max_steps": max_steps,
        "max_steps_date": max_date,
        "days_with_data": len(daily),
        "daily_steps": _series(daily),
    }
    if monthly:
        stats["monthly_steps"] = _series(_monthly_sums(daily), "month")
    return stats


def activity_stats(summaries: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    if not summaries:
        return None
    totals = {"energy": 0.0, "exercise": 0.0, "stand": 0.0}
    rings = {"move": 0, "exercise": 0, "stand": 0, "all": 0}
    daily_energy: Dict[str, float] = {}
    daily_exercise: Dict[str, float] = {}
    for summary in summaries:
        energy = summary.get("active_energy") or 0
        exercise = summary.get("exercise_time") or 0
        stand = summary.get("stand_hours") or 0
        totals["energy"] += energy
        totals["exercise"] += exercise
        totals["stand"] += stand
        daily_energy[summary["day"]] = energy
        daily_exercise[summary["day"]] = exercise

        closed = (energy >= MOVE_GOAL_KCAL, exercise >= EXERCISE_GOAL_MIN, stand >= STAND_GOAL_HOURS)
        rings["move"] += closed[0]
        rings["exercise"] += closed[1]
        rings["stand"] += closed[2]
        rings["all"] += all(closed)

    days = len(summaries)
    stats = {
        "total_active_energy": totals["energy"],
        "avg_active_energy": round_half_up(totals["energy"] / days),
        "total_exercise_minutes": totals["exercise"],
        "avg_exercise_minutes": round_half_up(totals["exercise"] / days),
        "total_stand_hours": totals["stand"],
        "avg_stand_hours": _round_to(totals["stand"] / days, 1),
        "days_with_data": days,
        "ring_close_count": rings,
        "daily_active_energy": _series(daily_energy),
        "daily_exercise_minutes": _series(daily_exercise),
    }
    if monthly:
        stats["monthly_active_energy"] = _series(_monthly_sums(daily_energy), "month")
        stats["monthly_exercise_minutes"] = _series(_monthly_sums(daily_exercise), "month")
    return stats


def distance_stats(records: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    rows = hk.records_of(records, hk.DISTANCE_WALKING_RUNNING)
    if not rows:
        return None
    daily = _daily_sums(rows)
    flights = sum(hk.numeric_values(hk.records_of(records, hk.FLIGHTS_CLIMBED)))
    total = sum(daily.values())
    max_distance, max_date = _peak(daily)
    days = len(daily)
    stats = {
        "total_distance": total,
        "avg_distance": _round_to(total / days, 2),
        "max_distance": max_distance,
        "max_distance_date": max_date,
        "total_flights_climbed": int(flights),
        "avg_flights_climbed": _round_to(flights / days, 1),
        "days_with_data": days,
        "daily_distance": _series(daily),
    }
    if monthly:
        stats["monthly_distance"] = _series(_monthly_sums(daily), "month")
    return stats


def workout_stats(workouts: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    if not workouts:
        return None
    totals = {"duration": 0.0, "distance": 0.0, "calories": 0.0}
    by_type: Dict[str, Dict[str, float]] = {}
    daily_count: Dict[str, int] = {}
    for w in workouts:
        duration = (w.get("duration") or 0) / 60
        distance = w.get("total_distance") or 0
        calories = w.get("total_energy") or 0
        totals["duration"] += duration
        totals["distance"] += distance
        totals["calories"] += calories
        entry = by_type.setdefault(w["workout_type"], {"count": 0, "duration": 0.0, "distance": 0.0, "calories": 0.0})
        entry["count"] += 1
        entry["duration"] += duration
        entry["distance"] += distance
        entry["calories"] += calories
        daily_count[w["day"]] = daily_count.get(w["day"], 0) + 1

    breakdown = sorted(
        (
            {
                "type": workout_type,
                "type_name": hk.workout_type_name(workout_type),
                "count": data["count"],
                "total_duration": round_half_up(data["duration"]),
                "total_distance": round_half_up(data["distance"]),
                "total_calories": round_half_up(data["calories"]),
            }
            for workout_type, data in by_type.items()
        ),
        key=lambda entry: entry["count"],
        reverse=True,
    )
    stats = {
        "total_workouts": len(workouts),
        "total_duration": round_half_up(totals["duration"]),
        "total_distance": round_half_up(totals["distance"]),
        "total_calories": round_half_up(totals["calories"]),
        "days_with_workouts": len(daily_count),
        "by_type": breakdown,
        "daily_workouts": _series(daily_count),
    }
    if monthly:
        stats["monthly_workouts"] = _series(_monthly_sums(daily_count), "month")
    return stats


def _point_metric_stats(
    records: List[Dict[str, Any]], record_type: str, prefix: str, scale: float = 1.0, monthly: bool = False
) -> Optional[Dict[str, Any]]:
    rows = hk.records_of(records, record_type)
    values = hk.numeric_values(rows, scale)
    if not values:
        return None
    daily = _group_means(rows, by_day, scale)
    stats = {
        f"avg_{prefix}": round_half_up(_avg(values)),
        f"min_{prefix}": round_half_up(min(values)),
        f"max_{prefix}": round_half_up(max(values)),
        "days_with_data": len(daily),
        f"daily_{prefix}": _series(daily),
    }
    if monthly:
        stats[f"monthly_{prefix}"] = _series(_group_means(rows, by_month, scale), "month")
    return stats


def hrv_stats(records: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    return _point_metric_stats(records, hk.HRV_SDNN, "hrv", monthly=monthly)


def oxygen_stats(records: List[Dict[str, Any]], monthly: bool = False) -> Optional[Dict[str, Any]]:
    return _point_metric_stats(records, hk.OXYGEN_SATURATION, "oxygen", scale=100, monthly=monthly)


def health_period_stats(raw: Dict[str, Any], monthly: bool = False) -> Dict[str, Any]:
    records = raw.get("records") or []
    return {
        "days_with_data": len({r["day"] for r in records}),
        "sleep": sleep_stats(records, monthly),
        "heart_rate": heart_rate_stats(records, monthly),
        "steps": steps_stats(records, monthly),
        "activity": activity_stats(raw.get("activity_summaries") or [], monthly),
        "distance": distance_stats(records, monthly),
        "workouts": workout_stats(raw.get("workouts") or [], monthly),
        "hrv": hrv_stats(records, monthly),
        "oxygen": oxygen_stats(records, monthly),
    }
