from __future__ import annotations

from typing import Any, Dict, List, Optional

from services.timeline.footprint import aggregate_footprint_data
from services.timeline.slots import SLOT_MINUTES, round_half_up
from services.timeline.transport import TransportMode, transport_mode_display

from .day import track_points
from .health_stats import group_by, health_period_stats
from .ledger import account_breakdown, category_breakdown, totals_from_agg
from .periods import days_in_month

# Footprint logs roughly one point every five seconds while moving.
SECONDS_PER_POINT = 5
TOP_EXPENSES = 5


def estimated_distance_m(point_count: int, avg_speed: Optional[float]) -> float:
    return (avg_speed or 0) * point_count * SECONDS_PER_POINT


def build_month_health(raw: Dict[str, Any]) -> Dict[str, Any]:
    month = raw["month"]
    return {"month": month, "days_in_month": days_in_month(month), **health_period_stats(raw)}


def _mode_breakdown(per_mode: Dict[TransportMode, Dict[str, float]]) -> List[Dict[str, Any]]:
    rows = []
    for mode in TransportMode:
        data = per_mode.get(mode)
        if not data:
            continue
        display = transport_mode_display(mode)
        rows.append(
            {
                "mode": mode.value,
                "emoji": display["emoji"],
                "label": display["label"],
                "slots": int(data["slots"]),
                "minutes": int(data["slots"]) * SLOT_MINUTES,
                "distance_meters": round_half_up(data["distance"]),
            }
        )
    return rows


def build_month_footprint(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Per-day track distance comes from the slot aggregator when points exist,
    otherwise from the day aggregate's point-count estimate."""
    month = raw["month"]
    day_aggs = raw.get("day_aggs") or []
    points_by_day = group_by(raw.get("track_points") or [], lambda row: row["track_date"])

    daily_distance: Dict[str, float] = {}
    daily_points: Dict[str, int] = {}
    per_mode: Dict[TransportMode, Dict[str, float]] = {}
    for agg in day_aggs:
        day = agg["day"]
        daily_points[day] = agg.get("point_count") or 0
        daily_distance[day] = estimated_distance_m(daily_points[day], agg.get("avg_speed"))

    for day, rows in points_by_day.items():
        aggregation = aggregate_footprint_data(track_points(rows))
        daily_distance[day] = aggregation.total_distance
        daily_points.setdefault(day, len(rows))
        for slot in aggregation.slots:
            entry = per_mode.setdefault(slot.mode, {"slots": 0, "distance": 0.0})
            entry["slots"] += 1
            entry["distance"] += slot.distance_meters

    month_agg = raw.get("month_agg")
    total_points = month_agg["point_count"] if month_agg else sum(daily_points.values())
    speeds = [agg["avg_speed"] for agg in day_aggs if agg.get("avg_speed") is not None]
    bounds = bounds_from_day_aggs(day_aggs)

    return {
        "month": month,
        "days_in_month": days_in_month(month),
        "days_with_data": len(daily_points),
        "total_distance": round_half_up(sum(daily_distance.values())),
        "total_track_points": total_points,
        "avg_speed": sum(speeds) / len(speeds) if speeds else 0,
        "by_transport_mode": _mode_breakdown(per_mode),
        "daily_distance": [{"date": d, "value": v} for d, v in sorted(daily_distance.items())],
        "daily_track_points": [{"date": d, "value": v} for d, v in sorted(daily_points.items())],
        "bounds": bounds,
    }


def bounds_from_day_aggs(day_aggs: List[Dict[str, Any]]) -> Optional[Dict[str, float]]:
    def pick(key, fn):
        values = [agg[key] for agg in day_aggs if agg.get(key) is not None]
        return fn(values) if values else None

    bounds = {
        "min_lat": pick("min_lat", min),
        "max_lat": pick("max_lat", max),
        "min_lon": pick("min_lon", min),
        "max_lon": pick("max_lon", max),
    }
    if any(value is None for value in bounds.values()):
        return None
    return bounds


def build_month_pixiu(raw: Dict[str, Any]) -> Dict[str, Any]:
    month = raw["month"]
    transactions = raw.get("transactions") or []
    day_aggs = raw.get("day_aggs") or []
    totals = totals_from_agg(raw.get("month_agg"), transactions)
    days = len(day_aggs)

    top = sorted((t for t in transactions if (t.get("outflow") or 0) > 0), key=lambda t: t["outflow"], reverse=True)
    return {
        "month": month,
        "days_in_month": days_in_month(month),
        "days_with_data": days,
        "total_income": totals["income"],
        "total_expense": totals["expense"],
        "total_net": totals["net"],
        "transaction_count": totals["transaction_count"],
        "avg_daily_expense": totals["expense"] / days if days else 0,
        "avg_daily_income": totals["income"] / days if days else 0,
        "expense_by_category": category_breakdown(transactions, income=False),
        "income_by_category": category_breakdown(transactions, income=True),
        "by_account": account_breakdown(transactions),
        "daily_income": [{"date": a["day"], "value": a["income"]} for a in day_aggs],
        "daily_expense": [{"date": a["day"], "value": a["expense"]} for a in day_aggs],
        "daily_net": [{"date": a["day"], "value": a["net"]} for a in day_aggs],
        "top_expenses": [
            {
                "date": t["tx_date"][:10],
                "category": t.get("category_l2"),
                "amount": t["outflow"],
                "note": t.get("note") or "",
            }
            for t in top[:TOP_EXPENSES]
        ],
    }


def build_period_summary(
    health: Optional[Dict[str, Any]],
    footprint: Optional[Dict[str, Any]],
    pixiu: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """Headline numbers of a month or year view; a missing source contributes nothing."""
    health = health or {}
    footprint = footprint or {}
    pixiu = pixiu or {}
    steps = health.get("steps") or {}
    heart_rate = health.get("heart_rate") or {}
    activity = health.get("activity") or {}
    sleep = health.get("sleep") or {}
    workouts = health.get("workouts") or {}
    return {
        "total_steps": steps.get("total_steps", 0),
        "avg_heart_rate": heart_rate.get("avg_heart_rate"),
        "total_active_energy": activity.get("total_active_energy"),
        "total_exercise_minutes": activity.get("total_exercise_minutes"),
        "avg_sleep_hours": sleep.get("avg_duration"),
        "total_workouts": workouts.get("total_workouts", 0),
        "total_distance": footprint.get("total_distance"),
        "days_with_tracking": footprint.get("days_with_data", 0),
        "total_income": pixiu.get("total_income", 0),
        "total_expense": pixiu.get("total_expense", 0),
        "total_net": pixiu.get("total_net", 0),
        "transaction_count": pixiu.get("transaction_count", 0),
    }
