from __future__ import annotations

from typing import Any, Dict

from .health_stats import health_period_stats
from .ledger import account_breakdown, category_breakdown, totals_from_agg
from .month import SECONDS_PER_POINT, bounds_from_day_aggs, estimated_distance_m
from .periods import days_in_year

TOP_EXPENSE_MONTHS = 3


def build_year_health(raw: Dict[str, Any]) -> Dict[str, Any]:
    year = raw["year"]
    return {"year": year, "days_in_year": days_in_year(year), **health_period_stats(raw, monthly=True)}


def build_year_footprint(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Year totals are estimated from the importer's aggregates; track points
    are never loaded for a whole year."""
    year = raw["year"]
    day_aggs = raw.get("day_aggs") or []

    daily_distance = {}
    monthly: Dict[str, Dict[str, float]] = {}
    for agg in day_aggs:
        distance = estimated_distance_m(agg.get("point_count") or 0, agg.get("avg_speed"))
        daily_distance[agg["day"]] = distance
        entry = monthly.setdefault(agg["day"][:7], {"points": 0, "distance": 0.0})
        entry["points"] += agg.get("point_count") or 0
        entry["distance"] += distance
    for agg in raw.get("month_aggs") or []:
        entry = monthly.setdefault(agg["month"], {"points": 0, "distance": 0.0})
        entry["points"] = agg["point_count"]

    speeds = [agg["avg_speed"] for agg in day_aggs if agg.get("avg_speed") is not None]
    avg_speed = sum(speeds) / len(speeds) if speeds else 0
    year_agg = raw.get("year_agg")
    if year_agg:
        total_distance = year_agg["point_count"] * SECONDS_PER_POINT * avg_speed
    else:
        total_distance = sum(daily_distance.values())

    return {
        "year": year,
        "days_in_year": days_in_year(year),
        "days_with_data": len(day_aggs),
        "total_distance": total_distance,
        "total_track_points": year_agg["point_count"] if year_agg else 0,
        "avg_speed": avg_speed,
        "monthly_distance": [{"month": m, "value": d["distance"]} for m, d in sorted(monthly.items())],
        "monthly_track_points": [{"month": m, "value": d["points"]} for m, d in sorted(monthly.items())],
        "daily_distance": [{"date": d, "value": v} for d, v in sorted(daily_distance.items())],
        "bounds": bounds_from_day_aggs(day_aggs),
    }


def build_year_pixiu(raw: Dict[str, Any]) -> Dict[str, Any]:
    year = raw["year"]
    transactions = raw.get("transactions") or []
    month_aggs = raw.get("month_aggs") or []
    day_aggs = raw.get("day_aggs") or []
    totals = totals_from_agg(raw.get("year_agg"), transactions)
    months = len(month_aggs)

    top_months = sorted(month_aggs, key=lambda m: m["expense"], reverse=True)[:TOP_EXPENSE_MONTHS]
    return {
        "year": year,
        "days_in_year": days_in_year(year),
        "days_with_data": len(day_aggs),
        "total_income": totals["income"],
        "total_expense": totals["expense"],
        "total_net": totals["net"],
        "transaction_count": totals["transaction_count"],
        "avg_monthly_expense": totals["expense"] / months if months else 0,
        "avg_monthly_income": totals["income"] / months if months else 0,
        "expense_by_category": category_breakdown(transactions, income=False),
        "income_by_category": category_breakdown(transactions, income=True),
        "by_account": account_breakdown(transactions),
        "monthly_income": [{"month": m["month"], "value": m["income"]} for m in month_aggs],
        "monthly_expense": [{"month": m["month"], "value": m["expense"]} for m in month_aggs],
        "monthly_net": [{"month": m["month"], "value": m["net"]} for m in month_aggs],
        "daily_expense": [{"date": d["day"], "value": d["expense"]} for d in day_aggs],
        "top_expense_months": [{"month": m["month"], "amount": m["expense"]} for m in top_months],
    }
