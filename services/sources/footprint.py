from typing import Any, Dict

from packages.db import connect, fetch_all, fetch_one
from services.views.periods import month_date_range, year_date_range

SOURCE = "footprint"

POINT_COLUMNS = "id, source, track_date, ts, lat, lon, ele, speed, course"
DAY_AGG_COLUMNS = """
    source, day, point_count, min_ts, max_ts, avg_speed,
    min_lat, max_lat, min_lon, max_lon
"""


class FootprintSource:
    name = "footprint"

    def get_day_data(self, date: str) -> Dict[str, Any]:
        with connect(self.name) as conn:
            points = fetch_all(
                conn,
                f"SELECT {POINT_COLUMNS} FROM track_point WHERE source = ? AND track_date = ? ORDER BY ts",
                (SOURCE, date),
            )
            day_agg = fetch_one(
                conn,
                f"SELECT {DAY_AGG_COLUMNS} FROM track_day_agg WHERE source = ? AND day = ?",
                (SOURCE, date),
            )
        return {"date": date, "track_points": points, "day_agg": day_agg}

    def get_month_data(self, month: str) -> Dict[str, Any]:
        start, end = month_date_range(month)
        with connect(self.name) as conn:
            day_aggs = fetch_all(
                conn,
                f"""
                SELECT {DAY_AGG_COLUMNS}
                FROM track_day_agg
                WHERE source = ? AND day >= ? AND day <= ?
                ORDER BY day
                """,
                (SOURCE, start, end),
            )
            month_agg = fetch_one(
                conn,
                "SELECT source, month, point_count FROM track_month_agg WHERE source = ? AND month = ?",
                (SOURCE, month),
            )
            points = fetch_all(
                conn,
                f"""
                SELECT {POINT_COLUMNS}
                FROM track_point
                WHERE source = ? AND track_date >= ? AND track_date <= ?
                ORDER BY ts
                """,
                (SOURCE, start, end),
            )
        return {"month": month, "day_aggs": day_aggs, "month_agg": month_agg, "track_points": points}

    def get_year_data(self, year: int) -> Dict[str, Any]:
        start, end = year_date_range(year)
        with connect(self.name) as conn:
            day_aggs = fetch_all(
                conn,
                f"""
                SELECT {DAY_AGG_COLUMNS}
                FROM track_day_agg
                WHERE source = ? AND day >= ? AND day <= ?
                ORDER BY day
                """,
                (SOURCE, start, end),
            )
            month_aggs = fetch_all(
                conn,
                """
                SELECT source, month, point_count
                FROM track_month_agg
                WHERE source = ? AND month >= ? AND month <= ?
                ORDER BY month
                """,
                (SOURCE, f"{year}-01", f"{year}-12"),
            )
            year_agg = fetch_one(
                conn,
                "SELECT source, year, point_count FROM track_year_agg WHERE source = ? AND year = ?",
                (SOURCE, year),
            )
        return {"year": year, "day_aggs": day_aggs, "month_aggs": month_aggs, "year_agg": year_agg}
