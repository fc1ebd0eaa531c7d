from typing import Any, Dict

from packages.db import connect, fetch_all, fetch_one
from services.views.periods import month_date_range, previous_day, year_date_range

SLEEP_TYPE = "HKCategoryTypeIdentifierSleepAnalysis"

RECORD_COLUMNS = """
    id, type, unit, value, source_name, source_version, device,
    creation_date, start_date, end_date, day, timezone
"""
WORKOUT_COLUMNS = """
    id, workout_type, duration, total_distance, total_energy,
    source_name, device, creation_date, start_date, end_date, day
"""
ACTIVITY_COLUMNS = """
    id, date_components, active_energy, exercise_time,
    stand_hours, movement_energy, day
"""


class AppleHealthSource:
    name = "applehealth"

    def get_day_data(self, date: str) -> Dict[str, Any]:
        with connect(self.name) as conn:
            records = fetch_all(
                conn,
                f"SELECT {RECORD_COLUMNS} FROM apple_record WHERE day = ? ORDER BY start_date",
                (date,),
            )
            # Overnight sleep that started the evening before is filed under the previous day.
            prev_sleep = fetch_all(
                conn,
                f"""
                SELECT {RECORD_COLUMNS}
                FROM apple_record
                WHERE day = ? AND type = ?
                ORDER BY start_date
                """,
                (previous_day(date), SLEEP_TYPE),
            )
            workouts = fetch_all(
                conn,
                f"SELECT {WORKOUT_COLUMNS} FROM apple_workout WHERE day = ? ORDER BY start_date",
                (date,),
            )
            activity = fetch_one(
                conn,
                f"SELECT {ACTIVITY_COLUMNS} FROM apple_activity_summary WHERE day = ?",
                (date,),
            )
        return {
            "date": date,
            "records": prev_sleep + records,
            "workouts": workouts,
            "activity_summary": activity,
        }

    def _range_data(self, start: str, end: str) -> Dict[str, Any]:
        with connect(self.name) as conn:
            records = fetch_all(
                conn,
                f"SELECT {RECORD_COLUMNS} FROM apple_record WHERE day >= ? AND day <= ? ORDER BY start_date",
                (start, end),
            )
            workouts = fetch_all(
                conn,
                f"SELECT {WORKOUT_COLUMNS} FROM apple_workout WHERE day >= ? AND day <= ? ORDER BY start_date",
                (start, end),
            )
            summaries = fetch_all(
                conn,
                f"SELECT {ACTIVITY_COLUMNS} FROM apple_activity_summary WHERE day >= ? AND day <= ? ORDER BY day",
                (start, end),
            )
        return {"records": records, "workouts": workouts, "activity_summaries": summaries}

    def get_month_data(self, month: str) -> Dict[str, Any]:
        start, end = month_date_range(month)
        return {"month": month, **self._range_data(start, end)}

    def get_year_data(self, year: int) -> Dict[str, Any]:
        start, end = year_date_range(year)
        return {"year": year, **self._range_data(start, end)}
