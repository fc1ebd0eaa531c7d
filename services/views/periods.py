"""Date, month and year period helpers used by sources, views and routes."""
from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
YEAR_RE = re.compile(r"^\d{4}$")


class InvalidPeriodError(ValueError):
    pass


def parse_date(value: Optional[str]) -> date:
    if not value:
        raise InvalidPeriodError("Missing required parameter: date")
    if not DATE_RE.match(value):
        raise InvalidPeriodError("Invalid date format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidPeriodError("Invalid date format. Use YYYY-MM-DD") from None


def parse_month(value: Optional[str]) -> Tuple[int, int]:
    if not value:
        raise InvalidPeriodError("Missing required parameter: month")
    if not MONTH_RE.match(value):
        raise InvalidPeriodError("Invalid month format. Use YYYY-MM")
    year, month = (int(part) for part in value.split("-"))
    if not 1 <= month <= 12:
        raise InvalidPeriodError("Invalid month format. Use YYYY-MM")
    return year, month


def parse_year(value: Optional[str]) -> int:
    if not value:
        raise InvalidPeriodError("Missing required parameter: year")
    if not YEAR_RE.match(value):
        raise InvalidPeriodError("Invalid year format. Use YYYY")
    return int(value)


def previous_day(value: str) -> str:
    return (date.fromisoformat(value) - timedelta(days=1)).isoformat()


def days_in_month(month: str) -> int:
    year, mon = parse_month(month)
    return calendar.monthrange(year, mon)[1]


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def month_date_range(month: str) -> Tuple[str, str]:
    return f"{month}-01", f"{month}-{days_in_month(month):02d}"


def year_date_range(year: int) -> Tuple[str, str]:
    return f"{year}-01-01", f"{year}-12-31"


def is_historical_month(month: str, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return month < f"{now.year}-{now.month:02d}"


def is_historical_year(year: int, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return year < now.year
