from typing import Optional

from fastapi import APIRouter

from packages.db import source_exists
from services.sources.applehealth import AppleHealthSource
from services.sources.footprint import FootprintSource
from services.sources.pixiu import PixiuSource
from services.views.day import (
    build_day_footprint,
    build_day_health,
    build_day_pixiu,
    build_day_summary,
    build_day_timeline,
    day_health_payload,
    empty_day_health,
)
from services.views.periods import parse_date

from ..schemas import (
    DayFootprintResponse,
    DayHealthResponse,
    DayPixiuResponse,
    DayResponse,
    DayTimelineResponse,
)
from ..utils import optional_view, require_period, view_or_missing


router = APIRouter()


def _day_health(date: str):
    if not source_exists("applehealth"):
        return empty_day_health(date)
    return build_day_health(AppleHealthSource().get_day_data(date))


@router.get("/day/applehealth", response_model=DayHealthResponse)
def day_applehealth(date: Optional[str] = None):
    require_period(parse_date, date)
    return view_or_missing(
        "applehealth", lambda: day_health_payload(build_day_health(AppleHealthSource().get_day_data(date)))
    )


@router.get("/day/footprint", response_model=DayFootprintResponse)
def day_footprint(date: Optional[str] = None):
    require_period(parse_date, date)
    return view_or_missing("footprint", lambda: build_day_footprint(FootprintSource().get_day_data(date)))


@router.get("/day/pixiu", response_model=DayPixiuResponse)
def day_pixiu(date: Optional[str] = None):
    require_period(parse_date, date)
    return view_or_missing("pixiu", lambda: build_day_pixiu(PixiuSource().get_day_data(date)))


@router.get("/day/timeline", response_model=DayTimelineResponse)
def day_timeline(date: Optional[str] = None):
    require_period(parse_date, date)
    health = _day_health(date)
    track_rows = optional_view("footprint", lambda: FootprintSource().get_day_data(date)["track_points"]) or []
    return build_day_timeline(date, health, track_rows)


@router.get("/day", response_model=DayResponse)
def day(date: Optional[str] = None):
    require_period(parse_date, date)
    health = _day_health(date)
    footprint = optional_view("footprint", lambda: build_day_footprint(FootprintSource().get_day_data(date)))
    pixiu = optional_view("pixiu", lambda: build_day_pixiu(PixiuSource().get_day_data(date)))
    return {
        "date": date,
        "summary": build_day_summary(date, health, footprint, pixiu),
        "applehealth": day_health_payload(health) if source_exists("applehealth") else None,
        "footprint": footprint,
        "pixiu": pixiu,
    }
