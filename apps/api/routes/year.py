from typing import Optional

from fastapi import APIRouter

from services.sources.applehealth import AppleHealthSource
from services.sources.footprint import FootprintSource
from services.sources.pixiu import PixiuSource
from services.views.month import build_period_summary
from services.views.periods import days_in_year, is_historical_year, parse_year
from services.views.year import build_year_footprint, build_year_health, build_year_pixiu

from ..schemas import PeriodFootprintResponse, PeriodHealthResponse, PeriodPixiuResponse, YearResponse
from ..utils import cached_view, optional_view, require_period, sources_status, view_or_missing


router = APIRouter()


def _health(year: int):
    return cached_view(
        f"year:applehealth:{year}",
        "applehealth",
        is_historical_year(year),
        lambda: build_year_health(AppleHealthSource().get_year_data(year)),
    )


def _footprint(year: int):
    return cached_view(
        f"year:footprint:{year}",
        "footprint",
        is_historical_year(year),
        lambda: build_year_footprint(FootprintSource().get_year_data(year)),
    )


def _pixiu(year: int):
    return cached_view(
        f"year:pixiu:{year}",
        "pixiu",
        is_historical_year(year),
        lambda: build_year_pixiu(PixiuSource().get_year_data(year)),
    )


@router.get("/year/applehealth", response_model=PeriodHealthResponse)
def year_applehealth(year: Optional[str] = None):
    value = require_period(parse_year, year)
    return view_or_missing("applehealth", lambda: _health(value))


@router.get("/year/footprint", response_model=PeriodFootprintResponse)
def year_footprint(year: Optional[str] = None):
    value = require_period(parse_year, year)
    return view_or_missing("footprint", lambda: _footprint(value))


@router.get("/year/pixiu", response_model=PeriodPixiuResponse)
def year_pixiu(year: Optional[str] = None):
    value = require_period(parse_year, year)
    return view_or_missing("pixiu", lambda: _pixiu(value))


@router.get("/year", response_model=YearResponse)
def year_summary(year: Optional[str] = None):
    value = require_period(parse_year, year)
    health = optional_view("applehealth", lambda: _health(value))
    footprint = optional_view("footprint", lambda: _footprint(value))
    pixiu = optional_view("pixiu", lambda: _pixiu(value))
    return {
        "year": value,
        "days_in_year": days_in_year(value),
        "summary": build_period_summary(health, footprint, pixiu),
        "sources": sources_status(),
    }
