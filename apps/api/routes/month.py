from typing import Optional

from fastapi import APIRouter

from services.sources.applehealth import AppleHealthSource
from services.sources.footprint import FootprintSource
from services.sources.pixiu import PixiuSource
from services.views.month import (
    build_month_footprint,
    build_month_health,
    build_month_pixiu,
    build_period_summary,
)
from services.views.periods import days_in_month, is_historical_month, parse_month

from ..schemas import MonthResponse, PeriodFootprintResponse, PeriodHealthResponse, PeriodPixiuResponse
from ..utils import cached_view, optional_view, require_period, sources_status, view_or_missing


router = APIRouter()


def _health(month: str):
    return cached_view(
        f"month:applehealth:{month}",
        "applehealth",
        is_historical_month(month),
        lambda: build_month_health(AppleHealthSource().get_month_data(month)),
    )


def _footprint(month: str):
    return cached_view(
        f"month:footprint:{month}",
        "footprint",
        is_historical_month(month),
        lambda: build_month_footprint(FootprintSource().get_month_data(month)),
    )


def _pixiu(month: str):
    return cached_view(
        f"month:pixiu:{month}",
        "pixiu",
        is_historical_month(month),
        lambda: build_month_pixiu(PixiuSource().get_month_data(month)),
    )


@router.get("/month/applehealth", response_model=PeriodHealthResponse)
def month_applehealth(month: Optional[str] = None):
    require_period(parse_month, month)
    return view_or_missing("applehealth", lambda: _health(month))


@router.get("/month/footprint", response_model=PeriodFootprintResponse)
def month_footprint(month: Optional[str] = None):
    require_period(parse_month, month)
    return view_or_missing("footprint", lambda: _footprint(month))


@router.get("/month/pixiu", response_model=PeriodPixiuResponse)
def month_pixiu(month: Optional[str] = None):
    require_period(parse_month, month)
    return view_or_missing("pixiu", lambda: _pixiu(month))


@router.get("/month", response_model=MonthResponse)
def month_summary(month: Optional[str] = None):
    require_period(parse_month, month)
    health = optional_view("applehealth", lambda: _health(month))
    footprint = optional_view("footprint", lambda: _footprint(month))
    pixiu = optional_view("pixiu", lambda: _pixiu(month))
    return {
        "month": month,
        "days_in_month": days_in_month(month),
        "summary": build_period_summary(health, footprint, pixiu),
        "sources": sources_status(),
    }
