from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class DBMissingResponse(BaseModel):
    db: Optional[str] = None


class ErrorDetail(BaseModel):
    code: str
    message: str
    request_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    sources: Dict[str, bool] = Field(default_factory=dict)


class DayHealthResponse(DBMissingResponse):
    date: Optional[str] = None
    sleep: Optional[Dict[str, Any]] = None
    heart_rate: Optional[Dict[str, Any]] = None
    steps: List[Dict[str, Any]] = Field(default_factory=list)
    total_steps: int = 0
    distance: Optional[Dict[str, Any]] = None
    oxygen_saturation: Optional[Dict[str, Any]] = None
    respiratory_rate: Optional[Dict[str, Any]] = None
    hrv: Optional[Dict[str, Any]] = None
    water: List[Dict[str, Any]] = Field(default_factory=list)
    total_water: int = 0
    workouts: List[Dict[str, Any]] = Field(default_factory=list)
    activity: Optional[Dict[str, Any]] = None
    flights_climbed: int = 0
    sleeping_wrist_temperature: Optional[float] = None


class TrackSummary(BaseModel):
    point_count: int
    total_distance: float
    avg_speed: float
    min_time: str
    max_time: str


class DayFootprintResponse(DBMissingResponse):
    date: Optional[str] = None
    summary: Optional[TrackSummary] = None
    track_points: List[Dict[str, Any]] = Field(default_factory=list)


class LedgerTotals(BaseModel):
    income: float
    expense: float
    net: float
    transaction_count: int


class Transaction(BaseModel):
    id: str
    time: Optional[str] = None
    category_l1: Optional[str] = None
    category_l2: Optional[str] = None
    amount: float
    is_income: bool
    account: Optional[str] = None
    tags: Optional[str] = None
    note: Optional[str] = None


class DayPixiuResponse(DBMissingResponse):
    date: Optional[str] = None
    summary: Optional[LedgerTotals] = None
    transactions: List[Transaction] = Field(default_factory=list)
    expense_by_category: List[Dict[str, Any]] = Field(default_factory=list)
    income_by_category: List[Dict[str, Any]] = Field(default_factory=list)


class TimelineSlot(BaseModel):
    slot: str
    hour: int
    quarter: int
    items: List[Dict[str, Any]] = Field(default_factory=list)
    has_data: bool


class DayTimelineResponse(BaseModel):
    date: str
    slots: List[TimelineSlot] = Field(default_factory=list)
    footprint: Dict[str, Any] = Field(default_factory=dict)
    sun: List[Dict[str, Any]] = Field(default_factory=list)


class DayResponse(BaseModel):
    date: str
    summary: Dict[str, Any]
    applehealth: Optional[Dict[str, Any]] = None
    footprint: Optional[Dict[str, Any]] = None
    pixiu: Optional[Dict[str, Any]] = None


class PeriodHealthResponse(DBMissingResponse):
    month: Optional[str] = None
    year: Optional[int] = None
    days_in_month: Optional[int] = None
    days_in_year: Optional[int] = None
    days_with_data: int = 0
    sleep: Optional[Dict[str, Any]] = None
    heart_rate: Optional[Dict[str, Any]] = None
    steps: Optional[Dict[str, Any]] = None
    activity: Optional[Dict[str, Any]] = None
    distance: Optional[Dict[str, Any]] = None
    workouts: Optional[Dict[str, Any]] = None
    hrv: Optional[Dict[str, Any]] = None
    oxygen: Optional[Dict[str, Any]] = None


class Bounds(BaseModel):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float


class PeriodFootprintResponse(DBMissingResponse):
    month: Optional[str] = None
    year: Optional[int] = None
    days_in_month: Optional[int] = None
    days_in_year: Optional[int] = None
    days_with_data: int = 0
    total_distance: float = 0
    total_track_points: int = 0
    avg_speed: float = 0
    by_transport_mode: Optional[List[Dict[str, Any]]] = None
    daily_distance: List[Dict[str, Any]] = Field(default_factory=list)
    daily_track_points: Optional[List[Dict[str, Any]]] = None
    monthly_distance: Optional[List[Dict[str, Any]]] = None
    monthly_track_points: Optional[List[Dict[str, Any]]] = None
    bounds: Optional[Bounds] = None


class PeriodPixiuResponse(DBMissingResponse):
    month: Optional[str] = None
    year: Optional[int] = None
    days_in_month: Optional[int] = None
    days_in_year: Optional[int] = None
    days_with_data: int = 0
    total_income: float = 0
    total_expense: float = 0
    total_net: float = 0
    transaction_count: int = 0
    avg_daily_expense: Optional[float] = None
    avg_daily_income: Optional[float] = None
    avg_monthly_expense: Optional[float] = None
    avg_monthly_income: Optional[float] = None
    expense_by_category: List[Dict[str, Any]] = Field(default_factory=list)
    income_by_category: List[Dict[str, Any]] = Field(default_factory=list)
    by_account: List[Dict[str, Any]] = Field(default_factory=list)
    daily_income: Optional[List[Dict[str, Any]]] = None
    daily_expense: Optional[List[Dict[str, Any]]] = None
    daily_net: Optional[List[Dict[str, Any]]] = None
    monthly_income: Optional[List[Dict[str, Any]]] = None
    monthly_expense: Optional[List[Dict[str, Any]]] = None
    monthly_net: Optional[List[Dict[str, Any]]] = None
    top_expenses: Optional[List[Dict[str, Any]]] = None
    top_expense_months: Optional[List[Dict[str, Any]]] = None


class PeriodSummary(BaseModel):
    total_steps: int = 0
    avg_heart_rate: Optional[float] = None
    total_active_energy: Optional[float] = None
    total_exercise_minutes: Optional[float] = None
    avg_sleep_hours: Optional[float] = None
    total_workouts: int = 0
    total_distance: Optional[float] = None
    days_with_tracking: int = 0
    total_income: float = 0
    total_expense: float = 0
    total_net: float = 0
    transaction_count: int = 0


class MonthResponse(BaseModel):
    month: str
    days_in_month: int
    summary: PeriodSummary
    sources: Dict[str, bool] = Field(default_factory=dict)


class YearResponse(BaseModel):
    year: int
    days_in_year: int
    summary: PeriodSummary
    sources: Dict[str, bool] = Field(default_factory=dict)
