"""Input records for the timeline engine.

These are the already-normalised shapes produced by ``services.views.day``
from raw SQLite rows: times are ``HH:MM`` strings unless noted otherwise.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

SLEEP_STAGE_TYPES = ("deep", "core", "rem", "awake")


@dataclass
class SleepStage:
    type: str
    start: str
    end: str
    duration: int = 0


@dataclass
class SleepRecord:
    start: str
    end: str
    duration: int
    stages: List[SleepStage] = field(default_factory=list)
    deep_minutes: int = 0
    core_minutes: int = 0
    rem_minutes: int = 0
    awake_minutes: int = 0


@dataclass
class TimedReading:
    time: str
    value: float


@dataclass
class MetricSummary:
    avg: float
    min: float
    max: float
    records: List[TimedReading] = field(default_factory=list)


@dataclass
class HeartRateSummary(MetricSummary):
    resting_heart_rate: Optional[int] = None
    walking_average: Optional[int] = None


@dataclass
class HourlySteps:
    hour: int
    count: int


@dataclass
class HourlyDistance:
    hour: int
    distance: float  # km


@dataclass
class DistanceSummary:
    total: float
    records: List[HourlyDistance] = field(default_factory=list)


@dataclass
class WaterRecord:
    time: str
    amount: int  # ml


@dataclass
class WorkoutRecord:
    id: str
    type: str
    type_name: str
    start: str  # full timestamp
    end: str
    duration: int = 0
    distance: Optional[float] = None
    calories: Optional[float] = None


@dataclass
class ActivitySummary:
    active_energy: float = 0
    exercise_minutes: float = 0
    stand_hours: float = 0


@dataclass
class DayHealthData:
    date: str
    sleep: Optional[SleepRecord] = None
    heart_rate: Optional[HeartRateSummary] = None
    steps: List[HourlySteps] = field(default_factory=list)
    total_steps: int = 0
    distance: Optional[DistanceSummary] = None
    oxygen_saturation: Optional[MetricSummary] = None
    respiratory_rate: Optional[MetricSummary] = None
    hrv: Optional[MetricSummary] = None
    water: List[WaterRecord] = field(default_factory=list)
    total_water: int = 0
    workouts: List[WorkoutRecord] = field(default_factory=list)
    activity: Optional[ActivitySummary] = None
    flights_climbed: int = 0
    sleeping_wrist_temperature: Optional[float] = None


@dataclass
class TrackPoint:
    ts: str
    lat: float
    lon: float
    ele: Optional[float] = None
    speed: Optional[float] = None  # m/s
