"""Output shapes of the timeline engine."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .transport import TransportMode


class TimelineDataType(str, Enum):
    SLEEP_DEEP = "sleep-deep"
    SLEEP_CORE = "sleep-core"
    SLEEP_REM = "sleep-rem"
    SLEEP_AWAKE = "sleep-awake"
    WORKOUT = "workout"
    HEART_RATE = "heartRate"
    HRV = "hrv"
    OXYGEN_SATURATION = "oxygenSaturation"
    RESPIRATORY_RATE = "respiratoryRate"
    WATER = "water"
    STEPS = "steps"
    DISTANCE = "distance"

    @property
    def side(self) -> str:
        return "left" if self in _LEFT_SIDE else "right"

    @property
    def color(self) -> str:
        return _COLORS[self]


# Duration/state signals sit on the left of the timeline, instant metrics on the right.
_LEFT_SIDE = frozenset(
    {
        TimelineDataType.SLEEP_DEEP,
        TimelineDataType.SLEEP_CORE,
        TimelineDataType.SLEEP_REM,
        TimelineDataType.SLEEP_AWAKE,
        TimelineDataType.WORKOUT,
        TimelineDataType.WATER,
    }
)

_COLORS: Dict[TimelineDataType, str] = {
    TimelineDataType.SLEEP_DEEP: "bg-indigo-800",
    TimelineDataType.SLEEP_CORE: "bg-indigo-600",
    TimelineDataType.SLEEP_REM: "bg-purple-700",
    TimelineDataType.SLEEP_AWAKE: "bg-slate-600",
    TimelineDataType.WORKOUT: "bg-emerald-700",
    TimelineDataType.WATER: "bg-blue-700",
    TimelineDataType.HEART_RATE: "bg-rose-700",
    TimelineDataType.HRV: "bg-orange-700",
    TimelineDataType.OXYGEN_SATURATION: "bg-sky-700",
    TimelineDataType.RESPIRATORY_RATE: "bg-cyan-700",
    TimelineDataType.STEPS: "bg-amber-700",
    TimelineDataType.DISTANCE: "bg-lime-700",
}


@dataclass
class TimelineItem:
    type: TimelineDataType
    label: str
    value: Optional[float] = None

    @property
    def side(self) -> str:
        return self.type.side

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "label": self.label,
            "value": self.value,
            "side": self.side,
            "color": self.type.color,
        }


@dataclass
class TimeSlot:
    slot_label: str
    hour: int
    quarter: int
    items: List[TimelineItem] = field(default_factory=list)
    has_data: bool = False

    @property
    def index(self) -> int:
        return self.hour * 4 + self.quarter

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot": self.slot_label,
            "hour": self.hour,
            "quarter": self.quarter,
            "items": [item.to_dict() for item in self.items],
            "has_data": self.has_data,
        }


@dataclass
class SlotTrackData:
    slot_index: int
    slot_label: str
    point_count: int
    avg_speed_mps: float
    avg_speed_kmh: float
    avg_elevation: Optional[float]
    elevation_delta: Optional[int]
    is_elevation_reference: bool
    mode: TransportMode
    distance_meters: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data


@dataclass
class MovementSegment:
    start_slot_index: int
    end_slot_index: int
    start_time: str
    end_time: str
    mode: TransportMode
    duration_minutes: int
    distance_meters: float
    avg_speed_kmh: float

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data


@dataclass
class FootprintAggregation:
    slots: List[SlotTrackData] = field(default_factory=list)
    slot_map: Dict[int, SlotTrackData] = field(default_factory=dict)
    total_distance: float = 0.0
    reference_elevation: Optional[float] = None
    movement_segments: List[MovementSegment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slots": [slot.to_dict() for slot in self.slots],
            "total_distance": self.total_distance,
            "reference_elevation": self.reference_elevation,
            "movement_segments": [seg.to_dict() for seg in self.movement_segments],
        }
