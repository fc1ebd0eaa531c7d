from enum import Enum
from typing import Dict, Tuple


class TransportMode(str, Enum):
    STATIONARY = "stationary"
    WALKING = "walking"
    CYCLING = "cycling"
    DRIVING = "driving"


# Upper bounds in km/h; anything at or above the cycling bound is driving.
STATIONARY_MAX_KMH = 1.0
WALKING_MAX_KMH = 12.0
CYCLING_MAX_KMH = 35.0

_DISPLAY: Dict[TransportMode, Tuple[str, str]] = {
    TransportMode.WALKING: ("🚶", "步行"),
    TransportMode.CYCLING: ("🚴", "骑行"),
    TransportMode.DRIVING: ("🚗", "驾车"),
    TransportMode.STATIONARY: ("📍", "停留"),
}

# Dominant-mode priority for a movement segment, fastest first.
MODE_PRIORITY = (TransportMode.DRIVING, TransportMode.CYCLING, TransportMode.WALKING)


def detect_transport_mode(speed_kmh: float) -> TransportMode:
    if speed_kmh < STATIONARY_MAX_KMH:
        return TransportMode.STATIONARY
    if speed_kmh < WALKING_MAX_KMH:
        return TransportMode.WALKING
    if speed_kmh < CYCLING_MAX_KMH:
        return TransportMode.CYCLING
    return TransportMode.DRIVING


def transport_mode_display(mode: TransportMode) -> Dict[str, str]:
    emoji, label = _DISPLAY[mode]
    return {"emoji": emoji, "label": label}
