"""Sun/moon backdrop for the day timeline.

A cosine approximation rather than an ephemeris: sunrise at 06:00, solar
noon at 12:00 and sunset at 18:00, every day of the year.
"""
import math
from typing import Any, Dict, List


def sun_altitude(hour: int, minute: int = 0) -> float:
    """Relative altitude in [-1, 1]; 1 is solar noon, -1 is midnight."""
    t = hour + minute / 60
    return math.cos((t - 12) * math.pi / 12)


def is_sun_up(hour: int, minute: int = 0) -> bool:
    return sun_altitude(hour, minute) > 0


def celestial_icon(hour: int) -> str:
    return "☀️" if is_sun_up(hour) else "🌙"


def sun_curve_position(hour: int, minute: int = 0) -> float:
    return (sun_altitude(hour, minute) + 1) * 50


def sky_color(hour: int) -> str:
    altitude = sun_altitude(hour)
    if altitude > 0.5:
        return "rgb(135, 206, 250)"
    if altitude > 0:
        return "rgb(255, 218, 185)"
    if altitude > -0.3:
        return "rgb(138, 123, 169)"
    return "rgb(25, 25, 112)"


def day_sun_track() -> List[Dict[str, Any]]:
    return [
        {
            "hour": hour,
            "altitude": round(sun_altitude(hour), 4),
            "icon": celestial_icon(hour),
            "curve_position": round(sun_curve_position(hour), 2),
            "sky_color": sky_color(hour),
        }
        for hour in range(24)
    ]
