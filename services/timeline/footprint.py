"""Aggregate GPS track points into quarter-hour slots.

Each populated slot gets a point count, an average speed (explicit device
speed, or one derived from the previous point), an average elevation and a
transport mode. Elevation is reported as a hysteresis trace: the first slot
with elevation is the reference, later slots only report a delta once the
change from the last reported elevation reaches ``ELEVATION_THRESHOLD_M``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .geo import haversine_distance_m
from .models import FootprintAggregation, MovementSegment, SlotTrackData
from .records import TrackPoint
from .slots import (
    SLOTS_PER_DAY,
    SLOT_MINUTES,
    TimestampParseError,
    extract_time,
    parse_timestamp,
    round_half_up,
    slot_index_to_time,
    time_to_slot_index,
)
from .transport import MODE_PRIORITY, TransportMode, detect_transport_mode, transport_mode_display

logger = logging.getLogger("lifelog.timeline")

ELEVATION_THRESHOLD_M = 10
MIN_SEGMENT_MINUTES = 30
MAX_SEGMENT_GAP_SLOTS = 2
MPS_TO_KMH = 3.6


@dataclass
class _TimedPoint:
    point: TrackPoint
    at: datetime
    slot_index: int


@dataclass
class _SlotBucket:
    point_count: int = 0
    speeds: List[float] = field(default_factory=list)
    elevations: List[float] = field(default_factory=list)
    distance_m: float = 0.0


def _prepare_points(points: Iterable[TrackPoint]) -> List[_TimedPoint]:
    timed: List[_TimedPoint] = []
    dropped = 0
    for point in points:
        at = parse_timestamp(point.ts)
        try:
            slot_index = time_to_slot_index(extract_time(point.ts))
        except TimestampParseError:
            dropped += 1
            continue
        if at is None:
            dropped += 1
            continue
        timed.append(_TimedPoint(point=point, at=at, slot_index=slot_index))
    if dropped:
        logger.warning("track_points_dropped count=%s reason=unparseable_ts", dropped)
    timed.sort(key=lambda tp: tp.at.timestamp())
    return timed


def _mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _bucket_points(timed: List[_TimedPoint]) -> Tuple[Dict[int, _SlotBucket], float]:
    buckets: Dict[int, _SlotBucket] = {}
    total_distance = 0.0
    prev: Optional[_TimedPoint] = None
    for current in timed:
        bucket = buckets.setdefault(current.slot_index, _SlotBucket())
        bucket.point_count += 1

        step_m = 0.0
        if prev is not None:
            step_m = haversine_distance_m(prev.point.lat, prev.point.lon, current.point.lat, current.point.lon)
            total_distance += step_m
            bucket.distance_m += step_m

        speed = current.point.speed
        if speed is None and prev is not None:
            elapsed = current.at.timestamp() - prev.at.timestamp()
            if elapsed > 0:
                speed = step_m / elapsed
        if speed is not None and speed >= 0:
            bucket.speeds.append(speed)

        if current.point.ele is not None:
            bucket.elevations.append(current.point.ele)
        prev = current
    return buckets, total_distance


def _dominant_mode(slots: Sequence[SlotTrackData]) -> TransportMode:
    modes = {slot.mode for slot in slots}
    for mode in MODE_PRIORITY:
        if mode in modes:
            return mode
    return TransportMode.STATIONARY


def _distance_in_range(timed: List[_TimedPoint], start_slot: int, end_slot: int) -> float:
    distance = 0.0
    for prev, current in zip(timed, timed[1:]):
        if prev.slot_index >= start_slot and current.slot_index <= end_slot:
            distance += haversine_distance_m(prev.point.lat, prev.point.lon, current.point.lat, current.point.lon)
    return distance


def _build_segment(run: List[SlotTrackData], timed: List[_TimedPoint]) -> MovementSegment:
    first, last = run[0], run[-1]
    duration = (last.slot_index - first.slot_index + 1) * SLOT_MINUTES
    distance = _distance_in_range(timed, first.slot_index, last.slot_index)
    avg_kmh = (distance / 1000) / (duration / 60) if duration > 0 else 0.0
    return MovementSegment(
        start_slot_index=first.slot_index,
        end_slot_index=last.slot_index,
        start_time=first.slot_label,
        end_time=slot_index_to_time((last.slot_index + 1) % SLOTS_PER_DAY),
        mode=_dominant_mode(run),
        duration_minutes=duration,
        distance_meters=distance,
        avg_speed_kmh=avg_kmh,
    )


def detect_movement_segments(slots: List[SlotTrackData], timed: List[_TimedPoint]) -> List[MovementSegment]:
    segments: List[MovementSegment] = []
    run: List[SlotTrackData] = []

    def close_run():
        if run:
            segment = _build_segment(run, timed)
            if segment.duration_minutes >= MIN_SEGMENT_MINUTES:
                segments.append(segment)

    for slot in sorted(slots, key=lambda s: s.slot_index):
        if slot.mode == TransportMode.STATIONARY:
            close_run()
            run = []
            continue
        if run and slot.slot_index - run[-1].slot_index > MAX_SEGMENT_GAP_SLOTS:
            close_run()
            run = []
        run.append(slot)
    close_run()
    return segments


def aggregate_footprint_data(points: Iterable[TrackPoint]) -> FootprintAggregation:
    timed = _prepare_points(points)
    if not timed:
        return FootprintAggregation()

    buckets, total_distance = _bucket_points(timed)

    slots: List[SlotTrackData] = []
    reference_elevation: Optional[float] = None
    last_displayed: Optional[float] = None
    for slot_index in sorted(buckets):
        bucket = buckets[slot_index]
        avg_speed = _mean(bucket.speeds) or 0.0
        avg_kmh = avg_speed * MPS_TO_KMH
        avg_elevation = _mean(bucket.elevations)

        is_reference = False
        delta: Optional[int] = None
        if avg_elevation is not None:
            if last_displayed is None:
                reference_elevation = avg_elevation
                last_displayed = avg_elevation
                is_reference = True
            else:
                change = avg_elevation - last_displayed
                if abs(change) >= ELEVATION_THRESHOLD_M:
                    delta = round_half_up(change)
                    last_displayed = avg_elevation

        slots.append(
            SlotTrackData(
                slot_index=slot_index,
                slot_label=slot_index_to_time(slot_index),
                point_count=bucket.point_count,
                avg_speed_mps=avg_speed,
                avg_speed_kmh=avg_kmh,
                avg_elevation=avg_elevation,
                elevation_delta=delta,
                is_elevation_reference=is_reference,
                mode=detect_transport_mode(avg_kmh),
                distance_meters=bucket.distance_m,
            )
        )

    return FootprintAggregation(
        slots=slots,
        slot_map={slot.slot_index: slot for slot in slots},
        total_distance=total_distance,
        reference_elevation=reference_elevation,
        movement_segments=detect_movement_segments(slots, timed),
    )


def format_elevation(slot: SlotTrackData) -> Optional[str]:
    if slot.is_elevation_reference and slot.avg_elevation is not None:
        return f"⛰{round_half_up(slot.avg_elevation)}m"
    if slot.elevation_delta is not None:
        sign = "+" if slot.elevation_delta > 0 else ""
        return f"⛰{sign}{slot.elevation_delta}m"
    return None


def format_speed(speed_kmh: float) -> str:
    if speed_kmh < 1:
        return ""
    return f"{speed_kmh:.1f}km/h"


def format_duration(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h{mins}m" if mins > 0 else f"{hours}h"
    return f"{mins}m"


def format_distance(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f}km"
    return f"{round_half_up(meters)}m"


def format_movement_summary(segment: MovementSegment) -> str:
    display = transport_mode_display(segment.mode)
    return (
        f"{display['emoji']}{display['label']} {format_duration(segment.duration_minutes)}"
        f" · {format_distance(segment.distance_meters)} · 均速{segment.avg_speed_kmh:.1f}km/h"
    )
