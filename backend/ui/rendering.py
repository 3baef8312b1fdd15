"""Translate workouts into map-marker and list-entry descriptions."""

from __future__ import annotations

from dataclasses import dataclass

from backend.workout.model import Coords, Workout

PACE_ICON = "🏃"
SPEED_ICON = "🚴"
DURATION_ICON = "⏱️"
METRIC_ICON = "⚡"
EXTRA_ICON_BY_KIND: dict[str, str] = {
    "running": "👣",
    "cycling": "⛰",
    "swimming": "🏊",
}


@dataclass(frozen=True)
class MapMarker:
    workout_id: str
    coords: Coords
    icon: str
    caption: str
    popup_class: str


@dataclass(frozen=True)
class ListDetail:
    icon: str
    value: str
    unit: str


@dataclass(frozen=True)
class ListEntry:
    workout_id: str
    kind: str
    title: str
    details: tuple[ListDetail, ...]


def _fmt_number(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


def _fmt_plain(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def icon_for(kind: str) -> str:
    return SPEED_ICON if kind == "cycling" else PACE_ICON


def to_map_marker(workout: Workout) -> MapMarker:
    icon = icon_for(workout.kind)
    return MapMarker(
        workout_id=workout.id,
        coords=workout.coords,
        icon=icon,
        caption=f"{icon} {workout.description}",
        popup_class=f"workout-popup {workout.kind}-popup",
    )


def _metric_detail(workout: Workout) -> ListDetail:
    unit = "km/h" if workout.kind == "cycling" else "min/km"
    return ListDetail(METRIC_ICON, _fmt_number(workout.metric), unit)


def _extra_detail(workout: Workout) -> ListDetail:
    unit = "spm" if workout.kind == "running" else "m"
    return ListDetail(EXTRA_ICON_BY_KIND[workout.kind], _fmt_plain(workout.extra), unit)


def to_list_entry(workout: Workout) -> ListEntry:
    return ListEntry(
        workout_id=workout.id,
        kind=workout.kind,
        title=workout.description,
        details=(
            ListDetail(icon_for(workout.kind), _fmt_plain(workout.distance_km), "km"),
            ListDetail(DURATION_ICON, _fmt_plain(workout.duration_min), "min"),
            _metric_detail(workout),
            _extra_detail(workout),
        ),
    )
