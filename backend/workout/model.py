"""Workout domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Union

WorkoutKind = Literal["running", "cycling", "swimming"]
Coords = tuple[float, float]

WORKOUT_KINDS: tuple[WorkoutKind, ...] = ("running", "cycling", "swimming")

# Fixed labels: descriptions must not follow the process locale.
MONTHS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "June",
    "July",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

EXTRA_FIELD_BY_KIND: dict[str, str] = {
    "running": "cadenceSpm",
    "cycling": "elevationGainM",
    "swimming": "lengthM",
}

METRIC_FIELD_BY_KIND: dict[str, str] = {
    "running": "paceMinPerKm",
    "cycling": "speedKmPerH",
    "swimming": "paceMinPerKm",
}


class UnknownWorkoutKindError(ValueError):
    """Raised when a workout kind is not one of running/cycling/swimming."""


class WorkoutRecordError(ValueError):
    """Raised when a stored workout record is missing or has bad fields."""


@dataclass(frozen=True)
class WorkoutBase:
    id: str
    created_at: datetime
    coords: Coords
    distance_km: float
    duration_min: float
    description: str


@dataclass(frozen=True)
class Running(WorkoutBase):
    cadence_spm: int
    pace_min_per_km: float
    kind: Literal["running"] = "running"

    @property
    def metric(self) -> float:
        return self.pace_min_per_km

    @property
    def extra(self) -> float:
        return self.cadence_spm


@dataclass(frozen=True)
class Cycling(WorkoutBase):
    elevation_gain_m: float
    speed_km_per_h: float
    kind: Literal["cycling"] = "cycling"

    @property
    def metric(self) -> float:
        return self.speed_km_per_h

    @property
    def extra(self) -> float:
        return self.elevation_gain_m


@dataclass(frozen=True)
class Swimming(WorkoutBase):
    length_m: float
    pace_min_per_km: float
    kind: Literal["swimming"] = "swimming"

    @property
    def metric(self) -> float:
        return self.pace_min_per_km

    @property
    def extra(self) -> float:
        return self.length_m


Workout = Union[Running, Cycling, Swimming]


def compute_metric(kind: str, distance_km: float, duration_min: float) -> float:
    """Pace (min/km) for running and swimming, speed (km/h) for cycling."""
    if kind in ("running", "swimming"):
        return duration_min / distance_km
    if kind == "cycling":
        return distance_km / (duration_min / 60)
    raise UnknownWorkoutKindError(f"Unknown workout kind '{kind}'")


def build_description(kind: str, created_at: datetime) -> str:
    if kind not in WORKOUT_KINDS:
        raise UnknownWorkoutKindError(f"Unknown workout kind '{kind}'")
    return f"{kind[0].upper()}{kind[1:]} on {MONTHS[created_at.month - 1]} {created_at.day}"


def workout_id_for(created_at: datetime) -> str:
    return str(int(created_at.timestamp() * 1000))[-10:]


def create_workout(
    kind: str,
    coords: Coords,
    distance_km: float,
    duration_min: float,
    extra: float,
    *,
    created_at: datetime | None = None,
) -> Workout:
    """Build a fresh workout from already-validated inputs.

    The id, description and derived metric are computed here, once.
    """
    when = created_at or datetime.now().astimezone()
    lat, lng = coords
    common: dict[str, Any] = {
        "id": workout_id_for(when),
        "created_at": when,
        "coords": (float(lat), float(lng)),
        "distance_km": distance_km,
        "duration_min": duration_min,
        "description": build_description(kind, when),
    }
    metric = compute_metric(kind, distance_km, duration_min)
    if kind == "running":
        return Running(**common, cadence_spm=int(extra), pace_min_per_km=metric)
    if kind == "cycling":
        return Cycling(**common, elevation_gain_m=extra, speed_km_per_h=metric)
    return Swimming(**common, length_m=extra, pace_min_per_km=metric)


def to_record(workout: Workout) -> dict[str, Any]:
    """Plain JSON-serializable record for one workout."""
    lat, lng = workout.coords
    return {
        "kind": workout.kind,
        "id": workout.id,
        "createdAt": workout.created_at.isoformat(),
        "coords": [lat, lng],
        "distanceKm": workout.distance_km,
        "durationMin": workout.duration_min,
        "description": workout.description,
        EXTRA_FIELD_BY_KIND[workout.kind]: workout.extra,
        METRIC_FIELD_BY_KIND[workout.kind]: workout.metric,
    }


def reconstruct(record: object) -> Workout:
    """Re-attach the variant identity to a stored record.

    Description and metric are taken from the record as stored.
    """
    if not isinstance(record, dict):
        raise WorkoutRecordError("Workout record must be an object")

    kind = record.get("kind")
    if kind not in WORKOUT_KINDS:
        raise UnknownWorkoutKindError(f"Unknown workout kind {kind!r}")

    id_obj = record.get("id")
    if not isinstance(id_obj, str) or not id_obj:
        raise WorkoutRecordError("Workout field 'id' must be a non-empty string")

    description = record.get("description")
    if not isinstance(description, str):
        raise WorkoutRecordError("Workout field 'description' must be a string")

    common: dict[str, Any] = {
        "id": id_obj,
        "created_at": _parse_created_at(record.get("createdAt")),
        "coords": _parse_coords(record.get("coords")),
        "distance_km": _parse_number(record, "distanceKm"),
        "duration_min": _parse_number(record, "durationMin"),
        "description": description,
    }
    extra = _parse_number(record, EXTRA_FIELD_BY_KIND[kind])
    metric = _parse_number(record, METRIC_FIELD_BY_KIND[kind])

    if kind == "running":
        if extra != int(extra):
            raise WorkoutRecordError("Workout field 'cadenceSpm' must be a whole number")
        return Running(**common, cadence_spm=int(extra), pace_min_per_km=metric)
    if kind == "cycling":
        return Cycling(**common, elevation_gain_m=extra, speed_km_per_h=metric)
    return Swimming(**common, length_m=extra, pace_min_per_km=metric)


def _parse_number(record: dict[str, Any], field_name: str) -> float:
    raw = record.get(field_name)
    # bool is an int subclass; true/false is never a valid measurement.
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise WorkoutRecordError(f"Workout field '{field_name}' must be a number")
    if not math.isfinite(raw):
        raise WorkoutRecordError(f"Workout field '{field_name}' must be finite")
    return raw


def _parse_coords(raw: object) -> Coords:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise WorkoutRecordError("Workout field 'coords' must be a [lat, lng] pair")
    lat, lng = raw
    for value in (lat, lng):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise WorkoutRecordError("Workout field 'coords' must hold numbers")
        if not math.isfinite(value):
            raise WorkoutRecordError("Workout field 'coords' must be finite")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise WorkoutRecordError(f"Workout field 'coords' out of range: {raw!r}")
    return (float(lat), float(lng))


def _parse_created_at(raw: object) -> datetime:
    if not isinstance(raw, str):
        raise WorkoutRecordError("Workout field 'createdAt' must be an ISO timestamp")
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise WorkoutRecordError(f"Invalid createdAt: {raw!r}") from exc
