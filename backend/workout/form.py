"""Raw workout form parsing and validation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

from backend.workout.model import WORKOUT_KINDS, WorkoutKind

# Raw form keys carrying the kind-specific value.
EXTRA_INPUT_BY_KIND: dict[str, str] = {
    "running": "cadence_spm",
    "cycling": "elevation_gain_m",
    "swimming": "length_m",
}

EXTRA_LABEL_BY_KIND: dict[str, str] = {
    "running": "Cadence",
    "cycling": "Elevation gain",
    "swimming": "Swim length",
}


class WorkoutInputError(ValueError):
    """Raised when submitted form values are not a valid workout."""


@dataclass(frozen=True)
class WorkoutInput:
    kind: WorkoutKind
    distance_km: float
    duration_min: float
    extra: float


def parse_kind(raw: object) -> WorkoutKind:
    kind = str(raw or "").strip().lower()
    if kind not in WORKOUT_KINDS:
        raise WorkoutInputError(f"Unknown workout type '{raw}'")
    return kind  # type: ignore[return-value]


def parse_workout_form(
    fields: Mapping[str, object],
    *,
    allow_zero_elevation: bool = False,
) -> WorkoutInput:
    """Validate raw form values for the selected kind.

    Distance, duration and the kind-specific value must be finite and
    strictly positive. With ``allow_zero_elevation`` a cycling elevation of
    zero is accepted.
    """
    kind = parse_kind(fields.get("kind"))
    distance_km = _parse_number_field(raw=fields.get("distance_km"), label="Distance")
    duration_min = _parse_number_field(raw=fields.get("duration_min"), label="Duration")
    extra_label = EXTRA_LABEL_BY_KIND[kind]
    extra = _parse_number_field(
        raw=fields.get(EXTRA_INPUT_BY_KIND[kind]),
        label=extra_label,
    )

    if distance_km <= 0:
        raise WorkoutInputError("Distance must be > 0")
    if duration_min <= 0:
        raise WorkoutInputError("Duration must be > 0")
    if kind == "cycling" and allow_zero_elevation:
        if extra < 0:
            raise WorkoutInputError(f"{extra_label} must be >= 0")
    elif extra <= 0:
        raise WorkoutInputError(f"{extra_label} must be > 0")
    if kind == "running" and extra != int(extra):
        raise WorkoutInputError(f"{extra_label} must be a whole number")

    return WorkoutInput(
        kind=kind,
        distance_km=distance_km,
        duration_min=duration_min,
        extra=int(extra) if kind == "running" else extra,
    )


def _parse_number_field(*, raw: object, label: str) -> float:
    if raw is None or isinstance(raw, bool):
        raise WorkoutInputError(f"{label} is required")
    text = str(raw).strip()
    if not text:
        raise WorkoutInputError(f"{label} is required")
    try:
        value = float(text)
    except ValueError as exc:
        raise WorkoutInputError(f"{label} must be a number") from exc
    if not math.isfinite(value):
        raise WorkoutInputError(f"{label} must be a finite number")
    return value
