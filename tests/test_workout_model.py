from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from backend.workout.model import (
    Cycling,
    Running,
    Swimming,
    UnknownWorkoutKindError,
    WorkoutRecordError,
    build_description,
    compute_metric,
    create_workout,
    reconstruct,
    to_record,
)

CREATED = datetime(2026, 1, 5, 7, 30, 12, 345000, tzinfo=timezone.utc)


def test_running_pace_and_description() -> None:
    workout = create_workout("running", (51.5, -0.1), 5, 25, 178, created_at=CREATED)

    assert isinstance(workout, Running)
    assert workout.kind == "running"
    assert workout.pace_min_per_km == 5.0
    assert workout.cadence_spm == 178
    assert workout.description == "Running on Jan 5"
    assert workout.coords == (51.5, -0.1)
    assert workout.created_at == CREATED


def test_cycling_speed() -> None:
    workout = create_workout("cycling", (45.0, 6.0), 20, 60, 150, created_at=CREATED)

    assert isinstance(workout, Cycling)
    assert workout.speed_km_per_h == 20.0
    assert workout.elevation_gain_m == 150
    assert workout.description == "Cycling on Jan 5"


def test_swimming_pace_and_description() -> None:
    created = datetime(2026, 6, 21, 18, 0, tzinfo=timezone.utc)
    workout = create_workout("swimming", (43.3, 5.4), 1.5, 45, 50, created_at=created)

    assert isinstance(workout, Swimming)
    assert workout.pace_min_per_km == pytest.approx(30.0)
    assert workout.length_m == 50
    assert workout.description == "Swimming on June 21"


@pytest.mark.parametrize(
    ("distance_km", "duration_min"),
    [(1.0, 1.0), (5.0, 27.5), (42.195, 210.0), (0.4, 9.0)],
)
def test_metric_formulas(distance_km: float, duration_min: float) -> None:
    assert compute_metric("running", distance_km, duration_min) == duration_min / distance_km
    assert compute_metric("swimming", distance_km, duration_min) == duration_min / distance_km
    assert compute_metric("cycling", distance_km, duration_min) == distance_km / (
        duration_min / 60
    )


def test_id_derived_from_creation_time() -> None:
    workout = create_workout("running", (0.0, 0.0), 5, 25, 170, created_at=CREATED)

    assert workout.id == str(int(CREATED.timestamp() * 1000))[-10:]
    assert len(workout.id) == 10


def test_description_uses_fixed_month_labels() -> None:
    assert build_description("cycling", datetime(2026, 7, 4)) == "Cycling on July 4"
    assert build_description("running", datetime(2026, 12, 31)) == "Running on Dec 31"


def test_workout_is_immutable() -> None:
    workout = create_workout("running", (0.0, 0.0), 5, 25, 170, created_at=CREATED)

    with pytest.raises(AttributeError):
        workout.distance_km = 10  # type: ignore[misc]


def test_create_unknown_kind_raises() -> None:
    with pytest.raises(UnknownWorkoutKindError):
        create_workout("rowing", (0.0, 0.0), 5, 25, 10, created_at=CREATED)


def test_record_shape() -> None:
    workout = create_workout("running", (51.5, -0.1), 5, 25, 178, created_at=CREATED)

    record = to_record(workout)

    assert record == {
        "kind": "running",
        "id": workout.id,
        "createdAt": "2026-01-05T07:30:12.345000+00:00",
        "coords": [51.5, -0.1],
        "distanceKm": 5,
        "durationMin": 25,
        "description": "Running on Jan 5",
        "cadenceSpm": 178,
        "paceMinPerKm": 5.0,
    }


@pytest.mark.parametrize(
    ("kind", "extra"),
    [("running", 172), ("cycling", 340.0), ("swimming", 25.0)],
)
def test_reconstruct_round_trip_through_json(kind: str, extra: float) -> None:
    workout = create_workout(kind, (48.85, 2.35), 12.5, 61.0, extra, created_at=CREATED)

    once = reconstruct(json.loads(json.dumps(to_record(workout))))
    twice = reconstruct(json.loads(json.dumps(to_record(once))))

    assert once == workout
    assert twice == workout
    assert type(once) is type(workout)


def test_reconstruct_trusts_stored_values() -> None:
    workout = create_workout("cycling", (48.85, 2.35), 20, 60, 150, created_at=CREATED)
    record = to_record(workout)
    record["speedKmPerH"] = 99.0
    record["description"] = "Cycling on Mar 1"

    rebuilt = reconstruct(record)

    assert isinstance(rebuilt, Cycling)
    assert rebuilt.speed_km_per_h == 99.0
    assert rebuilt.description == "Cycling on Mar 1"


def test_reconstruct_unknown_kind() -> None:
    workout = create_workout("running", (0.0, 0.0), 5, 25, 170, created_at=CREATED)
    record = to_record(workout)
    record["kind"] = "rowing"

    with pytest.raises(UnknownWorkoutKindError):
        reconstruct(record)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda r: r.pop("distanceKm"),
        lambda r: r.update(coords=[1.0]),
        lambda r: r.update(coords=[float("nan"), 0.0]),
        lambda r: r.update(coords=[0.0, float("inf")]),
        lambda r: r.update(coords=[91.0, 0.0]),
        lambda r: r.update(coords=[0.0, -181.0]),
        lambda r: r.update(createdAt="yesterday"),
        lambda r: r.update(cadenceSpm="fast"),
        lambda r: r.update(paceMinPerKm=True),
        lambda r: r.update(id=""),
    ],
)
def test_reconstruct_malformed_record(mutate) -> None:
    workout = create_workout("running", (0.0, 0.0), 5, 25, 170, created_at=CREATED)
    record = to_record(workout)
    mutate(record)

    with pytest.raises(WorkoutRecordError):
        reconstruct(record)


def test_reconstruct_rejects_non_object() -> None:
    with pytest.raises(WorkoutRecordError):
        reconstruct(["running"])
