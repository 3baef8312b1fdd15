from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from backend.workout.model import create_workout, to_record
from backend.workout.storage import FileStorage, MemoryStorage
from backend.workout.store import WorkoutStore

START = datetime(2026, 3, 14, 9, 0, tzinfo=timezone.utc)


def _workouts():
    return (
        create_workout("running", (51.5, -0.1), 5, 25, 178, created_at=START),
        create_workout("cycling", (51.6, -0.2), 20, 60, 150, created_at=START + timedelta(hours=1)),
        create_workout("swimming", (51.4, -0.3), 1.2, 30, 25, created_at=START + timedelta(hours=2)),
    )


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    store = WorkoutStore(FileStorage(tmp_path))
    for workout in _workouts():
        store.add(workout)
    store.save()

    reloaded = WorkoutStore(FileStorage(tmp_path))
    loaded = reloaded.load()

    assert loaded == _workouts()
    assert reloaded.all() == _workouts()
    assert [w.kind for w in reloaded] == ["running", "cycling", "swimming"]


def test_blob_is_single_json_array(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path)
    store = WorkoutStore(storage)
    store.add(_workouts()[0])
    store.save()

    payload = json.loads(storage.path_for("workout").read_text(encoding="utf-8"))

    assert len(payload) == 1
    assert payload[0]["kind"] == "running"
    assert payload[0]["paceMinPerKm"] == 5.0


def test_repeated_save_load_cycles_are_stable() -> None:
    storage = MemoryStorage()
    store = WorkoutStore(storage)
    for workout in _workouts():
        store.add(workout)
    store.save()
    first_blob = storage.get("workout")

    for _ in range(3):
        store = WorkoutStore(storage)
        store.load()
        store.save()

    assert storage.get("workout") == first_blob
    assert store.all() == _workouts()


def test_load_missing_blob_is_empty(tmp_path: Path) -> None:
    store = WorkoutStore(FileStorage(tmp_path / "nothing-here"))

    assert store.load() == ()
    assert len(store) == 0


@pytest.mark.parametrize("blob", ["{not json", '{"kind": "running"}', "null", '"text"', "42"])
def test_load_corrupt_blob_is_empty(blob: str) -> None:
    storage = MemoryStorage()
    storage.set("workout", blob)
    store = WorkoutStore(storage)

    assert store.load() == ()
    assert store.all() == ()


def test_load_skips_unknown_kind_record() -> None:
    running, cycling, _ = _workouts()
    foreign = to_record(running)
    foreign.update(kind="rowing", id="9999999999")
    storage = MemoryStorage()
    storage.set("workout", json.dumps([to_record(running), foreign, to_record(cycling)]))

    store = WorkoutStore(storage)

    assert store.load() == (running, cycling)


def test_load_skips_malformed_and_duplicate_records() -> None:
    running, cycling, _ = _workouts()
    broken = to_record(cycling)
    del broken["coords"]
    storage = MemoryStorage()
    storage.set(
        "workout",
        json.dumps([to_record(running), broken, "junk", to_record(running)]),
    )

    store = WorkoutStore(storage)

    assert store.load() == (running,)


def test_add_rejects_duplicate_id() -> None:
    running = _workouts()[0]
    store = WorkoutStore(MemoryStorage())
    store.add(running)

    with pytest.raises(ValueError):
        store.add(running)
    assert len(store) == 1


def test_get_by_id() -> None:
    store = WorkoutStore(MemoryStorage())
    for workout in _workouts():
        store.add(workout)

    cycling = _workouts()[1]
    assert store.get(cycling.id) == cycling
    assert store.get("missing") is None


def test_reset_then_load_is_empty(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path)
    store = WorkoutStore(storage)
    for workout in _workouts():
        store.add(workout)
    store.save()

    store.reset()

    assert store.all() == ()
    assert storage.get("workout") is None
    assert WorkoutStore(storage).load() == ()


def test_all_is_a_read_only_snapshot() -> None:
    store = WorkoutStore(MemoryStorage())
    store.add(_workouts()[0])

    snapshot = store.all()
    store.add(_workouts()[1])

    assert len(snapshot) == 1
    assert isinstance(snapshot, tuple)


def test_file_storage_clear_keeps_unrelated_files(tmp_path: Path) -> None:
    notes = tmp_path / "notes.json"
    notes.write_text("{}", encoding="utf-8")
    storage = FileStorage(tmp_path)
    storage.set("workout", "[]")
    storage.set("other", "x")

    storage.clear()

    assert storage.get("workout") is None
    assert storage.get("other") is None
    assert notes.exists()


def test_load_blob_with_invalid_utf8_is_empty(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path)
    target = storage.path_for("workout")
    target.parent.mkdir(parents=True)
    target.write_bytes(b"[\xff\xfe]")

    store = WorkoutStore(storage)

    assert store.load() == ()
    assert store.all() == ()


def test_load_deeply_nested_blob_is_empty() -> None:
    storage = MemoryStorage()
    storage.set("workout", "[" * 100000 + "]" * 100000)

    store = WorkoutStore(storage)

    assert store.load() == ()


def test_load_skips_record_with_huge_number() -> None:
    running, cycling, _ = _workouts()
    oversized = to_record(cycling)
    oversized["distanceKm"] = 10**400
    storage = MemoryStorage()
    storage.set("workout", json.dumps([to_record(running), oversized]))

    assert WorkoutStore(storage).load() == (running,)
