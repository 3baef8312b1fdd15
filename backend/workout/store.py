"""In-memory workout collection and its persisted blob."""

from __future__ import annotations

import json
import logging
from typing import Iterator

from backend.core.config import STORAGE_KEY
from backend.workout.model import Workout, reconstruct, to_record
from backend.workout.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class WorkoutStore:
    """Owns the ordered workout collection.

    The whole collection is persisted as a single JSON array under one key.
    Loading never raises: a missing or unreadable blob means no workouts, and
    a record that cannot be rebuilt is skipped.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._workouts: list[Workout] = []

    def __len__(self) -> int:
        return len(self._workouts)

    def __iter__(self) -> Iterator[Workout]:
        return iter(tuple(self._workouts))

    def add(self, workout: Workout) -> None:
        if self.get(workout.id) is not None:
            raise ValueError(f"Workout id {workout.id} already stored")
        self._workouts.append(workout)
        logger.info("Added %s workout %s", workout.kind, workout.id)

    def all(self) -> tuple[Workout, ...]:
        return tuple(self._workouts)

    def get(self, workout_id: str) -> Workout | None:
        for workout in self._workouts:
            if workout.id == workout_id:
                return workout
        return None

    def save(self) -> None:
        payload = [to_record(workout) for workout in self._workouts]
        self._storage.set(self._key, json.dumps(payload, ensure_ascii=True))
        logger.info("Saved %d workouts", len(payload))

    def load(self) -> tuple[Workout, ...]:
        self._workouts = []
        try:
            raw = self._storage.get(self._key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable workout blob: %s", exc)
            return ()
        if raw is None:
            return ()

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Ignoring unreadable workout blob: %s", exc)
            return ()
        if not isinstance(data, list):
            logger.warning("Ignoring workout blob: expected a list, got %s", type(data).__name__)
            return ()

        for i, item in enumerate(data):
            try:
                workout = reconstruct(item)
            except (ValueError, OverflowError) as exc:
                logger.warning("Skipping stored workout %d: %s", i + 1, exc)
                continue
            if self.get(workout.id) is not None:
                logger.warning("Skipping stored workout %d: duplicate id %s", i + 1, workout.id)
                continue
            self._workouts.append(workout)

        logger.info("Loaded %d of %d stored workouts", len(self._workouts), len(data))
        return tuple(self._workouts)

    def reset(self) -> None:
        self._storage.clear()
        self._workouts = []
        logger.info("Workout storage reset")
