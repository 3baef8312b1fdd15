"""Session controller binding map/form/list events to the workout store."""

from __future__ import annotations

import enum
import logging
from typing import Callable, Literal, Mapping, Protocol

from backend.core.config import DEFAULT_ZOOM_LEVEL
from backend.ui.rendering import ListEntry, MapMarker, to_list_entry, to_map_marker
from backend.workout.form import WorkoutInputError, parse_kind, parse_workout_form
from backend.workout.model import Coords, Workout, create_workout
from backend.workout.store import WorkoutStore

logger = logging.getLogger(__name__)

NoticeLevel = Literal["info", "positive", "negative", "warning"]


class MapView(Protocol):
    def initialize(self, center: Coords, zoom: int) -> None: ...

    def add_marker(self, marker: MapMarker) -> None: ...

    def set_view(self, center: Coords, zoom: int, animate: bool) -> None: ...


class FormView(Protocol):
    def show(self) -> None: ...

    def hide(self) -> None: ...

    def reset(self) -> None: ...

    def show_extra_field(self, kind: str) -> None: ...


class ListView(Protocol):
    def append(self, entry: ListEntry) -> None: ...


class Notifier(Protocol):
    def notify(self, message: str, level: NoticeLevel = "info") -> None: ...


class SessionState(enum.Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"


class SessionController:
    """Interaction state machine for one user session.

    The hosting shell binds its own event sources to the ``on_*`` handlers.
    Every handler is synchronous and runs to completion.
    """

    def __init__(
        self,
        store: WorkoutStore,
        map_view: MapView,
        form: FormView,
        list_view: ListView,
        notifier: Notifier,
        *,
        zoom_level: int = DEFAULT_ZOOM_LEVEL,
        on_reload: Callable[[], None] | None = None,
        allow_zero_elevation: bool = False,
    ) -> None:
        self._store = store
        self._map = map_view
        self._form = form
        self._list = list_view
        self._notifier = notifier
        self._zoom_level = zoom_level
        self._on_reload = on_reload
        self._allow_zero_elevation = allow_zero_elevation
        self.state = SessionState.IDLE
        self.pending_coords: Coords | None = None
        self.map_ready = False
        self._location_failure_reported = False

    @property
    def workouts(self) -> tuple[Workout, ...]:
        return self._store.all()

    def start(self) -> tuple[Workout, ...]:
        restored = self._store.load()
        for workout in restored:
            self._list.append(to_list_entry(workout))
        if self.map_ready:
            for workout in restored:
                self._map.add_marker(to_map_marker(workout))
        logger.info("Session started with %d stored workouts", len(restored))
        return restored

    def on_location_resolved(self, coords: Coords) -> None:
        if self.map_ready:
            self._map.set_view(coords, self._zoom_level, animate=False)
            return
        self._map.initialize(coords, self._zoom_level)
        self.map_ready = True
        for workout in self._store.all():
            self._map.add_marker(to_map_marker(workout))

    def on_location_failed(self, reason: str) -> None:
        if self._location_failure_reported:
            logger.debug("Repeated location failure ignored: %s", reason)
            return
        self._location_failure_reported = True
        logger.warning("Could not get current position: %s", reason)
        self._notifier.notify(f"Could not get your position: {reason}", "warning")

    def on_map_click(self, coords: Coords) -> None:
        if not self.map_ready:
            logger.debug("Map click ignored: map not initialized")
            return
        self.pending_coords = coords
        self.state = SessionState.AWAITING_INPUT
        self._form.show()

    def on_kind_change(self, kind: str) -> None:
        try:
            self._form.show_extra_field(parse_kind(kind))
        except WorkoutInputError as exc:
            logger.debug("Kind change ignored: %s", exc)

    def on_submit(self, fields: Mapping[str, object]) -> Workout | None:
        if self.state is not SessionState.AWAITING_INPUT or self.pending_coords is None:
            logger.debug("Submit ignored: no map position selected")
            return None

        try:
            parsed = parse_workout_form(
                fields,
                allow_zero_elevation=self._allow_zero_elevation,
            )
        except WorkoutInputError as exc:
            self._notifier.notify(f"Invalid workout: {exc}", "negative")
            return None

        workout = create_workout(
            parsed.kind,
            self.pending_coords,
            parsed.distance_km,
            parsed.duration_min,
            parsed.extra,
        )
        try:
            self._store.add(workout)
        except ValueError as exc:
            logger.warning("Workout not added: %s", exc)
            self._notifier.notify("Workout not saved, please submit again", "negative")
            return None
        self._map.add_marker(to_map_marker(workout))
        self._list.append(to_list_entry(workout))
        self._store.save()
        self._close_form()
        return workout

    def on_cancel(self) -> None:
        self._close_form()

    def on_list_click(self, workout_id: str | None) -> None:
        if not workout_id or not self.map_ready:
            return
        workout = self._store.get(workout_id)
        if workout is None:
            logger.debug("List click on unknown workout %s", workout_id)
            return
        self._map.set_view(workout.coords, self._zoom_level, animate=True)

    def on_reset(self) -> None:
        self._store.reset()
        self._close_form()
        if self._on_reload is not None:
            self._on_reload()

    def _close_form(self) -> None:
        self._form.reset()
        self._form.hide()
        self.pending_coords = None
        self.state = SessionState.IDLE
