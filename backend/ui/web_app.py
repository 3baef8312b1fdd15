"""NiceGUI web UI: map, workout form and workout list."""

from __future__ import annotations

import logging
from typing import Any, Callable

from nicegui import ui

from backend.core.config import TILE_ATTRIBUTION, TILE_URL_TEMPLATE, AppConfig
from backend.ui.controller import NoticeLevel, SessionController
from backend.ui.rendering import ListEntry, MapMarker
from backend.workout.form import EXTRA_INPUT_BY_KIND, EXTRA_LABEL_BY_KIND
from backend.workout.model import Coords
from backend.workout.storage import FileStorage
from backend.workout.store import WorkoutStore

logger = logging.getLogger(__name__)

KIND_OPTIONS = {"running": "Running", "cycling": "Cycling", "swimming": "Swimming"}
EXTRA_UNIT_BY_KIND = {"running": "spm", "cycling": "m", "swimming": "m"}
POPUP_OPTIONS: dict[str, Any] = {
    "maxWidth": 250,
    "minWidth": 100,
    "autoClose": False,
    "closeOnClick": False,
}

# Resolves to {lat, lng} or {error}; never rejects.
GEOLOCATION_JS = """
new Promise((resolve) => {
  if (!navigator.geolocation) {
    resolve({error: 'Geolocation is not supported by this browser'});
    return;
  }
  navigator.geolocation.getCurrentPosition(
    (pos) => resolve({lat: pos.coords.latitude, lng: pos.coords.longitude}),
    (err) => resolve({error: err.message || 'Permission denied'}),
  );
})
"""

PAGE_STYLE = """
<style>
  body { background: #2d3439; color: #ececec; font-family: Arial, "Segoe UI", sans-serif; }
  .wm-sidebar { background: #2d3439; width: 420px; padding: 24px; }
  .wm-form { background: #42484d; border-radius: 8px; }
  .wm-entry { background: #42484d; border-radius: 8px; border-left: 5px solid #00c46a; cursor: pointer; }
  .wm-entry.cycling { border-left-color: #ffb545; }
  .wm-entry.swimming { border-left-color: #38bdf8; }
  .leaflet-popup .leaflet-popup-content-wrapper { background: #2d3439; color: #ececec; border-radius: 5px; }
  .running-popup .leaflet-popup-content-wrapper { border-left: 5px solid #00c46a; }
  .cycling-popup .leaflet-popup-content-wrapper { border-left: 5px solid #ffb545; }
  .swimming-popup .leaflet-popup-content-wrapper { border-left: 5px solid #38bdf8; }
</style>
"""


class LeafletMapView:
    """Creates the leaflet map lazily, once a center is known."""

    def __init__(self, container: ui.element, on_click: Callable[[Coords], None]) -> None:
        self._container = container
        self._on_click = on_click
        self._map: ui.leaflet | None = None
        self._pending_popups: list[tuple[Any, MapMarker]] = []

    def initialize(self, center: Coords, zoom: int) -> None:
        with self._container:
            self._map = ui.leaflet(center=center, zoom=zoom).classes("w-full h-full")
        self._map.clear_layers()
        self._map.tile_layer(
            url_template=TILE_URL_TEMPLATE,
            options={"attribution": TILE_ATTRIBUTION},
        )
        self._map.on("map-click", self._handle_click)
        self._map.on("init", lambda _: self._open_pending_popups())

    def add_marker(self, marker: MapMarker) -> None:
        if self._map is None:
            return
        layer = self._map.marker(latlng=marker.coords)
        if self._map.is_initialized:
            self._open_popup(layer, marker)
        else:
            self._pending_popups.append((layer, marker))

    def set_view(self, center: Coords, zoom: int, animate: bool) -> None:
        if self._map is None:
            return
        self._map.run_map_method(
            "setView",
            list(center),
            zoom,
            {"animate": animate, "pan": {"duration": 1}},
        )

    def _handle_click(self, e: Any) -> None:
        latlng = e.args.get("latlng") or {}
        try:
            coords = (float(latlng["lat"]), float(latlng["lng"]))
        except (KeyError, TypeError, ValueError):
            logger.debug("Map click without coordinates: %s", e.args)
            return
        self._on_click(coords)

    def _open_pending_popups(self) -> None:
        pending, self._pending_popups = self._pending_popups, []
        for layer, marker in pending:
            self._open_popup(layer, marker)

    @staticmethod
    def _open_popup(layer: Any, marker: MapMarker) -> None:
        layer.run_method(
            "bindPopup",
            marker.caption,
            {**POPUP_OPTIONS, "className": marker.popup_class},
        )
        layer.run_method("openPopup")


class WorkoutFormView:
    def __init__(self) -> None:
        with ui.card().classes("w-full wm-form") as card:
            self.card = card
            with ui.row().classes("w-full no-wrap"):
                self.kind_select = ui.select(KIND_OPTIONS, value="running", label="Type").classes("w-1/2")
                self.distance_input = ui.input("Distance (km)").props("type=number").classes("w-1/2")
            with ui.row().classes("w-full no-wrap"):
                self.duration_input = ui.input("Duration (min)").props("type=number").classes("w-1/2")
                self.extra_inputs: dict[str, ui.input] = {}
                for kind, key in EXTRA_INPUT_BY_KIND.items():
                    label = f"{EXTRA_LABEL_BY_KIND[kind]} ({EXTRA_UNIT_BY_KIND[kind]})"
                    self.extra_inputs[key] = ui.input(label).props("type=number").classes("w-1/2")
            with ui.row().classes("w-full justify-end"):
                self.cancel_btn = ui.button("Cancel").props("flat color=white")
                self.save_btn = ui.button("Save").props("color=positive")
        self.show_extra_field("running")
        self.hide()

    def inputs(self) -> list[ui.input]:
        return [self.distance_input, self.duration_input, *self.extra_inputs.values()]

    def values(self) -> dict[str, object]:
        out: dict[str, object] = {"kind": self.kind_select.value}
        out["distance_km"] = self.distance_input.value
        out["duration_min"] = self.duration_input.value
        for key, inp in self.extra_inputs.items():
            out[key] = inp.value
        return out

    def show(self) -> None:
        self.card.set_visibility(True)
        self.distance_input.run_method("focus")

    def hide(self) -> None:
        self.card.set_visibility(False)

    def reset(self) -> None:
        for inp in self.inputs():
            inp.value = ""

    def show_extra_field(self, kind: str) -> None:
        visible_key = EXTRA_INPUT_BY_KIND.get(kind)
        for key, inp in self.extra_inputs.items():
            inp.set_visibility(key == visible_key)


class WorkoutListView:
    def __init__(self, on_click: Callable[[str], None]) -> None:
        self._on_click = on_click
        self.container = ui.column().classes("w-full gap-3")

    def append(self, entry: ListEntry) -> None:
        with self.container:
            with ui.card().classes(f"w-full wm-entry {entry.kind}") as card:
                ui.label(entry.title).classes("text-lg font-bold")
                with ui.row().classes("w-full justify-between"):
                    for detail in entry.details:
                        ui.label(f"{detail.icon} {detail.value} {detail.unit}")
        card.on("click", lambda _, workout_id=entry.workout_id: self._on_click(workout_id))


class NotifyNotifier:
    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        ui.notify(message, type=level)


def _parse_geolocation(result: object) -> Coords | str:
    if not isinstance(result, dict):
        return "No position returned"
    if "error" in result:
        return str(result["error"])
    try:
        return (float(result["lat"]), float(result["lng"]))
    except (KeyError, TypeError, ValueError):
        return "Malformed position"


def run_web_ui(config: AppConfig) -> int:
    @ui.page("/")
    async def index() -> None:
        ui.add_head_html(PAGE_STYLE)
        store = WorkoutStore(FileStorage(config.data_dir), key=config.storage_key)
        controller: SessionController | None = None

        def on_map_click(coords: Coords) -> None:
            if controller is not None:
                controller.on_map_click(coords)

        def on_list_click(workout_id: str) -> None:
            if controller is not None:
                controller.on_list_click(workout_id)

        with ui.row().classes("w-full h-screen no-wrap gap-0"):
            with ui.column().classes("wm-sidebar h-full no-wrap overflow-auto"):
                ui.label("Workout Map").classes("text-2xl font-bold")
                map_status = ui.label("Locating you...").classes("text-sm")
                form = WorkoutFormView()
                list_view = WorkoutListView(on_click=on_list_click)
                reset_btn = ui.button("Reset workouts").props("outline color=negative")
            map_area = ui.column().classes("grow h-full")

        map_view = LeafletMapView(map_area, on_click=on_map_click)
        controller = SessionController(
            store,
            map_view,
            form,
            list_view,
            NotifyNotifier(),
            zoom_level=config.zoom_level,
            on_reload=ui.navigate.reload,
            allow_zero_elevation=config.allow_zero_elevation,
        )

        def on_submit() -> None:
            if controller.on_submit(form.values()) is not None:
                ui.notify("Workout saved", type="positive")

        form.kind_select.on_value_change(lambda e: controller.on_kind_change(str(e.value)))
        for inp in form.inputs():
            inp.on("keydown.enter", lambda _: on_submit())
        form.save_btn.on_click(on_submit)
        form.cancel_btn.on_click(controller.on_cancel)
        reset_btn.on_click(controller.on_reset)

        controller.start()

        await ui.context.client.connected()
        try:
            result = await ui.run_javascript(
                GEOLOCATION_JS,
                timeout=config.geolocation_timeout_sec,
            )
        except TimeoutError:
            result = {"error": "Timed out waiting for position"}

        position = _parse_geolocation(result)
        if isinstance(position, str):
            map_status.set_text("Map unavailable: location not shared")
            controller.on_location_failed(position)
        else:
            map_status.set_text("Click on the map to add a workout")
            controller.on_location_resolved(position)

    ui.run(host=config.web_host, port=config.web_port, reload=False, title="Workout Map")
    return 0
