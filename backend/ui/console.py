"""Headless views that print to the terminal."""

from __future__ import annotations

from backend.ui.controller import NoticeLevel
from backend.ui.rendering import ListEntry, MapMarker
from backend.workout.model import Coords


def format_list_entry(entry: ListEntry) -> str:
    details = "  ".join(f"{d.icon} {d.value} {d.unit}" for d in entry.details)
    return f"[{entry.workout_id}] {entry.title:<22} {details}"


class ConsoleView:
    """Map, form, list and notifier in one, for the CLI.

    There is no form on the terminal, so the form methods do nothing.
    """

    def __init__(self, show_markers: bool = False, echo_list: bool = True) -> None:
        self.show_markers = show_markers
        self.echo_list = echo_list
        self.center: Coords | None = None

    def initialize(self, center: Coords, zoom: int) -> None:
        self.center = center

    def add_marker(self, marker: MapMarker) -> None:
        if self.show_markers:
            lat, lng = marker.coords
            print(f"  marker {marker.caption} @ {lat:.5f},{lng:.5f}")

    def set_view(self, center: Coords, zoom: int, animate: bool) -> None:
        self.center = center

    def show(self) -> None:
        pass

    def hide(self) -> None:
        pass

    def reset(self) -> None:
        pass

    def show_extra_field(self, kind: str) -> None:
        pass

    def append(self, entry: ListEntry) -> None:
        if self.echo_list:
            print(format_list_entry(entry))

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        print(f"{level.upper()}: {message}")
