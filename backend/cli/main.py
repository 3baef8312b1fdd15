"""Terminal CLI entrypoint for Workout Map."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from backend.core.config import (
    DEFAULT_WEB_HOST,
    DEFAULT_WEB_PORT,
    DEFAULT_ZOOM_LEVEL,
    AppConfig,
    default_data_dir,
)
from backend.ui.console import ConsoleView
from backend.ui.controller import SessionController
from backend.workout.form import EXTRA_INPUT_BY_KIND
from backend.workout.model import WORKOUT_KINDS, Coords
from backend.workout.storage import FileStorage
from backend.workout.store import WorkoutStore


class MuteFrameworkNoise(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return "Event listeners changed after initial definition" not in record.getMessage()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workout Map: log workouts on a map")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI) with the map",
    )
    parser.add_argument("--web-host", default=DEFAULT_WEB_HOST, help="Host bind for --ui-web")
    parser.add_argument(
        "--web-port",
        type=int,
        default=DEFAULT_WEB_PORT,
        help="Port for --ui-web",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding stored workouts (default: ~/.workout-map)",
    )
    parser.add_argument("--list", action="store_true", help="Print stored workouts")
    parser.add_argument(
        "--add",
        choices=WORKOUT_KINDS,
        default=None,
        help="Record a workout without the web UI",
    )
    parser.add_argument("--at", default=None, help="Workout position as LAT,LNG (with --add)")
    parser.add_argument("--distance", default=None, help="Distance in km (with --add)")
    parser.add_argument("--duration", default=None, help="Duration in minutes (with --add)")
    parser.add_argument(
        "--extra",
        default=None,
        help="Cadence (spm), elevation gain (m) or swim length (m) (with --add)",
    )
    parser.add_argument(
        "--allow-flat-rides",
        action="store_true",
        help="Accept a cycling elevation gain of 0",
    )
    parser.add_argument("--reset", action="store_true", help="Delete all stored workouts")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def parse_coords(raw: str) -> Coords:
    parts = raw.split(",")
    if len(parts) != 2:
        raise ValueError(f"Expected LAT,LNG, got '{raw}'")
    lat, lng = (float(part.strip()) for part in parts)
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise ValueError(f"Coordinates out of range: {raw}")
    return (lat, lng)


def build_config(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        data_dir=args.data_dir or default_data_dir(),
        zoom_level=DEFAULT_ZOOM_LEVEL,
        allow_zero_elevation=args.allow_flat_rides,
        web_host=args.web_host,
        web_port=args.web_port,
    )


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("nicegui").addFilter(MuteFrameworkNoise())


def _console_controller(config: AppConfig, view: ConsoleView) -> SessionController:
    store = WorkoutStore(FileStorage(config.data_dir), key=config.storage_key)
    return SessionController(
        store,
        view,
        view,
        view,
        view,
        zoom_level=config.zoom_level,
        allow_zero_elevation=config.allow_zero_elevation,
    )


def run_list(config: AppConfig) -> int:
    view = ConsoleView()
    controller = _console_controller(config, view)
    if not controller.start():
        print("No workouts stored")
    return 0


def run_add(config: AppConfig, args: argparse.Namespace) -> int:
    if args.at is None:
        print("--add needs --at LAT,LNG")
        return 1
    try:
        coords = parse_coords(args.at)
    except ValueError as exc:
        print(f"Invalid position: {exc}")
        return 1

    # Only the new workout is echoed, not the stored ones.
    view = ConsoleView(echo_list=False)
    controller = _console_controller(config, view)
    controller.start()
    view.echo_list = True

    controller.on_location_resolved(coords)
    controller.on_map_click(coords)
    workout = controller.on_submit(
        {
            "kind": args.add,
            "distance_km": args.distance,
            "duration_min": args.duration,
            EXTRA_INPUT_BY_KIND[args.add]: args.extra,
        }
    )
    return 0 if workout is not None else 1


def run_reset(config: AppConfig) -> int:
    view = ConsoleView()
    controller = _console_controller(config, view)
    controller.on_reset()
    print(f"Workouts cleared in {config.data_dir}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)
    config = build_config(args)

    if args.ui_web:
        from backend.ui.web_app import run_web_ui

        return run_web_ui(config)
    if args.reset:
        return run_reset(config)
    if args.add is not None:
        return run_add(config, args)
    if args.list:
        return run_list(config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
