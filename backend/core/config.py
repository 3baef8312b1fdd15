"""Runtime configuration for the workout map app."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

STORAGE_KEY = "workout"
DEFAULT_ZOOM_LEVEL = 13
DEFAULT_WEB_HOST = "127.0.0.1"
DEFAULT_WEB_PORT = 8088
GEOLOCATION_TIMEOUT_SEC = 30.0
TILE_URL_TEMPLATE = "https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)


def default_data_dir() -> Path:
    return Path.home() / ".workout-map"


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path
    storage_key: str = STORAGE_KEY
    zoom_level: int = DEFAULT_ZOOM_LEVEL
    allow_zero_elevation: bool = False
    web_host: str = DEFAULT_WEB_HOST
    web_port: int = DEFAULT_WEB_PORT
    geolocation_timeout_sec: float = GEOLOCATION_TIMEOUT_SEC
