from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

CONFIG_DIR = Path(__file__).resolve().parent
REPO_ROOT = CONFIG_DIR.parent

DEFAULT_SITE_ROOT = ""
DEFAULT_DATA_PATH = "data/partnerships.json"
DEFAULT_BOUNDARIES_URL = (
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
    "master/geojson/ne_50m_admin_0_countries.geojson"
)
DEFAULT_TILE_URL = "https://tiles.stadiamaps.com/tiles/alidade_smooth/{z}/{x}/{y}.png"

# Default view of the world map (Atlantic-centred so both Americas and Europe show).
DEFAULT_CENTER = (30.868406, -32.689948)
DEFAULT_ZOOM = 2.0
FOCUS_ZOOM = 5.0


@dataclass(frozen=True)
class Settings:
    site_root: str
    data_path: str
    data_url: str
    boundaries_url: str
    boundary_name_property: str
    map_tile_url: str
    mapbox_style: str
    mapbox_token: str
    default_center: Tuple[float, float]
    default_zoom: float
    focus_zoom: float
    http_timeout_s: float
    log_level: str
    debug_log_path: str

    @property
    def data_source(self) -> str:
        """Where the record file is read from: explicit URL, site-relative URL or local path."""
        if self.data_url:
            return self.data_url
        if self.site_root:
            return f"{self.site_root.rstrip('/')}/{self.data_path.lstrip('/')}"
        path = Path(self.data_path)
        if not path.is_absolute():
            path = REPO_ROOT / path
        return str(path)


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}.") from None


def load_settings(env_file: Optional[str] = None) -> Settings:
    if env_file:
        load_dotenv(dotenv_path=env_file)
    else:
        load_dotenv(dotenv_path=CONFIG_DIR / "secrets.env")
        load_dotenv()
    return Settings(
        site_root=_get_env("SITE_ROOT", DEFAULT_SITE_ROOT),
        data_path=_get_env("DATA_PATH", DEFAULT_DATA_PATH),
        data_url=_get_env("DATA_URL"),
        boundaries_url=_get_env("BOUNDARIES_URL", DEFAULT_BOUNDARIES_URL),
        boundary_name_property=_get_env("BOUNDARY_NAME_PROPERTY", "NAME_LONG"),
        map_tile_url=_get_env("MAP_TILE_URL", DEFAULT_TILE_URL),
        mapbox_style=_get_env("MAPBOX_STYLE", "white-bg"),
        mapbox_token=_get_env("MAPBOX_ACCESS_TOKEN"),
        default_center=(
            _get_float("MAP_CENTER_LAT", DEFAULT_CENTER[0]),
            _get_float("MAP_CENTER_LNG", DEFAULT_CENTER[1]),
        ),
        default_zoom=_get_float("MAP_ZOOM", DEFAULT_ZOOM),
        focus_zoom=_get_float("MAP_FOCUS_ZOOM", FOCUS_ZOOM),
        http_timeout_s=_get_float("HTTP_TIMEOUT_S", 20.0),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
        debug_log_path=_get_env("DEBUG_LOG_PATH"),
    )


class JsonLinesFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "logger": record.name,
            "level": record.levelname,
            "location": f"{record.module}.py:{record.lineno}",
            "message": record.getMessage(),
            "timestamp": int(record.created * 1000),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    if getattr(root, "_partnership_map_configured", False):
        # Streamlit re-executes the script on every interaction.
        return
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    root.setLevel(settings.log_level)
    if settings.debug_log_path:
        handler = logging.FileHandler(settings.debug_log_path, encoding="utf-8")
        handler.setFormatter(JsonLinesFormatter())
        root.addHandler(handler)
    root._partnership_map_configured = True  # type: ignore[attr-defined]
