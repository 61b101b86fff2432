"""
app/config.py

Application-level configuration helpers.

Settings come from process environment variables. Values missing from the
environment may be supplied by `.env` / `.env.local` files at the project
root; the process environment always wins.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, TypeVar

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_ENV_FILES = (".env", ".env.local")
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

_N = TypeVar("_N", int, float)


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


def load_env_files(root: Path | None = None) -> None:
    """
    Copy KEY=VALUE pairs from the project env files into os.environ.
    """

    root = root or Path(__file__).resolve().parents[1]
    for path in (root / name for name in _ENV_FILES):
        if not path.is_file():
            continue
        for raw_line in path.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw_line)
            if parsed is not None:
                os.environ.setdefault(*parsed)


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def configure_logging() -> None:
    """
    Configure root logging once for the process from LOG_LEVEL.
    """

    _load_env_once()
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
    )


def _env(name: str) -> str | None:
    """
    Return the stripped value of *name*, or None when unset or blank.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    return default if value is None else value.lower() in _TRUE_VALUES


def _env_number(name: str, default: _N, cast: Callable[[str], _N]) -> _N:
    value = _env(name)
    if value is None:
        return default
    try:
        return cast(value)
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    return _env(name) or default


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for CSV sample ingestion.
    """

    strict_validation: bool = False
    log_validation_errors: bool = True
    max_validation_errors: int = 500
    max_upload_rows: int = 50_000
    preview_rows: int = 8


@dataclass(frozen=True)
class MapSettings:
    """
    Initial view of the sample map.
    """

    center_latitude: float = 28.7041
    center_longitude: float = 77.1025
    zoom: int = 12


@dataclass(frozen=True)
class ReportSettings:
    """
    PDF report rendering settings.
    """

    title: str = "Heavy Metal Pollution Indices Report"
    filename: str = "HMPI_Report.pdf"
    max_table_rows: int = 500


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    return IngestionSettings(
        strict_validation=_env_bool("HMPI_STRICT_VALIDATION", False),
        log_validation_errors=_env_bool("HMPI_LOG_VALIDATION_ERRORS", True),
        max_validation_errors=max(1, _env_number("HMPI_MAX_VALIDATION_ERRORS", 500, int)),
        max_upload_rows=max(1, _env_number("HMPI_MAX_UPLOAD_ROWS", 50_000, int)),
        preview_rows=max(1, _env_number("HMPI_PREVIEW_ROWS", 8, int)),
    )


@lru_cache(maxsize=1)
def get_map_settings() -> MapSettings:
    """
    Return cached map view settings from environment variables.
    """

    return MapSettings(
        center_latitude=_env_number("HMPI_MAP_CENTER_LAT", 28.7041, float),
        center_longitude=_env_number("HMPI_MAP_CENTER_LON", 77.1025, float),
        zoom=max(1, _env_number("HMPI_MAP_ZOOM", 12, int)),
    )


@lru_cache(maxsize=1)
def get_report_settings() -> ReportSettings:
    """
    Return cached report settings from environment variables.
    """

    return ReportSettings(
        title=_env_str("HMPI_REPORT_TITLE", "Heavy Metal Pollution Indices Report"),
        filename=_env_str("HMPI_REPORT_FILENAME", "HMPI_Report.pdf"),
        max_table_rows=max(1, _env_number("HMPI_REPORT_MAX_TABLE_ROWS", 500, int)),
    )
