"""
tests/test_config.py

Environment-driven settings.
"""

from __future__ import annotations

import os
from typing import Iterator

import pytest

from app.config import (
    get_ingestion_settings,
    get_map_settings,
    get_report_settings,
    load_env_files,
)
from app.services.csv_ingestion_service import get_sample_ingestion_service

_CACHED = (
    get_ingestion_settings,
    get_map_settings,
    get_report_settings,
    get_sample_ingestion_service,
)

_VARIABLES = (
    "HMPI_STRICT_VALIDATION",
    "HMPI_LOG_VALIDATION_ERRORS",
    "HMPI_MAX_VALIDATION_ERRORS",
    "HMPI_MAX_UPLOAD_ROWS",
    "HMPI_PREVIEW_ROWS",
    "HMPI_MAP_CENTER_LAT",
    "HMPI_MAP_CENTER_LON",
    "HMPI_MAP_ZOOM",
    "HMPI_REPORT_TITLE",
    "HMPI_REPORT_FILENAME",
    "HMPI_REPORT_MAX_TABLE_ROWS",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for getter in _CACHED:
        getter.cache_clear()
    yield
    for getter in _CACHED:
        getter.cache_clear()


def test_defaults() -> None:
    ingestion = get_ingestion_settings()
    assert ingestion.strict_validation is False
    assert ingestion.log_validation_errors is True
    assert ingestion.max_validation_errors == 500
    assert ingestion.max_upload_rows == 50_000
    assert ingestion.preview_rows == 8

    map_view = get_map_settings()
    assert (map_view.center_latitude, map_view.center_longitude, map_view.zoom) == (
        28.7041,
        77.1025,
        12,
    )

    report = get_report_settings()
    assert report.filename == "HMPI_Report.pdf"
    assert report.max_table_rows == 500


@pytest.mark.parametrize(("raw", "expected"), [("true", True), ("YES", True), ("1", True), ("off", False)])
def test_strict_validation_flag(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("HMPI_STRICT_VALIDATION", raw)
    assert get_ingestion_settings().strict_validation is expected


def test_invalid_numbers_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HMPI_MAX_VALIDATION_ERRORS", "many")
    monkeypatch.setenv("HMPI_MAP_CENTER_LAT", "north")
    assert get_ingestion_settings().max_validation_errors == 500
    assert get_map_settings().center_latitude == 28.7041


def test_limits_are_clamped_to_one(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HMPI_PREVIEW_ROWS", "0")
    monkeypatch.setenv("HMPI_REPORT_MAX_TABLE_ROWS", "-5")
    assert get_ingestion_settings().preview_rows == 1
    assert get_report_settings().max_table_rows == 1


def test_blank_strings_use_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HMPI_REPORT_TITLE", "   ")
    monkeypatch.setenv("HMPI_REPORT_FILENAME", "wells.pdf")
    report = get_report_settings()
    assert report.title == "Heavy Metal Pollution Indices Report"
    assert report.filename == "wells.pdf"


def test_service_factory_reads_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HMPI_STRICT_VALIDATION", "true")
    service = get_sample_ingestion_service()
    assert service.strict is True
    assert get_sample_ingestion_service() is service


def test_env_files_fill_only_missing_variables(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text(
        "# comment\n"
        "HMPI_REPORT_TITLE='Quarterly wells'\n"
        "export HMPI_MAP_ZOOM=9\n"
        "HMPI_REPORT_FILENAME=from_file.pdf\n"
        "not a pair\n",
        encoding="utf-8",
    )
    (tmp_path / ".env.local").write_text("HMPI_MAP_ZOOM=3\n", encoding="utf-8")
    environ = {**os.environ, "HMPI_REPORT_FILENAME": "from_env.pdf"}
    monkeypatch.setattr(os, "environ", environ)

    load_env_files(tmp_path)

    assert environ["HMPI_REPORT_TITLE"] == "Quarterly wells"
    assert environ["HMPI_MAP_ZOOM"] == "9"
    assert environ["HMPI_REPORT_FILENAME"] == "from_env.pdf"
