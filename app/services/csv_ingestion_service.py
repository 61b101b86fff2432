"""
app/services/csv_ingestion_service.py

Service layer for water sample CSV uploads.

An upload is decoded into ordered raw rows, every row is inspected by
SampleRowValidator, and the rows are handed to the sample pipeline.

Lenient mode (default) keeps every row, including rows whose cells are
all blank, and reports the values that were coerced. Strict mode drops
any row with an issue before the pipeline runs, so sample ids stay
consecutive over the accepted rows. Blank lines never reach this layer;
the CSV reader skips them.
"""

from __future__ import annotations

import csv
import io
import logging
from functools import lru_cache
from typing import Any, Mapping, Sequence

from app.config import get_ingestion_settings
from app.domain.water_sample import CSVPreview, IngestionSummary, RowValidationError
from app.logging_utils import log_event
from app.services.aggregation_service import round_half_up
from app.services.sample_pipeline_service import SamplePipeline
from app.validators.sample_row_validator import SampleRowValidator

logger = logging.getLogger(__name__)

# First data row in a CSV file is line 2; line 1 is the header.
_FIRST_DATA_ROW = 2


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVHeaderValidationError(ValueError):
    """
    Raised when CSV shape/header validation fails.
    """


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def read_csv_rows(data: bytes, *, max_rows: int | None = None) -> list[dict[str, Any]]:
    """
    Decode header-driven CSV bytes into an ordered list of raw rows.

    A UTF-8 byte order mark is tolerated and blank lines are skipped.
    Header names are stripped; cells beyond the header are ignored.
    """

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CSVHeaderValidationError("CSV must be UTF-8 encoded.") from exc

    reader = csv.DictReader(io.StringIO(text, newline=""))
    try:
        headers = reader.fieldnames or []
        if not any(header and header.strip() for header in headers):
            raise CSVHeaderValidationError("CSV header row is missing.")
        reader.fieldnames = [header.strip() if header else header for header in headers]

        rows: list[dict[str, Any]] = []
        for raw_row in reader:
            if max_rows is not None and len(rows) >= max_rows:
                raise CSVHeaderValidationError(
                    f"CSV exceeds the maximum of {max_rows} data rows."
                )
            rows.append({key: value for key, value in raw_row.items() if key is not None})
    except csv.Error as exc:
        raise CSVHeaderValidationError(f"Invalid CSV format: {exc}") from exc

    return rows


def preview_rows(
    rows: Sequence[Mapping[str, Any]],
    max_rows: int = 8,
    max_columns: int = 8,
) -> CSVPreview:
    """
    Return the first *max_rows* rows limited to the first *max_columns* columns.
    """

    if not rows:
        return CSVPreview(columns=[], rows=[])

    columns = list(rows[0].keys())[:max_columns]
    body = [[row.get(column) for column in columns] for row in rows[:max_rows]]
    return CSVPreview(columns=columns, rows=body)


def describe_upload(name: str, size_bytes: int) -> str:
    """
    Human-readable label for a selected file, e.g. ``"wells.csv — 12 KB"``.
    """

    return f"{name} — {round_half_up(size_bytes / 1024)} KB"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class SampleIngestionService:
    """
    Coordinates CSV decoding, row inspection and sample building.
    """

    def __init__(
        self,
        *,
        strict_validation: bool,
        max_validation_errors: int,
        log_validation_errors: bool,
        max_upload_rows: int | None = None,
        preview_row_limit: int = 8,
        pipeline: SamplePipeline | None = None,
        validator: SampleRowValidator | None = None,
    ) -> None:
        self._strict = strict_validation
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._max_upload_rows = max_upload_rows
        self._preview_row_limit = max(1, preview_row_limit)
        self._pipeline = pipeline or SamplePipeline()
        self._validator = validator or SampleRowValidator()

    @property
    def strict(self) -> bool:
        return self._strict

    def ingest_csv(self, *, data: bytes, source_name: str | None = None) -> IngestionSummary:
        """
        Decode one CSV upload and build its sample batch.

        Raises CSVHeaderValidationError when the file cannot be read as CSV.
        Row-level issues never raise; they are returned in the summary.
        """

        rows = read_csv_rows(data, max_rows=self._max_upload_rows)
        summary = self.ingest_rows(rows, first_row_number=_FIRST_DATA_ROW)
        log_event(
            logger,
            logging.INFO,
            "csv_ingested",
            source=source_name,
            rows_processed=summary.rows_processed,
            rows_failed=summary.rows_failed,
            issues=len(summary.validation_errors),
            strict=summary.strict,
        )
        return summary

    def ingest_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        *,
        first_row_number: int = 1,
    ) -> IngestionSummary:
        """
        Inspect and transform already-parsed raw rows.
        """

        accepted: list[Mapping[str, Any]] = []
        rows_failed = 0
        captured_errors: list[RowValidationError] = []

        for row_number, raw_row in enumerate(rows, start=first_row_number):
            if self._validator.is_completely_empty_row(raw_row):
                self._record_error(
                    captured_errors,
                    RowValidationError(
                        row_number=row_number,
                        column=None,
                        message=(
                            "Completely empty row skipped."
                            if self._strict
                            else "Row has no values; scored as an empty sample."
                        ),
                        value=None,
                    ),
                )
                if self._strict:
                    rows_failed += 1
                else:
                    accepted.append(raw_row)
                continue

            row_errors = self._validator.inspect_row(row=raw_row, row_number=row_number)
            for error in row_errors:
                self._record_error(captured_errors, error)

            if row_errors and self._strict:
                rows_failed += 1
                continue
            accepted.append(raw_row)

        samples = self._pipeline.build_samples(accepted)
        return IngestionSummary(
            samples=samples,
            rows_processed=len(samples),
            rows_failed=rows_failed,
            validation_errors=captured_errors,
            strict=self._strict,
            preview=preview_rows(rows, max_rows=self._preview_row_limit),
        )

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "CSV validation issue row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_sample_ingestion_service() -> SampleIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_ingestion_settings()
    return SampleIngestionService(
        strict_validation=settings.strict_validation,
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
        max_upload_rows=settings.max_upload_rows,
        preview_row_limit=settings.preview_rows,
    )
