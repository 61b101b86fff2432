"""
app/services/report_export_service.py

Report and tabular export for the current sample batch.

Two outputs are supported:

    PDF     — A4 report: title, generation time, summary statistics,
              most polluted location and a paginated sample table.
    Tabular — one flat row per Sample with a deterministic column order,
              serialised to CSV by the caller or by :func:`to_csv_text`.

Rendering failures are wrapped in ReportExportError so callers can show
one generic message without knowing reportlab internals.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from app.config import ReportSettings, get_report_settings
from app.domain.water_sample import AggregateStats, Sample
from app.logging_utils import log_event
from app.services.aggregation_service import top_polluted
from hmpi.standards import CATEGORIES, METALS

logger = logging.getLogger(__name__)

EXPORT_FIELDS: tuple[str, ...] = (
    "id",
    "Location",
    "Latitude",
    "Longitude",
    *METALS,
    "index",
    "category",
)

_MARGIN = 10 * mm
_LINE_HEIGHT = 5 * mm
_TABLE_COLUMNS: tuple[tuple[str, float], ...] = (
    ("id", 0),
    ("Location", 12),
    ("Latitude", 55),
    ("Longitude", 75),
    ("Fe", 95),
    ("Mn", 108),
    ("As", 121),
    ("Pb", 134),
    ("Cd", 147),
    ("index", 160),
    ("category", 178),
)


class ReportExportError(RuntimeError):
    """
    Raised when the PDF report cannot be rendered.
    """


# ---------------------------------------------------------------------------
# Tabular export
# ---------------------------------------------------------------------------


@dataclass
class ExportResult:
    """
    Flat tabular data ready for CSV or JSON serialisation.

    Attributes
    ----------
    rows:   Flat dict per sample; all values are JSON-safe scalars.
    fields: Ordered column names; identical for every call.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    fields: list[str] = field(default_factory=lambda: list(EXPORT_FIELDS))


def build_export_rows(samples: Sequence[Sample]) -> ExportResult:
    """
    Flatten *samples* into export rows in batch order.
    """
    return ExportResult(rows=[sample.to_record() for sample in samples])


def to_csv_text(result: ExportResult) -> str:
    """
    Serialise *result* as CSV text with a header row.
    """
    buf = io.StringIO()
    writer = csv.DictWriter(
        buf,
        fieldnames=result.fields,
        extrasaction="ignore",
        restval="",
        lineterminator="\r\n",
    )
    writer.writeheader()
    for row in result.rows:
        writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
    return buf.getvalue()


# ---------------------------------------------------------------------------
# PDF report
# ---------------------------------------------------------------------------


def build_report_pdf(
    samples: Sequence[Sample],
    stats: AggregateStats,
    *,
    generated_at: datetime | None = None,
    settings: ReportSettings | None = None,
) -> bytes:
    """
    Render the analysis report as PDF bytes.

    Raises ReportExportError when rendering fails.
    """
    settings = settings or get_report_settings()
    generated_at = generated_at or datetime.now(tz=timezone.utc)

    try:
        payload = _render_pdf(samples, stats, generated_at=generated_at, settings=settings)
    except Exception as exc:  # noqa: BLE001
        logger.exception("PDF export failed")
        raise ReportExportError("Failed to generate PDF report.") from exc

    log_event(
        logger,
        logging.INFO,
        "report_exported",
        samples=len(samples),
        size_bytes=len(payload),
    )
    return payload


class _PageWriter:
    """Line-oriented writer that starts a new page when the current one is full."""

    def __init__(self, pdf: canvas.Canvas) -> None:
        self._pdf = pdf
        self._width, self._height = A4
        self._y = self._height - _MARGIN

    def line(self, text: str, *, size: int = 10, bold: bool = False, x_mm: float = 0) -> None:
        self._ensure_room()
        self._pdf.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        self._pdf.drawString(_MARGIN + x_mm * mm, self._y, text)
        self._y -= _LINE_HEIGHT

    def row(self, cells: Sequence[tuple[str, float]], *, bold: bool = False) -> None:
        self._ensure_room()
        self._pdf.setFont("Helvetica-Bold" if bold else "Helvetica", 8)
        for text, x_offset in cells:
            self._pdf.drawString(_MARGIN + x_offset * mm, self._y, text)
        self._y -= _LINE_HEIGHT

    def gap(self) -> None:
        self._y -= _LINE_HEIGHT

    def _ensure_room(self) -> None:
        if self._y < _MARGIN:
            self._pdf.showPage()
            self._y = self._height - _MARGIN


def _render_pdf(
    samples: Sequence[Sample],
    stats: AggregateStats,
    *,
    generated_at: datetime,
    settings: ReportSettings,
) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(settings.title)
    writer = _PageWriter(pdf)

    writer.line(settings.title, size=14, bold=True)
    writer.line(f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}")
    writer.gap()

    writer.line("Summary Statistics", size=12, bold=True)
    writer.line(f"Total Samples: {stats.sample_count}")
    for category in CATEGORIES:
        writer.line(f"{category}: {stats.counts[category]} ({stats.percentages[category]}%)")
    top = top_polluted(samples)
    writer.line(f"Top Polluted: {top.location if top is not None else '—'}")
    writer.gap()

    writer.line("Samples", size=12, bold=True)
    writer.row([(name, x) for name, x in _TABLE_COLUMNS], bold=True)
    for sample in samples[: settings.max_table_rows]:
        record = sample.to_record()
        writer.row([(_format_cell(record[name]), x) for name, x in _TABLE_COLUMNS])
    if len(samples) > settings.max_table_rows:
        writer.line(f"... {len(samples) - settings.max_table_rows} more sample(s) not shown")

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def _format_cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    text = str(value)
    return text if len(text) <= 24 else text[:23] + "…"
