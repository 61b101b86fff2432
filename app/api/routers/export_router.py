"""
app/api/routers/export_router.py

Report and data export endpoints.

GET /export/report
    PDF download of the current batch (summary, ranking, sample table).

GET /export/samples?format=csv|json&metal=&category=
    Flat sample export of the current batch, optionally filtered.
    CSV  → StreamingResponse, Content-Type: text/csv
    JSON → JSONResponse {"rows": int, "fields": list[str], "data": list[dict]}
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from app.api.dependencies import get_filter_spec
from app.config import get_report_settings
from app.domain.water_sample import FilterSpec
from app.services.aggregation_service import compute_stats
from app.services.filter_service import filter_samples
from app.services.report_export_service import (
    ExportResult,
    ReportExportError,
    build_export_rows,
    build_report_pdf,
    to_csv_text,
)
from app.state import SampleStore, get_sample_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["export"])

_VALID_FORMATS = frozenset({"csv", "json"})


def _to_csv_streaming(result: ExportResult, filename: str) -> StreamingResponse:
    """Return *result* as a UTF-8 CSV file download."""
    return StreamingResponse(
        content=iter([to_csv_text(result)]),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Row-Count": str(len(result.rows)),
        },
    )


def _to_json_response(result: ExportResult) -> JSONResponse:
    """Return *result* as a structured JSON response."""
    return JSONResponse(
        content={
            "rows": len(result.rows),
            "fields": result.fields,
            "data": result.rows,
        }
    )


@router.get("/export/report", summary="Download the analysis report as PDF")
def export_report(store: SampleStore = Depends(get_sample_store)) -> Response:
    """
    Render the current batch as a PDF report.
    """
    samples = store.current.samples
    try:
        payload = build_report_pdf(samples, compute_stats(samples))
    except ReportExportError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate PDF; see server logs for details.",
        ) from exc

    filename = get_report_settings().filename
    return Response(
        content=payload,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/samples", summary="Export samples as CSV or JSON")
def export_samples(
    output_format: str = Query(
        default="csv",
        alias="format",
        description='Output format: "csv" (file download) or "json".',
    ),
    spec: FilterSpec = Depends(get_filter_spec),
    store: SampleStore = Depends(get_sample_store),
) -> Response:
    """
    Export the current batch, narrowed by the optional metal/category filter.
    """
    if output_format not in _VALID_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(_VALID_FORMATS)}.",
        )

    result = build_export_rows(filter_samples(store.current.samples, spec))
    logger.info(
        "Sample export format=%r metal=%r category=%r rows=%d",
        output_format,
        spec.metal,
        spec.category,
        len(result.rows),
    )

    if output_format == "csv":
        return _to_csv_streaming(result, "hmpi_samples.csv")
    return _to_json_response(result)
