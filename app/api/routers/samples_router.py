"""
app/api/routers/samples_router.py

Sample upload, scoring and query endpoints.

POST /upload    multipart CSV → replaces the working set
POST /compute   JSON rows     → scored batch, working set untouched
GET  /samples   filtered view of the working set
GET  /stats     summary statistics of the working set
POST /reset     reload the demo batch
"""

from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import CSVUpload, get_csv_upload, get_filter_spec
from app.domain.water_sample import FilterSpec, IngestionSummary, Sample
from app.schemas.samples import (
    BatchResponse,
    ComputeRequest,
    SampleListResponse,
    SampleResponse,
    StatsResponse,
    ValidationIssueResponse,
)
from app.services.aggregation_service import compute_stats, top_polluted
from app.services.csv_ingestion_service import (
    CSVHeaderValidationError,
    SampleIngestionService,
    get_sample_ingestion_service,
)
from app.services.filter_service import filter_samples
from app.state import SampleStore, get_sample_store

router = APIRouter(tags=["samples"])


def _stats_response(samples: Sequence[Sample]) -> StatsResponse:
    top = top_polluted(samples)
    return StatsResponse.from_stats(
        compute_stats(samples),
        top_polluted=top.location if top is not None else None,
    )


def _batch_response(summary: IngestionSummary, source_name: str | None) -> BatchResponse:
    return BatchResponse(
        source_name=source_name,
        rows_processed=summary.rows_processed,
        rows_failed=summary.rows_failed,
        strict=summary.strict,
        samples=[SampleResponse.from_sample(sample) for sample in summary.samples],
        stats=_stats_response(summary.samples),
        validation_errors=[
            ValidationIssueResponse.from_error(error) for error in summary.validation_errors
        ],
    )


@router.post("/upload", response_model=BatchResponse)
def upload_samples(
    upload: CSVUpload = Depends(get_csv_upload),
    ingestion_service: SampleIngestionService = Depends(get_sample_ingestion_service),
    store: SampleStore = Depends(get_sample_store),
) -> BatchResponse:
    """
    Ingest one CSV file and make it the current batch.
    """

    try:
        summary = ingestion_service.ingest_csv(data=upload.data, source_name=upload.filename)
    except CSVHeaderValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    store.replace(
        samples=summary.samples,
        source_name=upload.filename,
        preview=summary.preview,
        validation_errors=summary.validation_errors,
    )
    return _batch_response(summary, upload.filename)


@router.post("/compute", response_model=BatchResponse)
def compute_samples(
    body: ComputeRequest,
    ingestion_service: SampleIngestionService = Depends(get_sample_ingestion_service),
) -> BatchResponse:
    """
    Score raw rows and return the enriched batch without storing it.
    """

    summary = ingestion_service.ingest_rows(body.rows)
    return _batch_response(summary, None)


@router.get("/samples", response_model=SampleListResponse)
def list_samples(
    spec: FilterSpec = Depends(get_filter_spec),
    store: SampleStore = Depends(get_sample_store),
) -> SampleListResponse:
    """
    Return the current batch narrowed by metal and category.
    """

    working_set = store.set_filter(spec)
    selected = filter_samples(working_set.samples, spec)
    return SampleListResponse(
        metal=spec.metal,
        category=spec.category,
        count=len(selected),
        samples=[SampleResponse.from_sample(sample) for sample in selected],
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(store: SampleStore = Depends(get_sample_store)) -> StatsResponse:
    """
    Return category counts, percentages and the most polluted location.
    """

    return _stats_response(store.current.samples)


@router.post("/reset", response_model=StatsResponse)
def reset_samples(store: SampleStore = Depends(get_sample_store)) -> StatsResponse:
    """
    Replace the current batch with the demo data.
    """

    working_set = store.reset()
    return _stats_response(working_set.samples)
