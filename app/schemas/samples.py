"""
app/schemas/samples.py

Request and response schemas for sample endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.water_sample import AggregateStats, RowValidationError, Sample


class SampleResponse(BaseModel):
    """
    API response model for one enriched sample.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    location: str = Field(..., alias="Location")
    latitude: float = Field(..., alias="Latitude")
    longitude: float = Field(..., alias="Longitude")
    fe: float = Field(..., ge=0, alias="Fe")
    mn: float = Field(..., ge=0, alias="Mn")
    arsenic: float = Field(..., ge=0, alias="As")
    pb: float = Field(..., ge=0, alias="Pb")
    cd: float = Field(..., ge=0, alias="Cd")
    index: float
    category: str

    @classmethod
    def from_sample(cls, sample: Sample) -> "SampleResponse":
        metals = sample.concentrations_by_metal()
        return cls(
            id=sample.id,
            location=sample.location,
            latitude=sample.latitude,
            longitude=sample.longitude,
            fe=metals["Fe"],
            mn=metals["Mn"],
            arsenic=metals["As"],
            pb=metals["Pb"],
            cd=metals["Cd"],
            index=sample.index,
            category=sample.category,
        )


class StatsResponse(BaseModel):
    """
    API response model for batch summary statistics.
    """

    counts: dict[str, int]
    percentages: dict[str, int]
    total: int = Field(..., ge=1)
    sample_count: int = Field(..., ge=0)
    top_polluted: str | None = None

    @classmethod
    def from_stats(cls, stats: AggregateStats, top_polluted: str | None = None) -> "StatsResponse":
        return cls(**stats.to_dict(), top_polluted=top_polluted)


class ValidationIssueResponse(BaseModel):
    """
    API response model for one row-level data quality issue.
    """

    row_number: int = Field(..., ge=1)
    message: str
    column: str | None = None
    value: str | None = None

    @classmethod
    def from_error(cls, error: RowValidationError) -> "ValidationIssueResponse":
        return cls(
            row_number=error.row_number,
            message=error.message,
            column=error.column,
            value=error.value,
        )


class BatchResponse(BaseModel):
    """
    Samples, statistics and ingestion counters for one processed batch.
    """

    source_name: str | None = None
    rows_processed: int = Field(..., ge=0)
    rows_failed: int = Field(..., ge=0)
    strict: bool = False
    samples: list[SampleResponse] = Field(default_factory=list)
    stats: StatsResponse
    validation_errors: list[ValidationIssueResponse] = Field(default_factory=list)


class ComputeRequest(BaseModel):
    """
    Raw rows submitted for scoring without touching the working set.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list)


class SampleListResponse(BaseModel):
    metal: str
    category: str
    count: int = Field(..., ge=0)
    samples: list[SampleResponse] = Field(default_factory=list)
