"""
app/domain/water_sample.py

Domain models for the water-quality sample pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hmpi.standards import CATEGORIES, METALS

FILTER_ALL = "All"
UNKNOWN_LOCATION = "Unknown"

LOCATION_KEYS: tuple[str, ...] = ("Location", "location")
LATITUDE_KEYS: tuple[str, ...] = ("Latitude", "lat")
LONGITUDE_KEYS: tuple[str, ...] = ("Longitude", "lon")


@dataclass(frozen=True)
class Sample:
    """
    One enriched water sample.

    ``id`` is the 1-based position of the row within its batch and is
    reassigned on every upload. ``concentrations`` follows ``METALS``.
    """

    id: int
    location: str
    latitude: float
    longitude: float
    concentrations: tuple[float, ...]
    index: float
    category: str

    def concentration(self, metal: str) -> float:
        """Return the concentration for *metal*; raises KeyError for untracked metals."""
        try:
            position = METALS.index(metal)
        except ValueError as exc:
            raise KeyError(metal) from exc
        return self.concentrations[position]

    def concentrations_by_metal(self) -> dict[str, float]:
        return dict(zip(METALS, self.concentrations))

    def to_record(self) -> dict[str, Any]:
        """Flatten to the column layout used by the map, table and exports."""
        record: dict[str, Any] = {
            "id": self.id,
            "Location": self.location,
            "Latitude": self.latitude,
            "Longitude": self.longitude,
        }
        record.update(self.concentrations_by_metal())
        record["index"] = self.index
        record["category"] = self.category
        return record


@dataclass(frozen=True)
class AggregateStats:
    """
    Category breakdown of the current batch.

    ``total`` is the denominator used for percentages and is never below 1;
    ``sample_count`` is the raw number of samples.
    """

    counts: dict[str, int]
    percentages: dict[str, int]
    total: int
    sample_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "counts": dict(self.counts),
            "percentages": dict(self.percentages),
            "total": self.total,
            "sample_count": self.sample_count,
        }


@dataclass(frozen=True)
class FilterSpec:
    """
    Metal/category selection applied to the map and table views.
    """

    metal: str = FILTER_ALL
    category: str = FILTER_ALL

    def __post_init__(self) -> None:
        if self.metal != FILTER_ALL and self.metal not in METALS:
            allowed = ", ".join((FILTER_ALL, *METALS))
            raise ValueError(f"Unsupported metal filter {self.metal!r}. Allowed values: {allowed}.")
        if self.category != FILTER_ALL and self.category not in CATEGORIES:
            allowed = ", ".join((FILTER_ALL, *CATEGORIES))
            raise ValueError(
                f"Unsupported category filter {self.category!r}. Allowed values: {allowed}."
            )

    @property
    def is_passthrough(self) -> bool:
        return self.metal == FILTER_ALL and self.category == FILTER_ALL


@dataclass(frozen=True)
class RowValidationError:
    """
    One row-level data quality issue.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class CSVPreview:
    """
    Leading rows and columns of an upload, for display before analysis.
    """

    columns: list[str] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)


@dataclass(frozen=True)
class IngestionSummary:
    """
    End-of-run ingestion summary.
    """

    samples: list[Sample]
    rows_processed: int
    rows_failed: int
    validation_errors: list[RowValidationError] = field(default_factory=list)
    strict: bool = False
    preview: CSVPreview = field(default_factory=CSVPreview)
