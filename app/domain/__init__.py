"""
app/domain package marker.
"""

from app.domain.water_sample import (
    FILTER_ALL,
    UNKNOWN_LOCATION,
    AggregateStats,
    CSVPreview,
    FilterSpec,
    IngestionSummary,
    RowValidationError,
    Sample,
)

__all__ = [
    "AggregateStats",
    "CSVPreview",
    "FILTER_ALL",
    "FilterSpec",
    "IngestionSummary",
    "RowValidationError",
    "Sample",
    "UNKNOWN_LOCATION",
]
