"""
app/services package marker.
"""

from app.services.aggregation_service import compute_stats, rank_samples, top_polluted
from app.services.csv_ingestion_service import (
    CSVHeaderValidationError,
    SampleIngestionService,
    get_sample_ingestion_service,
)
from app.services.filter_service import filter_samples
from app.services.report_export_service import ReportExportError, build_report_pdf
from app.services.sample_pipeline_service import SamplePipeline, build_samples

__all__ = [
    "CSVHeaderValidationError",
    "ReportExportError",
    "SampleIngestionService",
    "SamplePipeline",
    "build_report_pdf",
    "build_samples",
    "compute_stats",
    "filter_samples",
    "get_sample_ingestion_service",
    "rank_samples",
    "top_polluted",
]
