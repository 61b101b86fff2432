"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import File, HTTPException, Query, UploadFile, status

from app.domain.water_sample import FILTER_ALL, FilterSpec

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


@dataclass(frozen=True)
class CSVUpload:
    """
    Uploaded CSV payload read fully into memory.
    """

    filename: str
    data: bytes


def get_csv_upload(file: UploadFile = File(...)) -> CSVUpload:
    """
    Validate that the uploaded file is a CSV by extension or MIME type and read it.
    """

    filename = (file.filename or "").strip()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.lower().endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    try:
        if not is_csv_filename and not is_csv_content_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only CSV files are allowed.",
            )
        data = file.file.read()
    finally:
        file.file.close()

    return CSVUpload(filename=filename or "upload.csv", data=data)


def get_filter_spec(
    metal: str = Query(default=FILTER_ALL, description="All, Fe, Mn, As, Pb or Cd."),
    category: str = Query(default=FILTER_ALL, description="All, Safe, Moderate or Unsafe."),
) -> FilterSpec:
    """
    Build a FilterSpec from query parameters; unsupported values yield 422.
    """

    try:
        return FilterSpec(metal=metal, category=category)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
