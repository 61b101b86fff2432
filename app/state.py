"""
app/state.py

Explicit application state for the dashboard and the HTTP API.

The current batch and the current filter are held by one SampleStore.
Every update swaps a single immutable WorkingSet reference under a lock,
so readers see either the previous batch or the new one, never a mix.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from functools import lru_cache
from typing import Sequence

from app.domain.demo_samples import DEMO_SOURCE_NAME, demo_rows
from app.domain.water_sample import CSVPreview, FilterSpec, RowValidationError, Sample
from app.services.csv_ingestion_service import preview_rows
from app.services.sample_pipeline_service import build_samples

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkingSet:
    """
    One loaded batch together with the view state applied to it.
    """

    samples: tuple[Sample, ...]
    source_name: str
    preview: CSVPreview
    loaded_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))
    filter_spec: FilterSpec = field(default_factory=FilterSpec)
    validation_errors: tuple[RowValidationError, ...] = ()


def build_demo_working_set() -> WorkingSet:
    rows = demo_rows()
    return WorkingSet(
        samples=tuple(build_samples(rows)),
        source_name=DEMO_SOURCE_NAME,
        preview=preview_rows(rows),
    )


class SampleStore:
    """
    Holder of the current WorkingSet.
    """

    def __init__(self, initial: WorkingSet | None = None) -> None:
        self._lock = threading.Lock()
        self._current = initial or build_demo_working_set()

    @property
    def current(self) -> WorkingSet:
        return self._current

    def replace(
        self,
        *,
        samples: Sequence[Sample],
        source_name: str,
        preview: CSVPreview | None = None,
        validation_errors: Sequence[RowValidationError] = (),
    ) -> WorkingSet:
        """
        Replace the whole batch. The filter resets to All/All.
        """
        working_set = WorkingSet(
            samples=tuple(samples),
            source_name=source_name,
            preview=preview if preview is not None else CSVPreview(),
            validation_errors=tuple(validation_errors),
        )
        with self._lock:
            self._current = working_set
        logger.info("Working set replaced source=%r samples=%d", source_name, len(samples))
        return working_set

    def reset(self) -> WorkingSet:
        """
        Reload the demo batch.
        """
        working_set = build_demo_working_set()
        with self._lock:
            self._current = working_set
        logger.info("Working set reset to demo data")
        return working_set

    def set_filter(self, spec: FilterSpec) -> WorkingSet:
        with self._lock:
            self._current = replace(self._current, filter_spec=spec)
            return self._current


@lru_cache(maxsize=1)
def get_sample_store() -> SampleStore:
    """
    Process-wide store used by the HTTP API.
    """
    return SampleStore()
