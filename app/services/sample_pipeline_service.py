"""
app/services/sample_pipeline_service.py

Raw row to Sample transformation.

Every raw row goes through the same steps, in input order:

    1. position id (1-based within the batch)
    2. location label    Location | location | "Unknown"
    3. coordinates       Latitude | lat, Longitude | lon  (first finite, else 0.0)
    4. concentrations    Fe, Mn, As, Pb, Cd coerced to floats >= 0
    5. HPI index and category

The pipeline is pure: it never mutates its input and never raises for
malformed values. Re-running it on the same rows yields equal Samples.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from app.domain.water_sample import (
    LATITUDE_KEYS,
    LOCATION_KEYS,
    LONGITUDE_KEYS,
    UNKNOWN_LOCATION,
    Sample,
)
from hmpi.calculator import HeavyMetalPollutionIndex
from hmpi.normalizer import ValueNormalizer
from hmpi.standards import METALS

logger = logging.getLogger(__name__)


class SamplePipeline:
    """
    Stateless raw-row normalizer and enricher.
    """

    def __init__(
        self,
        *,
        model: HeavyMetalPollutionIndex | None = None,
        normalizer: ValueNormalizer | None = None,
    ) -> None:
        self._model = model or HeavyMetalPollutionIndex()
        self._normalizer = normalizer or ValueNormalizer()

    def build_sample(self, raw_row: Mapping[str, Any], position: int) -> Sample:
        """
        Normalize one raw row and attach its index and category.
        """

        n = self._normalizer
        concentrations = {metal: n.to_concentration(raw_row.get(metal)) for metal in METALS}
        result = self._model.evaluate(concentrations)

        return Sample(
            id=position,
            location=n.first_text(raw_row, LOCATION_KEYS, UNKNOWN_LOCATION),
            latitude=n.first_number(raw_row, LATITUDE_KEYS),
            longitude=n.first_number(raw_row, LONGITUDE_KEYS),
            concentrations=tuple(concentrations[metal] for metal in METALS),
            index=result.index,
            category=result.category,
        )

    def build_samples(self, raw_rows: Iterable[Mapping[str, Any]]) -> list[Sample]:
        """
        Transform an ordered batch of raw rows into Samples, preserving order.
        """

        samples = [
            self.build_sample(raw_row, position)
            for position, raw_row in enumerate(raw_rows, start=1)
        ]
        logger.debug("Sample pipeline built %d samples", len(samples))
        return samples


_DEFAULT_PIPELINE = SamplePipeline()


def build_sample(raw_row: Mapping[str, Any], position: int) -> Sample:
    return _DEFAULT_PIPELINE.build_sample(raw_row, position)


def build_samples(raw_rows: Iterable[Mapping[str, Any]]) -> list[Sample]:
    return _DEFAULT_PIPELINE.build_samples(raw_rows)
