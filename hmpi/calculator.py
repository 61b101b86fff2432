"""
hmpi/calculator.py

Heavy Metal Pollution Index (HPI) model implementing BaseIndexModel.

Formula
-------
For every tracked metal i with permissible limit S_i and ideal value I_i::

    W_i = 1 / S_i
    Q_i = (M_i - I_i) / (S_i - I_i) * 100
    HPI = sum(Q_i * W_i) / sum(W_i)

where M_i is the measured concentration. The unrounded HPI is classified
as::

    HPI <  100          -> Safe
    100 <= HPI <= 150   -> Moderate
    HPI >  150          -> Unsafe

and then rounded to two decimals for display.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from hmpi.base import BaseIndexModel
from hmpi.normalizer import ValueNormalizer
from hmpi.standards import (
    METAL_STANDARDS,
    MODERATE_UPPER_BOUND,
    SAFE_UPPER_BOUND,
    MetalStandard,
    WaterQualityCategory,
)

logger = logging.getLogger(__name__)

INDEX_DECIMALS = 2


@dataclass(frozen=True)
class IndexResult:
    """
    Index value, category and per-metal quality ratings for one row.
    """

    index: float
    """HPI rounded to two decimals."""

    category: str
    """One of Safe, Moderate, Unsafe."""

    quality_ratings: tuple[float, ...]
    """Q_i per metal, in the order of ``METAL_STANDARDS``."""

    def ratings_by_metal(self) -> dict[str, float]:
        return {
            standard.symbol: rating
            for standard, rating in zip(METAL_STANDARDS, self.quality_ratings)
        }


class HeavyMetalPollutionIndex(BaseIndexModel):
    """Weighted quality-rating index over the tracked heavy metals.

    Each metal contributes its quality rating weighted by the inverse
    of its permissible limit, so the strictest limits dominate the
    aggregate. The model is stateless and never raises for malformed
    rows: missing or non-numeric concentrations count as zero.
    """

    def __init__(self, standards: Sequence[MetalStandard] = METAL_STANDARDS) -> None:
        self._standards = tuple(standards)
        self._normalizer = ValueNormalizer()

    @property
    def standards(self) -> tuple[MetalStandard, ...]:
        return self._standards

    def quality_rating(self, standard: MetalStandard, measured: float) -> float:
        """Q_i for one metal: deviation from ideal scaled by the limit, in percent."""
        return (measured - standard.ideal) / (standard.limit - standard.ideal) * 100.0

    def compute(self, row: Mapping[str, Any]) -> float:
        """Compute the unrounded HPI for *row*.

        Args:
            row: Mapping holding any of the metal symbols as keys.

        Returns:
            The weighted arithmetic mean of the quality ratings.
        """
        ratings = self._ratings(row)
        return self._weighted_mean(ratings)

    def classify(self, value: float) -> str:
        """Classify an index value using closed, non-overlapping thresholds."""
        if value < SAFE_UPPER_BOUND:
            return WaterQualityCategory.SAFE
        if value <= MODERATE_UPPER_BOUND:
            return WaterQualityCategory.MODERATE
        return WaterQualityCategory.UNSAFE

    def evaluate(self, row: Mapping[str, Any]) -> IndexResult:
        """Compute, classify and round the index for *row*.

        The category comes from the unrounded HPI, so 150.004 is Unsafe
        even though it is reported as 150.0.
        """
        ratings = self._ratings(row)
        value = self._weighted_mean(ratings)
        category = self.classify(value)
        index = round(value, INDEX_DECIMALS)
        logger.debug("HPI computed: %.2f (%s)", index, category)
        return IndexResult(index=index, category=category, quality_ratings=ratings)

    def _ratings(self, row: Mapping[str, Any]) -> tuple[float, ...]:
        return tuple(
            self.quality_rating(standard, self._normalizer.to_concentration(row.get(standard.symbol)))
            for standard in self._standards
        )

    def _weighted_mean(self, ratings: Sequence[float]) -> float:
        if not ratings:
            return 0.0
        weights = [standard.weight for standard in self._standards]
        # Centered on the first rating: equal ratings return that rating exactly.
        pivot = ratings[0]
        spread = math.fsum((rating - pivot) * weight for rating, weight in zip(ratings, weights))
        return pivot + spread / math.fsum(weights)


_DEFAULT_MODEL = HeavyMetalPollutionIndex()


def compute_index_from_row(row: Mapping[str, Any]) -> IndexResult:
    """
    Evaluate *row* with the default metal standards.
    """
    return _DEFAULT_MODEL.evaluate(row)


def classify_index(value: float) -> str:
    """
    Classify an index value with the default thresholds.
    """
    return _DEFAULT_MODEL.classify(value)
