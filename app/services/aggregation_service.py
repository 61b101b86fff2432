"""
app/services/aggregation_service.py

Summary statistics over the current sample batch.

Percentages
-----------
Each category percentage is rounded independently, half-up::

    percentage = round_half_up(count / max(total, 1) * 100)

so the three values may sum to 99-101. An empty batch yields zero counts
and zero percentages.

No formula logic lives here; index values come from the Sample records.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Sequence

from app.domain.water_sample import AggregateStats, Sample
from hmpi.standards import CATEGORIES


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positive values.
    """
    return int(math.floor(value + 0.5))


def compute_stats(samples: Sequence[Sample]) -> AggregateStats:
    """
    Count samples per category and derive integer percentages.
    """
    tally = Counter(sample.category for sample in samples)
    counts = {category: tally.get(category, 0) for category in CATEGORIES}
    total = max(len(samples), 1)
    percentages = {
        category: round_half_up(count / total * 100)
        for category, count in counts.items()
    }
    return AggregateStats(
        counts=counts,
        percentages=percentages,
        total=total,
        sample_count=len(samples),
    )


def rank_samples(samples: Sequence[Sample]) -> list[Sample]:
    """
    Order samples by index, most polluted first. Ties keep batch order.
    """
    return sorted(samples, key=lambda sample: sample.index, reverse=True)


def top_polluted(samples: Sequence[Sample]) -> Sample | None:
    """
    Return the sample with the highest index, or None for an empty batch.
    """
    ranked = rank_samples(samples)
    return ranked[0] if ranked else None
