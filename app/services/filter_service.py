"""
app/services/filter_service.py

Non-destructive metal/category views over a sample batch.
"""

from __future__ import annotations

from typing import Sequence

from app.domain.water_sample import FILTER_ALL, FilterSpec, Sample


def matches(sample: Sample, spec: FilterSpec) -> bool:
    """
    Return True when *sample* passes both the category and metal selection.

    A metal selection keeps only samples with a strictly positive
    concentration of that metal.
    """
    if spec.category != FILTER_ALL and sample.category != spec.category:
        return False
    if spec.metal != FILTER_ALL and not sample.concentration(spec.metal) > 0.0:
        return False
    return True


def filter_samples(samples: Sequence[Sample], spec: FilterSpec) -> list[Sample]:
    """
    Return the ordered subsequence of *samples* matching *spec*.
    """
    if spec.is_passthrough:
        return list(samples)
    return [sample for sample in samples if matches(sample, spec)]
