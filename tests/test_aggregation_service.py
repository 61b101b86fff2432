"""
tests/test_aggregation_service.py

Pytest unit tests for batch statistics and ranking.
"""

from __future__ import annotations

import pytest

from app.domain.demo_samples import demo_rows
from app.domain.water_sample import Sample
from app.services.aggregation_service import (
    compute_stats,
    rank_samples,
    round_half_up,
    top_polluted,
)
from app.services.sample_pipeline_service import build_samples


def _sample(sample_id: int, category: str, index: float = 0.0, location: str = "") -> Sample:
    return Sample(
        id=sample_id,
        location=location or f"Site {sample_id}",
        latitude=0.0,
        longitude=0.0,
        concentrations=(0.0, 0.0, 0.0, 0.0, 0.0),
        index=index,
        category=category,
    )


def _batch(safe: int, moderate: int, unsafe: int) -> list[Sample]:
    categories = ["Safe"] * safe + ["Moderate"] * moderate + ["Unsafe"] * unsafe
    return [_sample(i, category) for i, category in enumerate(categories, start=1)]


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.0, 0), (0.5, 1), (1.49, 1), (2.5, 3), (33.333, 33), (66.667, 67), (100.0, 100)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestComputeStats:
    def test_empty_batch_has_zero_counts_and_percentages(self) -> None:
        stats = compute_stats([])
        assert stats.counts == {"Safe": 0, "Moderate": 0, "Unsafe": 0}
        assert stats.percentages == {"Safe": 0, "Moderate": 0, "Unsafe": 0}
        assert stats.total == 1
        assert stats.sample_count == 0

    def test_missing_categories_default_to_zero(self) -> None:
        stats = compute_stats(_batch(2, 0, 0))
        assert stats.counts == {"Safe": 2, "Moderate": 0, "Unsafe": 0}
        assert stats.percentages == {"Safe": 100, "Moderate": 0, "Unsafe": 0}

    def test_even_three_way_split(self) -> None:
        stats = compute_stats(_batch(1, 1, 1))
        assert stats.percentages == {"Safe": 33, "Moderate": 33, "Unsafe": 33}

    def test_half_rounds_up(self) -> None:
        stats = compute_stats(_batch(1, 0, 1))
        assert stats.percentages == {"Safe": 50, "Moderate": 0, "Unsafe": 50}
        stats = compute_stats(_batch(1, 7, 0))
        assert stats.percentages["Safe"] == 13  # 12.5

    @pytest.mark.parametrize(
        "split",
        [(1, 1, 1), (2, 2, 2), (1, 2, 4), (5, 0, 3), (7, 7, 7), (1, 1, 5), (33, 33, 34), (0, 0, 9)],
    )
    def test_counts_sum_to_n_and_percentages_near_100(self, split: tuple[int, int, int]) -> None:
        samples = _batch(*split)
        stats = compute_stats(samples)
        assert sum(stats.counts.values()) == len(samples)
        assert abs(sum(stats.percentages.values()) - 100) <= 2
        assert stats.total == stats.sample_count == len(samples)

    def test_demo_batch(self) -> None:
        stats = compute_stats(build_samples(demo_rows()))
        assert stats.counts == {"Safe": 0, "Moderate": 0, "Unsafe": 3}
        assert stats.percentages["Unsafe"] == 100

    def test_to_dict(self) -> None:
        payload = compute_stats(_batch(1, 0, 0)).to_dict()
        assert set(payload) == {"counts", "percentages", "total", "sample_count"}


class TestRanking:
    def test_rank_orders_by_index_descending(self) -> None:
        samples = [_sample(1, "Safe", 10.0), _sample(2, "Unsafe", 300.0), _sample(3, "Moderate", 120.0)]
        assert [s.id for s in rank_samples(samples)] == [2, 3, 1]

    def test_ties_keep_batch_order(self) -> None:
        samples = [_sample(1, "Safe", 5.0), _sample(2, "Safe", 5.0), _sample(3, "Safe", 9.0)]
        assert [s.id for s in rank_samples(samples)] == [3, 1, 2]

    def test_rank_does_not_mutate_input(self) -> None:
        samples = [_sample(1, "Safe", 1.0), _sample(2, "Safe", 2.0)]
        rank_samples(samples)
        assert [s.id for s in samples] == [1, 2]

    def test_top_polluted(self) -> None:
        assert top_polluted(build_samples(demo_rows())).location == "Well C"

    def test_top_polluted_empty(self) -> None:
        assert top_polluted([]) is None
