"""
tests/test_sample_pipeline.py

Pytest unit tests for raw row normalization and enrichment.
"""

from __future__ import annotations

import math

import pytest

from app.domain.demo_samples import demo_rows
from app.domain.water_sample import Sample
from app.services.sample_pipeline_service import SamplePipeline, build_sample, build_samples


@pytest.fixture()
def pipeline() -> SamplePipeline:
    return SamplePipeline()


# ---------------------------------------------------------------------------
# Ids and order
# ---------------------------------------------------------------------------


class TestBatchShape:
    def test_ids_are_one_based_positions(self) -> None:
        samples = build_samples(demo_rows())
        assert [sample.id for sample in samples] == [1, 2, 3]

    def test_order_is_preserved(self) -> None:
        samples = build_samples(demo_rows())
        assert [sample.location for sample in samples] == ["Well A", "Well B", "Well C"]

    def test_empty_batch(self) -> None:
        assert build_samples([]) == []

    def test_accepts_any_iterable(self) -> None:
        samples = build_samples(row for row in demo_rows())
        assert len(samples) == 3

    def test_idempotent(self, pipeline: SamplePipeline) -> None:
        rows = demo_rows() + [{"Location": "X", "Fe": "bad", "lat": "1.5"}]
        assert pipeline.build_samples(rows) == pipeline.build_samples(rows)

    def test_input_rows_are_not_mutated(self) -> None:
        rows = demo_rows()
        snapshot = [dict(row) for row in rows]
        build_samples(rows)
        assert rows == snapshot


# ---------------------------------------------------------------------------
# Location and coordinates
# ---------------------------------------------------------------------------


class TestLocation:
    def test_primary_key(self) -> None:
        assert build_sample({"Location": "Well A"}, 1).location == "Well A"

    def test_lowercase_alias(self) -> None:
        assert build_sample({"location": "Well B"}, 1).location == "Well B"

    def test_blank_primary_falls_back_to_alias(self) -> None:
        assert build_sample({"Location": "  ", "location": "Well C"}, 1).location == "Well C"

    def test_missing_location_is_unknown(self) -> None:
        assert build_sample({"Fe": 1}, 1).location == "Unknown"

    def test_non_string_location_is_stringified(self) -> None:
        assert build_sample({"Location": 42}, 1).location == "42"


class TestCoordinates:
    def test_primary_keys(self) -> None:
        sample = build_sample({"Latitude": "28.7041", "Longitude": 77.1025}, 1)
        assert sample.latitude == pytest.approx(28.7041)
        assert sample.longitude == pytest.approx(77.1025)

    def test_short_aliases(self) -> None:
        sample = build_sample({"lat": -33.9, "lon": "151.2"}, 1)
        assert sample.latitude == pytest.approx(-33.9)
        assert sample.longitude == pytest.approx(151.2)

    def test_unparseable_primary_falls_back_to_alias(self) -> None:
        sample = build_sample({"Latitude": "north", "lat": "12.5"}, 1)
        assert sample.latitude == pytest.approx(12.5)

    def test_zero_primary_is_kept(self) -> None:
        sample = build_sample({"Latitude": "0", "lat": "5"}, 1)
        assert sample.latitude == 0.0

    def test_missing_coordinates_default_to_zero(self) -> None:
        sample = build_sample({"Location": "Nowhere"}, 1)
        assert (sample.latitude, sample.longitude) == (0.0, 0.0)

    def test_non_finite_coordinates_default_to_zero(self) -> None:
        sample = build_sample({"Latitude": math.nan, "Longitude": "inf"}, 1)
        assert (sample.latitude, sample.longitude) == (0.0, 0.0)


# ---------------------------------------------------------------------------
# Concentrations and enrichment
# ---------------------------------------------------------------------------


class TestConcentrations:
    def test_values_follow_metal_order(self) -> None:
        sample = build_sample({"Cd": 5, "Pb": 4, "As": 3, "Mn": 2, "Fe": 1}, 1)
        assert sample.concentrations == (1.0, 2.0, 3.0, 4.0, 5.0)
        assert sample.concentration("As") == 3.0

    def test_unit_suffix_is_ignored(self) -> None:
        assert build_sample({"Fe": "0.3 mg/L"}, 1).concentration("Fe") == pytest.approx(0.3)

    def test_invalid_values_become_zero(self) -> None:
        sample = build_sample({"Fe": "abc", "Mn": None, "As": "", "Pb": -1, "Cd": math.nan}, 1)
        assert sample.concentrations == (0.0, 0.0, 0.0, 0.0, 0.0)

    def test_untracked_metal_lookup_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            build_sample({}, 1).concentration("Zn")

    def test_demo_well_a_regression(self) -> None:
        sample = build_samples(demo_rows())[0]
        assert sample.index == 644.31
        assert sample.category == "Unsafe"

    def test_malformed_row_does_not_raise(self) -> None:
        sample = build_sample(
            {"Location": None, "Latitude": "??", "Fe": "x", "Mn": "y", "As": {}, "Pb": "-", "Cd": "."},
            7,
        )
        assert sample == Sample(
            id=7,
            location="Unknown",
            latitude=0.0,
            longitude=0.0,
            concentrations=(0.0, 0.0, 0.0, 0.0, 0.0),
            index=0.0,
            category="Safe",
        )

    def test_extra_columns_are_ignored(self) -> None:
        plain = build_sample({"Location": "A", "Fe": 1}, 1)
        noisy = build_sample({"Location": "A", "Fe": 1, "Notes": "turbid", "Zn": 9}, 1)
        assert plain == noisy

    def test_to_record_layout(self) -> None:
        record = build_samples(demo_rows())[1].to_record()
        assert list(record) == [
            "id", "Location", "Latitude", "Longitude",
            "Fe", "Mn", "As", "Pb", "Cd", "index", "category",
        ]
        assert record["id"] == 2
        assert record["Location"] == "Well B"
        assert record["Pb"] == pytest.approx(0.1)
