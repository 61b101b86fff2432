from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.domain.water_sample import AggregateStats, RowValidationError, Sample
from app.schemas.samples import SampleResponse, StatsResponse, ValidationIssueResponse

SAMPLE = Sample(
    id=1,
    location="Well A",
    latitude=28.7041,
    longitude=77.1025,
    concentrations=(100.0, 20.0, 0.01, 0.02, 0.001),
    index=644.31,
    category="Unsafe",
)


def test_sample_response_dumps_column_names() -> None:
    payload = SampleResponse.from_sample(SAMPLE).model_dump(by_alias=True)
    assert payload == SAMPLE.to_record()


def test_sample_response_accepts_aliases_and_field_names() -> None:
    by_alias = SampleResponse.model_validate(SAMPLE.to_record())
    by_name = SampleResponse.from_sample(SAMPLE)
    assert by_alias == by_name
    assert by_alias.arsenic == 0.01


def test_negative_concentration_is_rejected() -> None:
    record = SAMPLE.to_record() | {"Pb": -1.0}
    with pytest.raises(ValidationError):
        SampleResponse.model_validate(record)


def test_stats_response() -> None:
    stats = AggregateStats(
        counts={"Safe": 1, "Moderate": 0, "Unsafe": 2},
        percentages={"Safe": 33, "Moderate": 0, "Unsafe": 67},
        total=3,
        sample_count=3,
    )
    response = StatsResponse.from_stats(stats, top_polluted="Well C")
    assert response.model_dump() == {**stats.to_dict(), "top_polluted": "Well C"}


def test_validation_issue_response() -> None:
    error = RowValidationError(row_number=4, message="Concentration is negative; treated as 0.", column="As", value="-1")
    assert ValidationIssueResponse.from_error(error).model_dump() == {
        "row_number": 4,
        "message": "Concentration is negative; treated as 0.",
        "column": "As",
        "value": "-1",
    }
