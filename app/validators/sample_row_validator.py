"""
app/validators/sample_row_validator.py

Row-level data quality checks for water sample uploads.

The validator only reports. The sample pipeline coerces every value on
its own, so a row flagged here still produces a Sample unless the caller
runs in strict mode and drops it.
"""

from __future__ import annotations

from typing import Any, Mapping

from app.domain.water_sample import (
    LATITUDE_KEYS,
    LOCATION_KEYS,
    LONGITUDE_KEYS,
    RowValidationError,
)
from hmpi.normalizer import ValueNormalizer
from hmpi.standards import METALS


class SampleRowValidator:
    """
    Detects values that the pipeline would silently replace with defaults.
    """

    def __init__(self, normalizer: ValueNormalizer | None = None) -> None:
        self._normalizer = normalizer or ValueNormalizer()

    def is_completely_empty_row(self, row: Mapping[str, Any]) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        return all(self._is_blank(value) for value in row.values())

    def inspect_row(
        self,
        *,
        row: Mapping[str, Any],
        row_number: int,
    ) -> list[RowValidationError]:
        """
        Return every data quality issue found in one raw row.
        """

        errors: list[RowValidationError] = []

        self._check_location(row=row, row_number=row_number, errors=errors)
        self._check_coordinate(
            row=row, keys=LATITUDE_KEYS, row_number=row_number, errors=errors
        )
        self._check_coordinate(
            row=row, keys=LONGITUDE_KEYS, row_number=row_number, errors=errors
        )
        for metal in METALS:
            self._check_concentration(
                value=row.get(metal),
                metal=metal,
                row_number=row_number,
                errors=errors,
            )

        return errors

    def _check_location(
        self,
        *,
        row: Mapping[str, Any],
        row_number: int,
        errors: list[RowValidationError],
    ) -> None:
        if any(not self._is_blank(row.get(key)) for key in LOCATION_KEYS):
            return
        errors.append(
            RowValidationError(
                row_number=row_number,
                column=LOCATION_KEYS[0],
                message="Location is missing; labelled as Unknown.",
                value=None,
            )
        )

    def _check_coordinate(
        self,
        *,
        row: Mapping[str, Any],
        keys: tuple[str, ...],
        row_number: int,
        errors: list[RowValidationError],
    ) -> None:
        for key in keys:
            if self._normalizer.parse_number(row.get(key)) is not None:
                return

        raw_value = next((row.get(key) for key in keys if not self._is_blank(row.get(key))), None)
        errors.append(
            RowValidationError(
                row_number=row_number,
                column=keys[0],
                message="Coordinate is missing or not numeric; placed at 0.0.",
                value=self._stringify_value(raw_value),
            )
        )

    def _check_concentration(
        self,
        *,
        value: Any,
        metal: str,
        row_number: int,
        errors: list[RowValidationError],
    ) -> None:
        if self._is_blank(value):
            return

        number = self._normalizer.parse_number(value)
        if number is None:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=metal,
                    message="Concentration is not numeric; treated as 0.",
                    value=self._stringify_value(value),
                )
            )
        elif number < 0.0:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=metal,
                    message="Concentration is negative; treated as 0.",
                    value=self._stringify_value(value),
                )
            )

    def _is_blank(self, value: Any) -> bool:
        return self._normalizer.is_blank(value)

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)
