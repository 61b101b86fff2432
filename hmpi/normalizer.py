"""
hmpi/normalizer.py

Lenient value coercion for raw sample fields.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class ValueNormalizer:
    """Provides stateless coercion methods for raw row values.

    Every method is total: malformed input never raises, it falls back
    to the documented default instead.
    """

    def parse_number(self, value: Any) -> float | None:
        """Parse *value* into a finite float.

        Numbers pass through unchanged. Strings are stripped and read up
        to the end of their leading numeric prefix, so ``"0.3 mg/L"``
        yields ``0.3``.

        Args:
            value: Any raw cell value.

        Returns:
            A finite float, or ``None`` when no number can be read.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = float(value)
            return number if math.isfinite(number) else None

        match = _NUMERIC_PREFIX.match(str(value).strip())
        if match is None:
            return None
        try:
            number = float(match.group(0))
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    def to_concentration(self, value: Any) -> float:
        """Coerce *value* to a non-negative concentration.

        Missing, unparseable, non-finite and negative values become 0.0.
        """
        number = self.parse_number(value)
        if number is None or number < 0.0:
            return 0.0
        return number

    def first_number(
        self,
        row: Mapping[str, Any],
        keys: Iterable[str],
        default: float = 0.0,
    ) -> float:
        """Return the first value under *keys* that parses to a finite number."""
        for key in keys:
            number = self.parse_number(row.get(key))
            if number is not None:
                return number
        return default

    def first_text(
        self,
        row: Mapping[str, Any],
        keys: Iterable[str],
        default: str,
    ) -> str:
        """Return the first non-blank value under *keys* as stripped text."""
        for key in keys:
            value = row.get(key)
            if self.is_blank(value):
                continue
            return str(value).strip()
        return default

    @staticmethod
    def is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, float) and math.isnan(value):
            return True
        return str(value).strip() == ""
