"""
hmpi/standards.py

Permissible limits and category labels used by the pollution index.

Limits follow the WHO / IS 10500 drinking-water standards in mg/L.
The ideal value is 0 for every tracked metal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class MetalStandard:
    """
    Regulatory reference values for one tracked metal.
    """

    symbol: str
    limit: float
    """Standard permissible value S_i (mg/L)."""

    ideal: float = 0.0
    """Ideal value I_i (mg/L)."""

    @property
    def weight(self) -> float:
        """Unit weight W_i = 1 / S_i."""
        return 1.0 / self.limit


METAL_STANDARDS: Final[tuple[MetalStandard, ...]] = (
    MetalStandard(symbol="Fe", limit=0.3),
    MetalStandard(symbol="Mn", limit=0.1),
    MetalStandard(symbol="As", limit=0.01),
    MetalStandard(symbol="Pb", limit=0.01),
    MetalStandard(symbol="Cd", limit=0.003),
)

METALS: Final[tuple[str, ...]] = tuple(standard.symbol for standard in METAL_STANDARDS)
"""Tracked metal symbols in their canonical order."""


class WaterQualityCategory:
    SAFE = "Safe"
    MODERATE = "Moderate"
    UNSAFE = "Unsafe"


CATEGORIES: Final[tuple[str, ...]] = (
    WaterQualityCategory.SAFE,
    WaterQualityCategory.MODERATE,
    WaterQualityCategory.UNSAFE,
)

SAFE_UPPER_BOUND: Final[float] = 100.0
"""Indices strictly below this value are Safe."""

MODERATE_UPPER_BOUND: Final[float] = 150.0
"""Indices up to and including this value are Moderate; above is Unsafe."""

CATEGORY_COLORS: Final[dict[str, str]] = {
    WaterQualityCategory.SAFE: "#16a34a",
    WaterQualityCategory.MODERATE: "#f59e0b",
    WaterQualityCategory.UNSAFE: "#ef4444",
}
