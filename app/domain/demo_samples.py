"""
app/domain/demo_samples.py

Built-in demo batch shown before any CSV is uploaded.
"""

from __future__ import annotations

from typing import Any, Final

DEMO_SOURCE_NAME: Final[str] = "demo"

DEMO_ROWS: Final[tuple[dict[str, Any], ...]] = (
    {"Location": "Well A", "Latitude": 28.7041, "Longitude": 77.1025,
     "Fe": 100, "Mn": 20, "As": 0.01, "Pb": 0.02, "Cd": 0.001},
    {"Location": "Well B", "Latitude": 28.7048, "Longitude": 77.1100,
     "Fe": 20, "Mn": 5, "As": 0.06, "Pb": 0.1, "Cd": 0.005},
    {"Location": "Well C", "Latitude": 28.7100, "Longitude": 77.1200,
     "Fe": 400, "Mn": 120, "As": 0.2, "Pb": 0.5, "Cd": 0.02},
)


def demo_rows() -> list[dict[str, Any]]:
    """Return a fresh copy of the demo rows."""
    return [dict(row) for row in DEMO_ROWS]
