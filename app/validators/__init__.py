"""
app/validators package marker.
"""

from app.validators.sample_row_validator import SampleRowValidator

__all__ = [
    "SampleRowValidator",
]
