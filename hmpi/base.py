"""
hmpi/base.py

Abstract base interface for water-quality index models.
All index model implementations must inherit from BaseIndexModel.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping


class BaseIndexModel(ABC):
    """Abstract base class for pollution index models.

    Defines the interface that all index implementations must follow.
    An index model maps one sample row to a single numeric index and
    classifies that index into a closed set of category labels.
    """

    @abstractmethod
    def compute(self, row: Mapping[str, Any]) -> float:
        """Compute the index value for one sample row.

        Args:
            row: A mapping of field names to raw values. Unknown fields
                 are ignored; missing or non-numeric values are treated
                 as zero by the implementation.

        Returns:
            The computed index as a float. The range and the meaning of
            the value are defined by the implementing subclass.

        Raises:
            NotImplementedError: If the subclass does not implement
                                 this method.
        """
        raise NotImplementedError("Subclasses must implement compute()")

    @abstractmethod
    def classify(self, value: float) -> str:
        """Map an index value to its category label."""
        raise NotImplementedError("Subclasses must implement classify()")
