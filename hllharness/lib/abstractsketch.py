from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable

class AbstractSketch(ABC):
    """Base class for all distinct counters fed by the harness."""

    @abstractmethod
    def add_string(self, token: bytes) -> None:
        """Add a single token to the counter."""
        pass

    @abstractmethod
    def add_batch(self, tokens: Iterable[bytes]) -> None:
        """Add multiple tokens to the counter.

        Args:
            tokens: Tokens to add. An empty batch is a no-op.
        """
        pass

    @abstractmethod
    def estimate_cardinality(self) -> float:
        """Return the number of distinct tokens seen so far.

        Returns:
            Exact or estimated distinct count as a float
        """
        pass
