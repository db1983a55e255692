from __future__ import annotations
from typing import Iterable, Set
from hllharness.lib.abstractsketch import AbstractSketch

class ExactCounter(AbstractSketch):
    """Exact distinct counter backed by a set of token bytes."""

    def __init__(self):
        """Initialize an empty counter."""
        super().__init__()
        self.elements: Set[bytes] = set()

    def add_string(self, token: bytes) -> None:
        """Add a token to the counter."""
        self.elements.add(token)

    def add_batch(self, tokens: Iterable[bytes]) -> None:
        """Add multiple tokens to the counter.

        Args:
            tokens: Tokens to add; duplicates are no-ops
        """
        self.elements.update(tokens)

    # Name used by the experiment driver
    add = add_batch

    def size(self) -> int:
        """Return the number of distinct tokens added so far."""
        return len(self.elements)

    def estimate_cardinality(self) -> float:
        """Return exact cardinality."""
        return float(len(self.elements))

    def clear(self) -> None:
        self.elements.clear()
