from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple
import numpy as np # type: ignore


def summarize(samples: Sequence[float]) -> Tuple[float, float]:
    """Mean and sample standard deviation of a collection of estimates.

    The standard deviation uses Bessel's correction (n - 1 denominator).

    Args:
        samples: At least two values

    Returns:
        Tuple of (mean, sample standard deviation)

    Raises:
        ValueError: If fewer than two samples are given
    """
    values = np.asarray(samples, dtype=np.float64)
    if values.size < 2:
        raise ValueError(f"Need at least 2 samples for a sample standard deviation, got {values.size}")
    return float(values.mean()), float(values.std(ddof=1))


def relative_error(exact: float, estimate: float) -> float:
    """Relative error of an estimate, |estimate - exact| / exact.

    An exact count of zero uses a denominator of 1.
    """
    denom = abs(exact) if exact != 0 else 1.0
    return abs(estimate - exact) / denom


class TrialAccumulator:
    """Collects estimates from repeated trials, binned by stream percentage."""

    def __init__(self):
        self.bins: Dict[int, List[float]] = defaultdict(list)

    def add(self, percent: float, estimate: float) -> None:
        """Record an estimate taken after ``percent`` of the stream was consumed."""
        self.bins[int(round(percent))].append(estimate)

    def extend(self, records: Iterable[Tuple[float, float]]) -> None:
        for percent, estimate in records:
            self.add(percent, estimate)

    def summaries(self) -> List[Tuple[int, float, float]]:
        """Summarize every bin.

        Returns:
            List of (percent, mean, std) sorted by percent
        """
        return [(percent, *summarize(self.bins[percent])) for percent in sorted(self.bins)]
