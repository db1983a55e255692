from __future__ import annotations
import math
import pytest # type: ignore
from hllharness.lib.stats import summarize, relative_error, TrialAccumulator

@pytest.mark.quick
class TestSummarize:
    def test_mean_and_sample_std(self):
        mean, std = summarize([1.0, 2.0, 3.0, 4.0])
        assert mean == pytest.approx(2.5)
        # Bessel's correction: sum of squares 5.0 over n - 1 = 3
        assert std == pytest.approx(math.sqrt(5.0 / 3.0))

    def test_identical_samples(self):
        assert summarize([7.0, 7.0, 7.0]) == (7.0, 0.0)

    def test_two_samples(self):
        mean, std = summarize([0.0, 2.0])
        assert mean == 1.0
        assert std == pytest.approx(math.sqrt(2.0))

    def test_insufficient_samples(self):
        with pytest.raises(ValueError, match="at least 2 samples"):
            summarize([1.0])
        with pytest.raises(ValueError, match="at least 2 samples"):
            summarize([])


@pytest.mark.quick
class TestRelativeError:
    def test_relative_error(self):
        assert relative_error(100, 110) == pytest.approx(0.1)
        assert relative_error(100, 90) == pytest.approx(0.1)

    def test_zero_exact(self):
        assert relative_error(0, 0.0) == 0.0
        assert relative_error(0, 2.0) == 2.0


@pytest.mark.quick
class TestTrialAccumulator:
    def test_bins_by_rounded_percent(self):
        acc = TrialAccumulator()
        acc.add(5.000000001, 10.0)
        acc.add(4.999999999, 12.0)
        acc.extend([(10.0, 20.0), (10.0, 22.0)])
        assert acc.summaries() == [
            (5, pytest.approx(11.0), pytest.approx(math.sqrt(2.0))),
            (10, pytest.approx(21.0), pytest.approx(math.sqrt(2.0))),
        ]

    def test_single_sample_bin_raises(self):
        acc = TrialAccumulator()
        acc.add(50.0, 1.0)
        with pytest.raises(ValueError):
            acc.summaries()
