"""Equal-width histograms of trial profits."""

import math
from dataclasses import dataclass, field
from typing import Sequence


@dataclass
class Histogram:
    """Bin centers and matching counts."""

    bins: list[float] = field(default_factory=list)
    counts: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of observations binned."""
        return sum(self.counts)

    def __len__(self) -> int:
        return len(self.bins)


def default_bin_count(trials: int) -> int:
    """Bin count for a sample of ``trials`` profits: 11 to 41 bins."""
    return min(41, max(11, trials))


def build_histogram(values: Sequence[float], bin_count: int) -> Histogram:
    """
    Bin values into ``bin_count`` equal-width bins spanning [min, max].

    The span is floored at 1 so identical values still get a usable bin
    width. Values that land outside the bins through float rounding are
    clamped into the first or last bin.

    Args:
        values: Observations (e.g. per-trial profits)
        bin_count: Number of bins, at least 1

    Returns:
        Histogram with bin midpoints and counts
    """
    if bin_count < 1:
        raise ValueError("bin_count must be at least 1")
    if not values:
        return Histogram()

    low = min(values)
    high = max(values)
    span = max(1.0, high - low)
    width = span / bin_count

    bins = [low + width * (i + 0.5) for i in range(bin_count)]
    counts = [0] * bin_count
    for value in values:
        index = math.floor((value - low) / span * bin_count)
        counts[min(bin_count - 1, max(0, index))] += 1

    return Histogram(bins=bins, counts=counts)
