"""One-pass running moments."""

import math
from dataclasses import dataclass
from typing import Iterable


@dataclass
class RunningStats:
    """
    Count, mean and sum of squared deviations, updated one sample at a time.

    Uses Welford's update, which stays numerically stable over millions
    of samples where a naive sum-of-squares would not.
    """

    count: int = 0
    mean: float = 0.0
    m2: float = 0.0

    def push(self, value: float) -> None:
        """Add one sample."""
        self.count += 1
        delta = value - self.mean
        self.mean += delta / self.count
        self.m2 += delta * (value - self.mean)

    def extend(self, values: Iterable[float]) -> None:
        """Add every sample from an iterable."""
        for value in values:
            self.push(value)

    @property
    def variance(self) -> float:
        """Sample variance (n - 1 denominator); 0 with fewer than two samples."""
        if self.count < 2:
            return 0.0
        return self.m2 / (self.count - 1)

    @property
    def stdev(self) -> float:
        """Sample standard deviation."""
        return math.sqrt(self.variance)
