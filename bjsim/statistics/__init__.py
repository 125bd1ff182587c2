"""Statistical calculations for simulated play."""

from bjsim.statistics.running import RunningStats
from bjsim.statistics.bankroll import confidence_interval, risk_of_ruin
from bjsim.statistics.histogram import Histogram, build_histogram, default_bin_count

__all__ = [
    "RunningStats",
    "confidence_interval",
    "risk_of_ruin",
    "Histogram",
    "build_histogram",
    "default_bin_count",
]
