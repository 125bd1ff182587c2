"""Confidence intervals and risk of ruin."""

import math

Z_95 = 1.96


def confidence_interval(
    mean: float,
    stdev: float,
    samples: int,
    z: float = Z_95,
) -> tuple[float, float]:
    """
    Normal-approximation confidence interval on a mean.

    Args:
        mean: Sample mean
        stdev: Sample standard deviation
        samples: Number of samples behind the mean
        z: Critical value (1.96 for 95%)

    Returns:
        (low, high); collapses to (mean, mean) with no samples
    """
    if samples == 0:
        return (mean, mean)
    margin = stdev / math.sqrt(samples) * z
    return (mean - margin, mean + margin)


def risk_of_ruin(
    ev_per_hand: float,
    variance_per_hand: float,
    bankroll: float,
    bet: float,
) -> float:
    """
    Approximate probability of losing the whole bankroll.

    Classic continuous gambler's-ruin approximation
    RoR = exp(2 * edge * bankroll / variance), with edge and variance
    expressed in betting units. A non-negative edge never ruins; a
    losing game with no variance always does.

    Args:
        ev_per_hand: Mean result per hand (currency)
        variance_per_hand: Variance of the result per hand (currency squared)
        bankroll: Starting bankroll (currency)
        bet: Flat bet size (currency)

    Returns:
        Probability in [0, 1]
    """
    if ev_per_hand >= 0:
        return 0.0
    if variance_per_hand <= 0:
        return 1.0

    edge_per_unit = ev_per_hand / bet
    variance_units = variance_per_hand / (bet * bet)
    exponent = 2 * edge_per_unit * bankroll / variance_units
    ror = math.exp(exponent) if exponent > -700 else 0.0
    return min(1.0, max(0.0, ror))
