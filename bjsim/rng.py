"""Seeded random sources for reproducible shoes."""

from random import Random


def create_rng(seed: int | None = None) -> Random:
    """
    Create the random source a shoe shuffles with.

    Args:
        seed: Seed for a reproducible stream. None seeds from the OS.

    Returns:
        A Random instance whose ``random()`` yields uniform deviates in [0, 1)
    """
    if seed is None:
        return Random()
    return Random(seed)
