"""Pytest fixtures for blackjack simulator tests."""

import pytest
from random import Random

from bjsim.cards import Shoe
from bjsim.strategy import BasicStrategy, RuleSet
from helpers import StackedShoe, make_hand


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def h17_rules():
    """Dealer hits soft 17."""
    return RuleSet(dealer_hits_soft_17=True)


@pytest.fixture
def surrender_rules():
    """Late surrender allowed."""
    return RuleSet(surrender_allowed=True)


@pytest.fixture
def shoe(rng, rules):
    """A shuffled 6-deck shoe."""
    return Shoe(rules, rng)


@pytest.fixture
def basic_strategy(rules):
    """Basic strategy for default rules."""
    return BasicStrategy(rules)


@pytest.fixture
def stacked_shoe():
    """Factory for shoes dealing a fixed sequence."""
    return StackedShoe


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("A", "K")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("A", "6")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10", "6")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return make_hand("8", "8")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10", "6", "K")
