"""Strategy tables and table rules."""

from bjsim.strategy.rules import RuleSet, PRESETS
from bjsim.strategy.basic import Action, BasicStrategy, decide, dealer_index

__all__ = [
    "RuleSet",
    "PRESETS",
    "Action",
    "BasicStrategy",
    "decide",
    "dealer_index",
]
