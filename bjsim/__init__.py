"""Blackjack round engine and Monte-Carlo simulator - 100% UI-agnostic."""

from bjsim.rng import create_rng
from bjsim.cards import Card, Rank, Shoe
from bjsim.hand import Hand
from bjsim.strategy import Action, BasicStrategy, RuleSet, decide
from bjsim.game import Outcome, PlaySession, RoundResult, play_round
from bjsim.simulator import SimulationConfig, SimulationResult, Stats, TrialResult, simulate

__all__ = [
    "create_rng",
    "Card",
    "Rank",
    "Shoe",
    "Hand",
    "Action",
    "BasicStrategy",
    "RuleSet",
    "decide",
    "Outcome",
    "PlaySession",
    "RoundResult",
    "play_round",
    "SimulationConfig",
    "SimulationResult",
    "Stats",
    "TrialResult",
    "simulate",
]
