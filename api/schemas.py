"""Pydantic schemas for API requests and responses."""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Literal

from bjsim.cards import Card
from bjsim.game.events import GameEvent
from bjsim.game.results import HandResult, RoundResult
from bjsim.hand import Hand
from bjsim.simulator import Stats, TrialResult
from bjsim.statistics import Histogram
from bjsim.strategy.rules import RuleSet
from config import config


# Rules schemas
class RulesModel(BaseModel):
    """Table rules."""

    num_decks: int = Field(default=6, ge=1, le=8)
    penetration: float = Field(default=0.75, gt=0.0, le=1.0)
    dealer_hits_soft_17: bool = False
    dealer_peeks: bool = True
    blackjack_payout: Literal["3:2", "6:5"] = "3:2"
    double_after_split: bool = True
    resplit_aces: bool = False
    max_splits: int = Field(default=4, ge=1, le=8)
    surrender_allowed: bool = False

    def to_rules(self) -> RuleSet:
        """Build the core rule set."""
        data = self.model_dump()
        data["blackjack_payout"] = RuleSet.payout_from_label(self.blackjack_payout)
        return RuleSet(**data)

    @classmethod
    def from_rules(cls, rules: RuleSet) -> "RulesModel":
        """Describe a core rule set."""
        return cls(
            num_decks=rules.num_decks,
            penetration=rules.penetration,
            dealer_hits_soft_17=rules.dealer_hits_soft_17,
            dealer_peeks=rules.dealer_peeks,
            blackjack_payout=rules.payout_label,  # type: ignore[arg-type]
            double_after_split=rules.double_after_split,
            resplit_aces=rules.resplit_aces,
            max_splits=rules.max_splits,
            surrender_allowed=rules.surrender_allowed,
        )


# Card and hand schemas
class CardResponse(BaseModel):
    """Card representation."""

    rank: str
    value: int

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(rank=str(card.rank), value=card.value)


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool
    bet: float
    is_split: bool
    is_doubled: bool
    is_surrendered: bool

    @classmethod
    def from_hand(cls, hand: Hand) -> "HandResponse":
        return cls(
            cards=[CardResponse.from_card(c) for c in hand.cards],
            value=hand.value,
            is_soft=hand.is_soft,
            is_blackjack=hand.is_blackjack,
            is_busted=hand.is_busted,
            bet=hand.bet,
            is_split=hand.is_split,
            is_doubled=hand.is_doubled,
            is_surrendered=hand.is_surrendered,
        )


class HandResultResponse(BaseModel):
    """A settled player hand."""

    hand: HandResponse
    outcome: Literal["win", "loss", "push", "blackjack", "surrender"]
    payout: float

    @classmethod
    def from_result(cls, result: HandResult) -> "HandResultResponse":
        return cls(
            hand=HandResponse.from_hand(result.hand),
            outcome=result.outcome.value,
            payout=result.payout,
        )


class EventResponse(BaseModel):
    """One entry of a round trace."""

    type: str
    data: dict[str, Any] = {}

    @classmethod
    def from_event(cls, event: GameEvent) -> "EventResponse":
        data: dict[str, Any] = {}
        for key, value in event.data.items():
            if isinstance(value, Card):
                data[key] = str(value.rank)
            elif isinstance(value, Enum):
                data[key] = str(value).lower()
            else:
                data[key] = value
        return cls(type=event.event_type.name.lower(), data=data)


class RoundResponse(BaseModel):
    """A settled round with its trace."""

    hands: list[HandResultResponse]
    dealer_hand: HandResponse
    net: float
    dealer_blackjack: bool
    events: list[EventResponse]

    @classmethod
    def from_round(cls, result: RoundResult) -> "RoundResponse":
        return cls(
            hands=[HandResultResponse.from_result(h) for h in result.hands],
            dealer_hand=HandResponse.from_hand(result.dealer_hand),
            net=result.net,
            dealer_blackjack=result.dealer_blackjack,
            events=[EventResponse.from_event(e) for e in result.events],
        )


# Strategy schemas
class DecideRequest(BaseModel):
    """Request for a basic strategy decision."""

    player_cards: list[str] = Field(..., min_length=2, description="Rank labels, e.g. ['A', '7']")
    dealer_upcard: str
    rules: RulesModel = Field(default_factory=RulesModel)
    allow_split: bool = True
    allow_double: bool = True


class DecideResponse(BaseModel):
    """Basic strategy decision."""

    action: Literal["hit", "stand", "double", "split", "surrender"]
    player_value: int
    is_soft: bool
    is_pair: bool


# Simulation schemas
class SimulateRequest(BaseModel):
    """Request for a Monte-Carlo run."""

    rules: RulesModel = Field(default_factory=RulesModel)
    bet: float = Field(default=10, gt=0)
    hands: int = Field(default=100, ge=0)
    trials: int = Field(default=100, ge=1)
    seed: int | None = None
    starting_bankroll: float = Field(default=1000, ge=0)
    capture_first_trial: bool = False
    histogram_bins: int | None = Field(default=None, ge=1, le=200)


class TrialResponse(BaseModel):
    """Summary of one trial."""

    profit: float
    ending_bankroll: float
    hands_played: int
    bankroll_history: list[float]
    rounds: list[RoundResponse] | None = None

    @classmethod
    def from_trial(cls, trial: TrialResult) -> "TrialResponse":
        rounds = None
        if trial.rounds is not None:
            rounds = [RoundResponse.from_round(r) for r in trial.rounds]
        return cls(
            profit=trial.profit,
            ending_bankroll=trial.ending_bankroll,
            hands_played=trial.hands_played,
            bankroll_history=trial.bankroll_history,
            rounds=rounds,
        )


class StatsResponse(BaseModel):
    """Aggregate statistics."""

    ev_per_hand: float
    stdev_per_hand: float
    ev_run: float
    stdev_run: float
    ci95: tuple[float, float]
    risk_of_ruin: float

    @classmethod
    def from_stats(cls, stats: Stats) -> "StatsResponse":
        return cls(
            ev_per_hand=stats.ev_per_hand,
            stdev_per_hand=stats.stdev_per_hand,
            ev_run=stats.ev_run,
            stdev_run=stats.stdev_run,
            ci95=stats.ci95,
            risk_of_ruin=stats.risk_of_ruin,
        )


class HistogramResponse(BaseModel):
    """Histogram of trial profits."""

    bins: list[float]
    counts: list[int]

    @classmethod
    def from_histogram(cls, histogram: Histogram) -> "HistogramResponse":
        return cls(bins=histogram.bins, counts=histogram.counts)


class SimulateResponse(BaseModel):
    """Monte-Carlo run result."""

    results: list[TrialResponse]
    stats: StatsResponse
    histogram: HistogramResponse


# Play schemas
class NewPlayRequest(BaseModel):
    """Request to sit down at a table."""

    rules: RulesModel | None = None
    bankroll: float | None = Field(default=None, ge=0)
    seed: int | None = None


class NewPlayResponse(BaseModel):
    """A newly created play session."""

    session_id: str
    bankroll: float
    rules: RulesModel


class PlayRoundRequest(BaseModel):
    """Request to play one round."""

    bet: float = Field(default=config.game.default_bet, gt=0, description="Bet amount")


class PlayRoundResponse(BaseModel):
    """One played round and the bankroll after it."""

    round: RoundResponse
    bankroll: float
    hands_played: int


class PlayStateResponse(BaseModel):
    """Current state of a play session."""

    bankroll: float
    profit: float
    hands_played: int
    cards_remaining: int
    rules: RulesModel
