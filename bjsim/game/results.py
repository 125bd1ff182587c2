"""Hand and round outcomes."""

from dataclasses import dataclass, field
from enum import Enum

from bjsim.game.events import GameEvent
from bjsim.hand import Hand


class Outcome(Enum):
    """Settled result of one player hand."""

    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BLACKJACK = "blackjack"
    SURRENDER = "surrender"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HandResult:
    """A settled player hand and its signed payout."""

    hand: Hand
    outcome: Outcome
    payout: float

    @property
    def is_split(self) -> bool:
        """Whether the hand came from a split."""
        return self.hand.is_split


@dataclass
class RoundResult:
    """Everything one round produced, including its event trace."""

    hands: list[HandResult]
    dealer_hand: Hand
    net: float
    events: list[GameEvent] = field(default_factory=list)
    dealer_blackjack: bool = False

    @property
    def outcomes(self) -> list[Outcome]:
        """Outcome of each player hand, left to right."""
        return [result.outcome for result in self.hands]
