"""Interactive single-player table."""

import logging

from bjsim.cards import Shoe
from bjsim.game.engine import RoundEngine
from bjsim.game.results import RoundResult
from bjsim.rng import create_rng
from bjsim.strategy.rules import RuleSet

logger = logging.getLogger(__name__)


class PlaySession:
    """
    A player sitting at one table for a run of rounds.

    Owns the RNG and the shoe for the whole session, so a seeded session
    deals exactly the same cards as a seeded simulation's first trial.
    """

    def __init__(
        self,
        rules: RuleSet | None = None,
        bankroll: float = 1000,
        seed: int | None = None,
    ) -> None:
        """
        Initialize a session.

        Args:
            rules: Table rules (uses defaults if not provided)
            bankroll: Starting bankroll
            seed: Seed for a reproducible shoe
        """
        if bankroll < 0:
            raise ValueError("bankroll cannot be negative")

        self.rules = rules or RuleSet()
        self.seed = seed
        self.starting_bankroll = bankroll
        self.reset()

    def reset(self) -> None:
        """Start over with a fresh shoe, the starting bankroll and the same seed."""
        self.rng = create_rng(self.seed)
        self.shoe = Shoe(self.rules, self.rng)
        self.engine = RoundEngine(self.shoe, self.rules)
        self.bankroll = self.starting_bankroll
        self.hands_played = 0
        self.history: list[float] = [self.bankroll]

    def can_bet(self, bet: float) -> bool:
        """Check if the bankroll covers a bet."""
        return 0 < bet <= self.bankroll

    def play(self, bet: float) -> RoundResult:
        """
        Play one round and settle it against the bankroll.

        Args:
            bet: Wager for the round

        Returns:
            The settled round
        """
        if bet <= 0:
            raise ValueError("bet must be positive")
        if bet > self.bankroll:
            raise ValueError(f"Bet {bet} exceeds bankroll {self.bankroll}")

        result = self.engine.play(bet, self.bankroll)
        self.bankroll += result.net
        self.hands_played += 1
        self.history.append(self.bankroll)
        return result

    def play_many(self, count: int, bet: float) -> list[RoundResult]:
        """Play up to ``count`` rounds, stopping once the bankroll cannot cover ``bet``."""
        rounds: list[RoundResult] = []
        for _ in range(count):
            if not self.can_bet(bet):
                logger.info("Bankroll %.2f cannot cover bet %.2f", self.bankroll, bet)
                break
            rounds.append(self.play(bet))
        return rounds

    @property
    def profit(self) -> float:
        """Net result since the session started."""
        return self.bankroll - self.starting_bankroll
