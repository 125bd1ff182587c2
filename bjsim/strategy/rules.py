"""Blackjack rule variations."""

from dataclasses import dataclass

PAYOUT_LABELS: dict[str, float] = {
    "3:2": 1.5,
    "6:5": 1.2,
}


@dataclass(frozen=True)
class RuleSet:
    """
    Blackjack table rules configuration.

    Produced once per session and read-only thereafter.
    """

    # Deck configuration
    num_decks: int = 6
    penetration: float = 0.75  # Fraction of the shoe dealt before reshuffle

    # Dealer rules
    dealer_hits_soft_17: bool = False  # H17 vs S17
    dealer_peeks: bool = True  # US hole-card peek; False is European no-hole-card

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2)
    blackjack_payout: float = 1.5

    # Double down rules
    double_after_split: bool = True  # DAS

    # Split rules
    resplit_aces: bool = False  # RSA
    max_splits: int = 4  # Maximum number of hands from splitting

    # Surrender rules (late surrender, first action only)
    surrender_allowed: bool = False

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if not 0.0 < self.penetration <= 1.0:
            raise ValueError("penetration must be in (0, 1]")
        if self.blackjack_payout not in PAYOUT_LABELS.values():
            raise ValueError("blackjack_payout must be 1.5 (3:2) or 1.2 (6:5)")
        if self.max_splits < 1:
            raise ValueError("max_splits must be at least 1")

    @property
    def dealer_stands_soft_17(self) -> bool:
        """True for S17 tables."""
        return not self.dealer_hits_soft_17

    @property
    def payout_label(self) -> str:
        """Return the blackjack payout as a ratio label."""
        for label, ratio in PAYOUT_LABELS.items():
            if ratio == self.blackjack_payout:
                return label
        return str(self.blackjack_payout)

    @staticmethod
    def payout_from_label(label: str) -> float:
        """Parse '3:2' or '6:5' into a payout multiplier."""
        try:
            return PAYOUT_LABELS[label.strip()]
        except KeyError:
            raise ValueError(f"Unsupported blackjack payout: {label}") from None

    @classmethod
    def vegas_strip(cls) -> "RuleSet":
        """Standard Vegas Strip rules."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=False,
            blackjack_payout=1.5,
            double_after_split=True,
            resplit_aces=False,
            surrender_allowed=True,
        )

    @classmethod
    def downtown_vegas(cls) -> "RuleSet":
        """Downtown Las Vegas rules (typically H17)."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=True,
            blackjack_payout=1.5,
            double_after_split=True,
            resplit_aces=False,
            surrender_allowed=True,
        )

    @classmethod
    def single_deck(cls) -> "RuleSet":
        """Single deck rules."""
        return cls(
            num_decks=1,
            penetration=0.5,
            dealer_hits_soft_17=True,
            blackjack_payout=1.5,
            double_after_split=False,
            resplit_aces=False,
            surrender_allowed=False,
        )

    @classmethod
    def european(cls) -> "RuleSet":
        """European no-hole-card rules."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=False,
            dealer_peeks=False,
            double_after_split=True,
            surrender_allowed=False,
        )

    @classmethod
    def six_five(cls) -> "RuleSet":
        """Carnival 6:5 shoe game."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=True,
            blackjack_payout=1.2,
            double_after_split=True,
            surrender_allowed=False,
        )


PRESETS = {
    "default": RuleSet,
    "vegas_strip": RuleSet.vegas_strip,
    "downtown_vegas": RuleSet.downtown_vegas,
    "single_deck": RuleSet.single_deck,
    "european": RuleSet.european,
    "six_five": RuleSet.six_five,
}
