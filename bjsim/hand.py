"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from bjsim.cards import Card

if TYPE_CHECKING:
    from bjsim.strategy.rules import RuleSet


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)
    bet: float = 0
    is_split: bool = False
    is_split_aces: bool = False
    is_doubled: bool = False
    is_surrendered: bool = False
    is_completed: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    @property
    def hard_total(self) -> int:
        """Total with every ace counted as 1."""
        return sum(1 if card.is_ace else card.value for card in self.cards)

    @property
    def totals(self) -> list[int]:
        """
        Every candidate total, ascending.

        Each ace may count as 11 or 1, so a hand with n aces has n + 1
        candidates spaced 10 apart starting at the hard total.
        """
        hard = self.hard_total
        aces = sum(1 for card in self.cards if card.is_ace)
        return [hard + 10 * k for k in range(aces + 1)]

    @property
    def value(self) -> int:
        """
        Calculate the best hand value.

        Returns the highest value that doesn't bust, or the lowest bust value.
        """
        totals = self.totals
        valid = [t for t in totals if t <= 21]
        if valid:
            return max(valid)
        return min(totals)

    best_total = value

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(card.is_ace for card in self.cards):
            return False
        return self.hard_total + 10 <= 21

    @property
    def is_hard(self) -> bool:
        """Check if the hand is hard (not soft)."""
        return not self.is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is two cards totalling 21."""
        return len(self.cards) == 2 and self.value == 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def is_pair(self) -> bool:
        """Check if the hand is two cards of equal value (K-10 counts)."""
        return (
            len(self.cards) == 2
            and self.cards[0].value == self.cards[1].value
        )

    def can_split(self, rules: "RuleSet", hand_count: int) -> bool:
        """
        Check whether the rules let this hand be split.

        Args:
            rules: Table rules (split ceiling, resplit aces)
            hand_count: Number of player hands already in the round
        """
        if len(self.cards) != 2:
            return False
        if hand_count >= rules.max_splits:
            return False
        first, second = self.cards
        if first.is_ace and self.is_split_aces and not rules.resplit_aces:
            return False
        return first.rank == second.rank or first.value == second.value

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack and not self.is_split:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"
