"""Card and Shoe classes - immutable card representations."""

import logging
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import TYPE_CHECKING, Callable, Iterator

if TYPE_CHECKING:
    from bjsim.strategy.rules import RuleSet

logger = logging.getLogger(__name__)

ShuffleCallback = Callable[[], None]


class Rank(Enum):
    """Card ranks, valued by their face label."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank has a value of 10."""
        return self.blackjack_value == 10

    @property
    def strategy_key(self) -> str:
        """Return the label used by strategy tables (face cards become '10')."""
        if self.is_ten_value:
            return "10"
        return self.value


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card. Suits never matter in blackjack, so only rank is kept."""

    rank: Rank

    def __str__(self) -> str:
        return str(self.rank)

    def __repr__(self) -> str:
        return f"Card({self.rank.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    @property
    def strategy_key(self) -> str:
        """Return the normalized rank label for table lookups."""
        return self.rank.strategy_key

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a rank label like 'A', '10', 'T' or 'k'."""
        s = s.strip().upper()
        if s == "T":
            s = "10"
        try:
            return cls(Rank(s))
        except ValueError:
            raise ValueError(f"Invalid rank: {s}") from None


class Shoe:
    """
    A multi-deck shoe with a cut card.

    Cards are dealt from a cursor into a shuffled list. Once the cursor
    reaches the cut card (or the end of the cards) the next draw
    reshuffles the whole shoe first.
    """

    def __init__(
        self,
        rules: "RuleSet",
        rng: Random,
        on_shuffle: ShuffleCallback | None = None,
    ) -> None:
        """
        Initialize and shuffle a shoe.

        Args:
            rules: Table rules supplying deck count and penetration
            rng: Random source shared by reference, never reseeded here
            on_shuffle: Called once after every shuffle, including this first one
        """
        self._rules = rules
        self._rng = rng
        self._on_shuffle = on_shuffle
        self._cards: list[Card] = []
        self._index = 0
        self._cut_card_position = 0
        self.shuffle()

    def set_shuffle_callback(self, callback: ShuffleCallback | None) -> None:
        """Replace (or clear, with None) the shuffle notification."""
        self._on_shuffle = callback

    def shuffle(self) -> None:
        """Rebuild every deck and Fisher-Yates shuffle it with the shoe's RNG."""
        self._cards = [
            Card(rank)
            for _ in range(self._rules.num_decks)
            for rank in Rank
            for _ in range(4)
        ]
        for i in range(len(self._cards) - 1, 0, -1):
            j = int(self._rng.random() * (i + 1))
            self._cards[i], self._cards[j] = self._cards[j], self._cards[i]

        self._index = 0
        self._cut_card_position = min(
            len(self._cards),
            max(1, int(len(self._cards) * self._rules.penetration)),
        )
        logger.debug(
            "Shuffled %d cards, cut card at %d",
            len(self._cards),
            self._cut_card_position,
        )
        if self._on_shuffle is not None:
            self._on_shuffle()

    def draw(self) -> Card:
        """Draw a card, reshuffling first if the cut card has been reached."""
        if self.needs_shuffle:
            self.shuffle()
        if self._index >= len(self._cards):
            raise IndexError("Cannot draw from empty shoe")
        card = self._cards[self._index]
        self._index += 1
        return card

    def remaining(self) -> int:
        """Return the number of undrawn cards."""
        return len(self._cards) - self._index

    @property
    def needs_shuffle(self) -> bool:
        """Check if the cut card (or the end of the shoe) has been reached."""
        return self._index >= len(self._cards) or self._index >= self._cut_card_position

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt since the last shuffle."""
        return self._index

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return len(self._cards)

    @property
    def cut_card_position(self) -> int:
        """Return how many cards are dealt before a reshuffle."""
        return self._cut_card_position

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._rules.num_decks

    @property
    def penetration(self) -> float:
        """Return the configured penetration."""
        return self._rules.penetration

    def __len__(self) -> int:
        return self.remaining()

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards[self._index:])
