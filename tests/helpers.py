"""Builders shared by the test suite."""

from hypothesis import strategies as st

from bjsim.cards import Card, Rank
from bjsim.hand import Hand


class StackedShoe:
    """
    Shoe test double that deals a fixed card sequence.

    Only the surface the round engine uses is implemented.
    """

    def __init__(self, ranks: list[str]) -> None:
        self._cards = [Card.from_string(r) for r in ranks]
        self._index = 0
        self._on_shuffle = None

    def draw(self) -> Card:
        if self._index >= len(self._cards):
            raise IndexError("Stacked shoe exhausted")
        card = self._cards[self._index]
        self._index += 1
        return card

    def set_shuffle_callback(self, callback) -> None:
        self._on_shuffle = callback

    def remaining(self) -> int:
        return len(self._cards) - self._index


def make_hand(*ranks: str, bet: float = 10, **flags) -> Hand:
    """Build a hand from rank labels."""
    return Hand(cards=[Card.from_string(r) for r in ranks], bet=bet, **flags)


def card(rank: str) -> Card:
    """Build a card from a rank label."""
    return Card.from_string(rank)


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    return Card(draw(st.sampled_from(list(Rank))))


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=6):
    """Generate a random hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    return Hand(cards=cards)
