"""Basic strategy tables for blackjack."""

from enum import Enum
from functools import lru_cache
from typing import Mapping

from bjsim.cards import Card
from bjsim.hand import Hand
from bjsim.strategy.rules import RuleSet


class Action(Enum):
    """Possible player actions."""

    HIT = "H"
    STAND = "S"
    DOUBLE = "D"
    SPLIT = "P"
    SURRENDER = "R"

    def __str__(self) -> str:
        return self.name


# Dealer upcard columns, face cards normalized to "10"
DEALER_UPCARDS: tuple[str, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "A")

# Column used if an upcard label is not recognized (dealer shows 9)
FALLBACK_DEALER_INDEX = 8

H = Action.HIT
S = Action.STAND
D = Action.DOUBLE
P = Action.SPLIT

Row = tuple[Action, ...]

# Hard strategy does not depend on the soft-17 rule, so S17 and H17 share it.
HARD_TABLE: Mapping[int, Row] = {
    21: (S,) * 10,
    20: (S,) * 10,
    19: (S,) * 10,
    18: (S,) * 10,
    17: (S,) * 10,
    16: (S, S, S, S, S, H, H, H, H, H),
    15: (S, S, S, S, S, H, H, H, H, H),
    14: (S, S, S, S, S, H, H, H, H, H),
    13: (S, S, S, S, S, H, H, H, H, H),
    12: (H, H, S, S, S, H, H, H, H, H),
    11: (D, D, D, D, D, D, D, D, D, H),
    10: (D, D, D, D, D, D, D, D, H, H),
    9: (H, D, D, D, D, H, H, H, H, H),
    8: (H,) * 10,
    7: (H,) * 10,
    6: (H,) * 10,
}

SOFT_TABLE_S17: Mapping[int, Row] = {
    20: (S,) * 10,
    19: (S, S, S, S, D, S, S, S, S, S),
    18: (S, D, D, D, D, S, S, H, H, H),
    17: (H, D, D, D, D, H, H, H, H, H),
    16: (H, H, D, D, D, H, H, H, H, H),
    15: (H, H, D, D, D, H, H, H, H, H),
    14: (H, H, H, D, D, H, H, H, H, H),
    13: (H, H, H, D, D, H, H, H, H, H),
}

SOFT_TABLE_H17: Mapping[int, Row] = {
    **SOFT_TABLE_S17,
    18: (D, D, D, D, D, S, S, S, H, H),
}

PAIR_TABLE: Mapping[str, Row] = {
    "A": (P,) * 10,
    "10": (S,) * 10,
    "9": (P, P, P, P, P, S, P, P, S, S),
    "8": (P,) * 10,
    "7": (P, P, P, P, P, P, H, H, H, H),
    "6": (P, P, P, P, P, H, H, H, H, H),
    "5": (D, D, D, D, D, D, D, D, H, H),
    "4": (H, H, H, P, P, H, H, H, H, H),
    "3": (P, P, P, P, P, P, H, H, H, H),
    "2": (P, P, P, P, P, P, H, H, H, H),
}

# Late surrender: hard total -> dealer upcards to surrender against
SURRENDER_TABLE: Mapping[int, frozenset[str]] = {
    16: frozenset({"9", "10", "A"}),
    15: frozenset({"10"}),
}


def dealer_index(card: Card) -> int:
    """Return the strategy-table column for a dealer upcard."""
    try:
        return DEALER_UPCARDS.index(card.strategy_key)
    except ValueError:
        return FALLBACK_DEALER_INDEX


def _default_action(total: int) -> Action:
    return S if total >= 17 else H


class BasicStrategy:
    """
    Basic strategy lookup for one rule set.

    The S17 or H17 variant of each table is picked once at construction;
    lookups are plain dictionary and tuple indexing.
    """

    def __init__(self, rules: RuleSet | None = None) -> None:
        """
        Initialize basic strategy for given rules.

        Args:
            rules: Rule set to select tables for. Uses default if None.
        """
        self.rules = rules or RuleSet()
        self._hard_table = HARD_TABLE
        self._soft_table = (
            SOFT_TABLE_H17 if self.rules.dealer_hits_soft_17 else SOFT_TABLE_S17
        )
        self._pair_table = PAIR_TABLE

    def decide(
        self,
        hand: Hand,
        dealer_upcard: Card,
        allow_split: bool = True,
        allow_double: bool = True,
    ) -> Action:
        """
        Get the basic strategy action for a hand.

        Lookup order is surrender, pairs, soft totals, hard totals; the
        first table that applies wins. A Double the caller cannot take is
        downgraded inside the table that produced it.

        Args:
            hand: The player's hand
            dealer_upcard: Dealer's face-up card
            allow_split: Whether splitting is possible right now
            allow_double: Whether doubling is possible right now

        Returns:
            The recommended action
        """
        column = dealer_index(dealer_upcard)
        total = hand.value

        if self._should_surrender(hand, dealer_upcard):
            return Action.SURRENDER

        if allow_split and hand.is_pair:
            action = self._pair_action(hand, column)
            if action is not None:
                if action == D and not allow_double:
                    return H
                return action

        if hand.is_soft:
            action = self._lookup(self._soft_table, total, column)
            if action == D and not allow_double:
                return S if total >= 18 else H
            return action

        action = self._lookup(self._hard_table, total, column)
        if action == D and not allow_double:
            return _default_action(total)
        return action

    def _should_surrender(self, hand: Hand, dealer_upcard: Card) -> bool:
        if not self.rules.surrender_allowed:
            return False
        if len(hand.cards) != 2 or hand.is_split or hand.is_soft:
            return False
        return dealer_upcard.strategy_key in SURRENDER_TABLE.get(hand.value, ())

    def _pair_action(self, hand: Hand, column: int) -> Action | None:
        key = hand.cards[0].strategy_key
        row = self._pair_table.get(key)
        if row is None:
            return None
        action = row[column]
        # 4-4 is only worth splitting when the split hands may double
        if action == P and key == "4" and not self.rules.double_after_split:
            return H
        return action

    @staticmethod
    def _lookup(table: Mapping[int, Row], total: int, column: int) -> Action:
        row = table.get(total)
        if row is None:
            return _default_action(total)
        return row[column]

    @property
    def hard_table(self) -> Mapping[int, Row]:
        """Return the hard totals strategy table."""
        return self._hard_table

    @property
    def soft_table(self) -> Mapping[int, Row]:
        """Return the soft totals strategy table."""
        return self._soft_table

    @property
    def pair_table(self) -> Mapping[str, Row]:
        """Return the pair splitting strategy table."""
        return self._pair_table


@lru_cache(maxsize=32)
def strategy_for(rules: RuleSet) -> BasicStrategy:
    """Return a shared BasicStrategy for a rule set."""
    return BasicStrategy(rules)


def decide(
    hand: Hand,
    dealer_upcard: Card,
    rules: RuleSet,
    allow_split: bool = True,
    allow_double: bool = True,
) -> Action:
    """Basic strategy decision for ``hand`` against ``dealer_upcard`` under ``rules``."""
    return strategy_for(rules).decide(
        hand,
        dealer_upcard,
        allow_split=allow_split,
        allow_double=allow_double,
    )
