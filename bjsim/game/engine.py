"""Blackjack round engine with state machine."""

from collections import deque

from transitions import Machine

from bjsim.cards import Card, Shoe
from bjsim.hand import Hand
from bjsim.strategy.basic import Action, BasicStrategy, strategy_for
from bjsim.strategy.rules import RuleSet
from bjsim.game.events import EventLog, EventType
from bjsim.game.results import HandResult, Outcome, RoundResult
from bjsim.game.state import RoundState


class RoundEngine:
    """
    Plays complete rounds of flat-bet basic strategy against one shoe.

    This is the core game logic, completely UI-agnostic. Each call to
    ``play`` walks the state machine from DEALING back to DONE and returns
    the settled hands together with the round's event trace. The engine
    can be reused for any number of rounds against the same shoe.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin_deal", "source": "done", "dest": "dealing"},
        {"trigger": "begin_peek", "source": "dealing", "dest": "peeking"},
        {"trigger": "begin_player_turn", "source": "peeking", "dest": "player_acting"},
        {"trigger": "begin_reveal", "source": "player_acting", "dest": "dealer_revealing"},
        {"trigger": "begin_dealer_turn", "source": "dealer_revealing", "dest": "dealer_acting"},
        {
            "trigger": "begin_settle",
            "source": ["dealer_revealing", "dealer_acting"],
            "dest": "settling",
        },
        {"trigger": "end_round", "source": "settling", "dest": "done"},
    ]

    def __init__(
        self,
        shoe: Shoe,
        rules: RuleSet,
        strategy: BasicStrategy | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            shoe: Shoe to draw from; shared across rounds and mutated
            rules: Table rules
            strategy: Decision policy (basic strategy for ``rules`` if omitted)
        """
        self.shoe = shoe
        self.rules = rules
        self.strategy = strategy or strategy_for(rules)

        self.events = EventLog()
        self.player_hands: list[Hand] = []
        self.dealer_hand = Hand()
        self.player_blackjack = False
        self.dealer_blackjack = False
        self._total_wagered: float = 0

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="done",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    @property
    def dealer_upcard(self) -> Card:
        """The dealer's face-up card."""
        return self.dealer_hand.cards[0]

    def play(self, bet: float, bankroll: float) -> RoundResult:
        """
        Play one full round.

        Args:
            bet: Flat wager for the opening hand
            bankroll: Funds available to cover doubles and splits

        Returns:
            The settled round
        """
        if bet <= 0:
            raise ValueError("bet must be positive")

        self.events = EventLog()
        self.player_hands = [Hand(bet=bet)]
        self.dealer_hand = Hand()
        self.player_blackjack = False
        self.dealer_blackjack = False
        self._total_wagered = bet

        self.shoe.set_shuffle_callback(self.events.shuffle_sink)
        try:
            self.begin_deal()
            self._deal_initial_cards()

            self.begin_peek()
            self._peek()

            self.begin_player_turn()
            self._play_player_hands(bankroll)

            self.begin_reveal()
            self._reveal_hole_card()

            if self._dealer_needed():
                self.begin_dealer_turn()
                self._play_dealer()

            self.begin_settle()
            result = self._settle()
            self.end_round()
        except Exception:
            # Leave the engine ready for the next round
            self.machine.set_state("done")
            raise
        finally:
            self.shoe.set_shuffle_callback(None)

        return result

    def _deal_card_to_hand(
        self,
        hand: Hand,
        hand_index: int = 0,
        face_up: bool = True,
    ) -> Card:
        """Deal a card to a hand."""
        card = self.shoe.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.DEAL,
            target="dealer" if hand is self.dealer_hand else "player",
            card=card,
            hand_index=hand_index,
            revealed=face_up,
        )
        return card

    def _deal_initial_cards(self) -> None:
        """Deal: player, dealer, player, dealer (face down)."""
        player_hand = self.player_hands[0]
        self._deal_card_to_hand(player_hand)
        self._deal_card_to_hand(self.dealer_hand)
        self._deal_card_to_hand(player_hand)
        self._deal_card_to_hand(self.dealer_hand, face_up=False)
        self.player_blackjack = player_hand.is_blackjack

    def _peek(self) -> None:
        """Check the hole card for blackjack when the upcard warrants it."""
        if not self.rules.dealer_peeks:
            return
        upcard = self.dealer_upcard
        if not (upcard.is_ace or upcard.is_ten_value):
            return
        if self.dealer_hand.is_blackjack:
            self.dealer_blackjack = True
            self.events.emit_new(EventType.DEALER_REVEAL, card=self.dealer_hand.cards[1])

    def _play_player_hands(self, bankroll: float) -> None:
        """
        Play every player hand left to right.

        Pending hands sit in a work queue; a split replaces the hand being
        played with its two halves at the front of the queue, so the left
        half is finished before the right half starts.
        """
        pending: deque[Hand] = deque(self.player_hands)
        played: list[Hand] = []

        while pending:
            hand = pending.popleft()
            index = len(played)

            # A natural settles without play; a peeked dealer blackjack does not
            # stop the player from acting
            if self.player_blackjack:
                hand.is_completed = True

            while not hand.is_completed:
                if hand.is_busted:
                    hand.is_completed = True
                    break

                hand_count = len(played) + 1 + len(pending)
                action = self._choose_action(hand, hand_count, bankroll)
                if hand.is_split_aces and action != Action.SPLIT:
                    # Split aces may only be resplit, never drawn to
                    hand.is_completed = True
                    break
                self.events.emit_new(EventType.ACTION, hand_index=index, action=action)

                if action == Action.STAND:
                    hand.is_completed = True
                elif action == Action.SURRENDER:
                    hand.is_surrendered = True
                    hand.is_completed = True
                elif action == Action.HIT:
                    self._deal_card_to_hand(hand, index)
                    if hand.is_busted:
                        hand.is_completed = True
                elif action == Action.DOUBLE:
                    self._total_wagered += hand.bet
                    hand.bet *= 2
                    hand.is_doubled = True
                    self._deal_card_to_hand(hand, index)
                    hand.is_completed = True
                elif action == Action.SPLIT:
                    first, second = self._split(hand, index)
                    pending.appendleft(second)
                    hand = first

            played.append(hand)

        self.player_hands = played

    def _choose_action(self, hand: Hand, hand_count: int, bankroll: float) -> Action:
        """Ask the strategy, re-asking with an option disabled if the table state forbids it."""
        can_cover = self._total_wagered + hand.bet <= bankroll
        two_cards = len(hand.cards) == 2
        allow_double = (
            two_cards
            and (not hand.is_split or self.rules.double_after_split)
            and not hand.is_split_aces
            and can_cover
        )
        allow_split = (
            two_cards
            and hand_count < self.rules.max_splits
            and hand.can_split(self.rules, hand_count)
            and can_cover
        )

        upcard = self.dealer_upcard
        action = self.strategy.decide(
            hand, upcard, allow_split=allow_split, allow_double=allow_double
        )
        if action == Action.SPLIT and not allow_split:
            action = self.strategy.decide(
                hand, upcard, allow_split=False, allow_double=allow_double
            )
        if action == Action.DOUBLE and not allow_double:
            action = self.strategy.decide(
                hand, upcard, allow_split=allow_split, allow_double=False
            )
        return action

    def _split(self, hand: Hand, index: int) -> tuple[Hand, Hand]:
        """Split a pair into two one-card hands and deal each a second card."""
        first_card, second_card = hand.cards
        split_aces = first_card.is_ace
        first = Hand(cards=[first_card], bet=hand.bet, is_split=True, is_split_aces=split_aces)
        second = Hand(cards=[second_card], bet=hand.bet, is_split=True, is_split_aces=split_aces)
        self._total_wagered += hand.bet

        # Split aces get one card each and no further action unless that
        # card is another ace on a resplit-aces table
        self._deal_card_to_hand(first, index)
        first.is_completed = self._split_aces_done(first)
        self._deal_card_to_hand(second, index + 1)
        second.is_completed = self._split_aces_done(second)

        return first, second

    def _split_aces_done(self, hand: Hand) -> bool:
        if not hand.is_split_aces:
            return False
        return not (self.rules.resplit_aces and hand.cards[-1].is_ace)

    def _reveal_hole_card(self) -> None:
        """Turn over the hole card unless the peek already did."""
        if self.dealer_blackjack:
            return
        self.events.emit_new(EventType.DEALER_REVEAL, card=self.dealer_hand.cards[1])
        if self.dealer_hand.is_blackjack:
            self.dealer_blackjack = True

    def _dealer_needed(self) -> bool:
        """Check whether any player hand still needs the dealer's total."""
        if self.player_blackjack or self.dealer_blackjack:
            return False
        return any(
            not hand.is_surrendered and not hand.is_busted
            for hand in self.player_hands
        )

    def _play_dealer(self) -> None:
        """Dealer hits until 17+ (or soft 17 if H17 rules)."""
        while self._dealer_should_hit():
            self._deal_card_to_hand(self.dealer_hand)

    def _dealer_should_hit(self) -> bool:
        """Determine if dealer should hit."""
        value = self.dealer_hand.value
        if value < 17:
            return True
        if value == 17 and self.dealer_hand.is_soft and not self.rules.dealer_stands_soft_17:
            return True
        return False

    def _settle(self) -> RoundResult:
        """Pay out every player hand in order."""
        results: list[HandResult] = []
        for index, hand in enumerate(self.player_hands):
            natural = self.player_blackjack and index == 0 and not hand.is_split
            result = self._settle_hand(hand, natural)
            results.append(result)
            self.events.emit_new(
                EventType.RESULT,
                hand_index=index,
                outcome=result.outcome,
                payout=result.payout,
            )

        return RoundResult(
            hands=results,
            dealer_hand=self.dealer_hand,
            net=sum(result.payout for result in results),
            events=self.events.history,
            dealer_blackjack=self.dealer_blackjack,
        )

    def _settle_hand(self, hand: Hand, natural: bool) -> HandResult:
        """Settle one hand against the dealer."""
        if hand.is_surrendered:
            return HandResult(hand, Outcome.SURRENDER, -hand.bet / 2)
        if natural:
            if self.dealer_blackjack:
                return HandResult(hand, Outcome.PUSH, 0)
            return HandResult(hand, Outcome.BLACKJACK, hand.bet * self.rules.blackjack_payout)
        if hand.is_busted:
            return HandResult(hand, Outcome.LOSS, -hand.bet)
        if self.dealer_blackjack:
            return HandResult(hand, Outcome.LOSS, -hand.bet)
        if self.dealer_hand.is_busted:
            return HandResult(hand, Outcome.WIN, hand.bet)

        player_value = hand.value
        dealer_value = self.dealer_hand.value
        if player_value > dealer_value:
            return HandResult(hand, Outcome.WIN, hand.bet)
        if player_value < dealer_value:
            return HandResult(hand, Outcome.LOSS, -hand.bet)
        return HandResult(hand, Outcome.PUSH, 0)


def play_round(
    shoe: Shoe,
    rules: RuleSet,
    bet: float,
    bankroll: float,
) -> RoundResult:
    """
    Play a single round against a caller-owned shoe.

    Args:
        shoe: Shoe to draw from (mutated)
        rules: Table rules
        bet: Flat wager
        bankroll: Funds available to cover doubles and splits

    Returns:
        The settled round with its event trace
    """
    return RoundEngine(shoe, rules).play(bet, bankroll)
