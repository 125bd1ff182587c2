"""Tests for the round engine."""

import pytest
from transitions import MachineError

from bjsim.cards import Shoe
from bjsim.game import EventLog, EventType, Outcome, RoundEngine, RoundState, play_round
from bjsim.game.state import VALID_TRANSITIONS, is_valid_transition
from bjsim.strategy import Action, RuleSet


def play(stacked_shoe, ranks, rules=None, bet=10, bankroll=1000):
    """Play one round against a stacked shoe (player, dealer, player, hole, ...)."""
    rules = rules or RuleSet()
    engine = RoundEngine(stacked_shoe(ranks), rules)
    return engine.play(bet, bankroll)


def actions(result):
    """Actions taken during a round, in order."""
    return [e.data["action"] for e in result.events if e.event_type == EventType.ACTION]


class TestRoundEngine:
    """Scripted rounds."""

    def test_player_blackjack(self, stacked_shoe):
        """A natural pays 3:2 and skips all play."""
        result = play(stacked_shoe, ["A", "9", "K", "5"])

        assert result.net == 15
        assert result.outcomes == [Outcome.BLACKJACK]
        assert actions(result) == []
        assert len(result.dealer_hand.cards) == 2

    def test_six_five_blackjack(self, stacked_shoe):
        """A natural pays 6:5 under 6:5 rules."""
        result = play(stacked_shoe, ["A", "9", "K", "5"], rules=RuleSet(blackjack_payout=1.2))
        assert result.net == pytest.approx(12)

    def test_double_down(self, stacked_shoe):
        """Hard 11 vs 6 doubles, draws one card and wins double."""
        result = play(stacked_shoe, ["6", "6", "5", "10", "10", "9"])

        hand = result.hands[0].hand
        assert hand.is_doubled
        assert hand.bet == 20
        assert len(hand.cards) == 3
        assert actions(result) == [Action.DOUBLE]
        assert result.dealer_hand.is_busted
        assert result.net == 20

    def test_double_blocked_by_bankroll(self, stacked_shoe):
        """A double the bankroll cannot cover falls back to a hit."""
        result = play(stacked_shoe, ["6", "6", "5", "10", "10", "9"], bankroll=10)

        hand = result.hands[0].hand
        assert not hand.is_doubled
        assert actions(result) == [Action.HIT, Action.STAND]
        assert result.net == 10

    def test_split_eights(self, stacked_shoe):
        """8-8 vs 6 splits into two hands that each win."""
        result = play(stacked_shoe, ["8", "6", "8", "10", "10", "9", "7"])

        assert len(result.hands) == 2
        assert all(r.is_split for r in result.hands)
        assert [r.hand.value for r in result.hands] == [18, 17]
        assert result.outcomes == [Outcome.WIN, Outcome.WIN]
        assert result.net == 20
        assert actions(result)[0] == Action.SPLIT

    def test_split_blocked_by_bankroll(self, stacked_shoe):
        """Without funds for a second bet 8-8 plays as hard 16."""
        result = play(stacked_shoe, ["8", "6", "8", "10", "7"], bankroll=10)

        assert len(result.hands) == 1
        assert actions(result) == [Action.STAND]
        assert result.net == 10

    def test_split_aces_get_one_card(self, stacked_shoe):
        """Split aces receive one card each and a 21 is not a natural."""
        result = play(stacked_shoe, ["A", "6", "A", "10", "K", "9", "10"])

        assert len(result.hands) == 2
        assert all(len(r.hand.cards) == 2 for r in result.hands)
        assert all(r.hand.is_split_aces for r in result.hands)
        assert result.outcomes == [Outcome.WIN, Outcome.WIN]
        assert result.net == 20
        assert actions(result) == [Action.SPLIT]

    def test_split_stops_at_hand_ceiling(self, stacked_shoe):
        """Repeated 8-8 splits stop at max_splits hands; the rest play as hard 16."""
        ranks = ["8", "6", "8", "10", "8", "8", "8", "8", "8", "8", "10"]
        result = play(stacked_shoe, ranks)

        assert len(result.hands) == 4
        assert [r.hand.value for r in result.hands] == [16, 16, 16, 16]
        assert actions(result) == [Action.SPLIT] * 3 + [Action.STAND] * 4
        assert result.net == 40

    def test_split_ceiling_follows_rules(self, stacked_shoe):
        """A two-hand table allows a single split."""
        ranks = ["8", "6", "8", "10", "8", "8", "10"]
        result = play(stacked_shoe, ranks, rules=RuleSet(max_splits=2))

        assert len(result.hands) == 2
        assert actions(result) == [Action.SPLIT, Action.STAND, Action.STAND]
        assert result.net == 20

    def test_double_after_split(self, stacked_shoe):
        """With DAS a split 8-3 doubles against a 6."""
        ranks = ["8", "6", "8", "10", "3", "10", "9", "10"]
        result = play(stacked_shoe, ranks)

        first, second = result.hands
        assert first.hand.is_doubled
        assert first.hand.bet == 20
        assert actions(result) == [Action.SPLIT, Action.DOUBLE, Action.STAND]
        assert result.net == 30

    def test_no_double_after_split(self, stacked_shoe):
        """Without DAS the same split 8-3 has to hit."""
        ranks = ["8", "6", "8", "10", "3", "10", "9", "10"]
        result = play(stacked_shoe, ranks, rules=RuleSet(double_after_split=False))

        first, second = result.hands
        assert not first.hand.is_doubled
        assert len(first.hand.cards) == 3
        assert actions(result) == [Action.SPLIT, Action.HIT, Action.STAND, Action.STAND]
        assert result.net == 20

    def test_resplit_aces(self, stacked_shoe):
        """On a resplit-aces table a split ace that draws an ace splits again."""
        ranks = ["A", "6", "A", "10", "A", "9", "K", "7", "10"]
        result = play(stacked_shoe, ranks, rules=RuleSet(resplit_aces=True))

        assert len(result.hands) == 3
        assert [r.hand.value for r in result.hands] == [21, 18, 20]
        assert all(len(r.hand.cards) == 2 for r in result.hands)
        assert actions(result) == [Action.SPLIT, Action.SPLIT]
        assert result.outcomes == [Outcome.WIN] * 3
        assert result.net == 30

    def test_no_resplit_aces(self, stacked_shoe):
        """Without resplitting, A-A after a split is a finished soft 12."""
        ranks = ["A", "6", "A", "10", "A", "9", "10"]
        result = play(stacked_shoe, ranks)

        assert len(result.hands) == 2
        assert [r.hand.value for r in result.hands] == [12, 20]
        assert actions(result) == [Action.SPLIT]
        assert result.net == 20

    def test_resplit_aces_at_ceiling_stands(self, stacked_shoe):
        """A split ace pair that cannot be resplit takes no further card."""
        ranks = ["A", "6", "A", "10", "A", "9", "10"]
        result = play(stacked_shoe, ranks, rules=RuleSet(resplit_aces=True, max_splits=2))

        assert len(result.hands) == 2
        assert [len(r.hand.cards) for r in result.hands] == [2, 2]
        assert actions(result) == [Action.SPLIT]
        assert result.net == 20

    def test_surrender(self, stacked_shoe, surrender_rules):
        """Hard 16 vs 10 surrenders for half the bet."""
        result = play(stacked_shoe, ["10", "10", "6", "9"], rules=surrender_rules)

        assert result.outcomes == [Outcome.SURRENDER]
        assert result.net == -5
        assert len(result.dealer_hand.cards) == 2

    def test_dealer_stands_soft_17(self, stacked_shoe):
        """S17: the dealer keeps A-6 and the player's 17 pushes."""
        result = play(stacked_shoe, ["10", "A", "7", "6", "5", "10"])

        assert len(result.dealer_hand.cards) == 2
        assert result.outcomes == [Outcome.PUSH]
        assert result.net == 0

    def test_dealer_hits_soft_17(self, stacked_shoe, h17_rules):
        """H17: the dealer hits A-6 and busts."""
        result = play(stacked_shoe, ["10", "A", "7", "6", "5", "10"], rules=h17_rules)

        assert len(result.dealer_hand.cards) > 2
        assert result.dealer_hand.is_busted
        assert result.net == 10

    def test_dealer_blackjack_on_peek(self, stacked_shoe):
        """A peeked dealer blackjack is revealed once and the player still acts."""
        result = play(stacked_shoe, ["10", "A", "9", "K"])
        reveals = [e for e in result.events if e.event_type == EventType.DEALER_REVEAL]

        assert result.dealer_blackjack
        assert len(reveals) == 1
        assert actions(result) == [Action.STAND]
        assert result.outcomes == [Outcome.LOSS]
        assert result.net == -10
        assert len(result.dealer_hand.cards) == 2

    def test_double_into_peeked_blackjack(self, stacked_shoe):
        """Hard 11 vs 10 still doubles and loses the doubled wager."""
        result = play(stacked_shoe, ["6", "10", "5", "A", "9"])

        assert result.dealer_blackjack
        assert actions(result) == [Action.DOUBLE]
        assert result.hands[0].hand.is_doubled
        assert result.outcomes == [Outcome.LOSS]
        assert result.net == -20

    def test_surrender_into_peeked_blackjack(self, stacked_shoe, surrender_rules):
        """Surrender settles before the dealer blackjack, losing half."""
        result = play(stacked_shoe, ["10", "10", "6", "A"], rules=surrender_rules)

        assert result.dealer_blackjack
        assert actions(result) == [Action.SURRENDER]
        assert result.outcomes == [Outcome.SURRENDER]
        assert result.net == -5

    def test_blackjack_pushes_dealer_blackjack(self, stacked_shoe):
        """Two naturals push."""
        result = play(stacked_shoe, ["A", "A", "K", "K"])

        assert result.outcomes == [Outcome.PUSH]
        assert result.net == 0

    def test_no_peek_plays_into_dealer_blackjack(self, stacked_shoe):
        """Without a peek the player acts before the dealer blackjack shows."""
        rules = RuleSet(dealer_peeks=False)
        result = play(stacked_shoe, ["6", "A", "5", "K", "9"], rules=rules)

        assert actions(result) == [Action.HIT, Action.STAND]
        assert result.dealer_blackjack
        assert result.net == -10

    def test_player_bust_skips_dealer(self, stacked_shoe):
        """The dealer does not draw when every hand busted."""
        result = play(stacked_shoe, ["10", "7", "2", "10", "K"])

        assert result.hands[0].hand.is_busted
        assert result.outcomes == [Outcome.LOSS]
        assert len(result.dealer_hand.cards) == 2

    def test_invalid_bet(self, stacked_shoe, rules):
        """Non-positive bets are rejected."""
        engine = RoundEngine(stacked_shoe(["10", "7", "9", "10"]), rules)
        with pytest.raises(ValueError):
            engine.play(0, 1000)


class TestEventTrace:
    """Round event ordering."""

    def test_trace_order(self, stacked_shoe):
        """Deals, actions, reveal, dealer draws, then results."""
        result = play(stacked_shoe, ["10", "6", "8", "10", "7"])
        types = [e.event_type for e in result.events]

        assert types == [
            EventType.DEAL,
            EventType.DEAL,
            EventType.DEAL,
            EventType.DEAL,
            EventType.ACTION,
            EventType.DEALER_REVEAL,
            EventType.DEAL,
            EventType.RESULT,
        ]

    def test_deal_event_data(self, stacked_shoe):
        """The hole card is dealt face down to the dealer."""
        result = play(stacked_shoe, ["A", "9", "K", "5"])
        deals = [e for e in result.events if e.event_type == EventType.DEAL]

        assert [d.data["target"] for d in deals] == ["player", "dealer", "player", "dealer"]
        assert [d.data["revealed"] for d in deals] == [True, True, True, False]
        assert str(deals[0].data["card"]) == "A"

    def test_result_event_data(self, stacked_shoe):
        """Result events carry outcome and payout."""
        result = play(stacked_shoe, ["A", "9", "K", "5"])
        final = result.events[-1]

        assert final.event_type == EventType.RESULT
        assert final.data["outcome"] == Outcome.BLACKJACK
        assert final.data["payout"] == 15

    def test_shuffle_lands_in_trace(self, rng):
        """A reshuffle during a round is recorded in that round's trace."""
        rules = RuleSet(num_decks=1, penetration=0.1)
        engine = RoundEngine(Shoe(rules, rng), rules)

        engine.play(10, 1000)
        second = engine.play(10, 1000)

        assert EventType.SHUFFLE in [e.event_type for e in second.events]


class TestEngineState:
    """State machine bookkeeping."""

    def test_starts_and_ends_done(self, shoe, rules):
        """The engine rests in DONE between rounds."""
        engine = RoundEngine(shoe, rules)
        assert engine.state == RoundState.DONE
        engine.play(10, 1000)
        assert engine.state == RoundState.DONE

    def test_reusable_across_rounds(self, shoe, rules):
        """One engine plays many rounds from the same shoe."""
        engine = RoundEngine(shoe, rules)
        for _ in range(50):
            result = engine.play(10, 1000)
            assert result.hands

    def test_play_round_helper(self, shoe, rules):
        """play_round settles a round against a caller-owned shoe."""
        before = shoe.remaining()
        result = play_round(shoe, rules, 10, 1000)
        assert result.net == sum(r.payout for r in result.hands)
        assert shoe.remaining() < before


class TestEventLog:
    """Tests for the event sink."""

    def test_emit_and_filter(self):
        """Events keep their order and can be filtered by type."""
        log = EventLog()
        log.emit_new(EventType.DEAL, target="player")
        log.shuffle_sink()
        log.emit_new(EventType.DEAL, target="dealer")

        assert len(log) == 3
        assert [e.data["target"] for e in log.of_type(EventType.DEAL)] == ["player", "dealer"]
        assert [e.event_type for e in log.of_type(EventType.SHUFFLE)] == [EventType.SHUFFLE]

    def test_history_is_a_copy(self):
        """Mutating the history does not touch the log."""
        log = EventLog()
        log.emit_new(EventType.ACTION)
        log.history.clear()
        assert len(log) == 1


class TestRoundStateTransitions:
    """The state table matches the engine's machine."""

    def test_round_cycle(self):
        """A full round walks the states in order."""
        cycle = [
            RoundState.DONE,
            RoundState.DEALING,
            RoundState.PEEKING,
            RoundState.PLAYER_ACTING,
            RoundState.DEALER_REVEALING,
            RoundState.DEALER_ACTING,
            RoundState.SETTLING,
            RoundState.DONE,
        ]
        for current, following in zip(cycle, cycle[1:]):
            assert is_valid_transition(current, following)

    def test_dealer_turn_is_optional(self):
        """Settling can follow the reveal directly."""
        assert is_valid_transition(RoundState.DEALER_REVEALING, RoundState.SETTLING)

    def test_invalid(self):
        """Play cannot skip the deal or run backwards."""
        assert not is_valid_transition(RoundState.DONE, RoundState.PLAYER_ACTING)
        assert not is_valid_transition(RoundState.SETTLING, RoundState.DEALING)

    def test_machine_agrees(self):
        """Every machine transition is in the state table and vice versa."""
        machine_edges = set()
        for transition in RoundEngine.TRANSITIONS:
            sources = transition["source"]
            if isinstance(sources, str):
                sources = [sources]
            for source in sources:
                machine_edges.add(
                    (RoundState[source.upper()], RoundState[transition["dest"].upper()])
                )
        table_edges = {
            (source, dest) for source, dests in VALID_TRANSITIONS.items() for dest in dests
        }
        assert machine_edges == table_edges

    def test_recovers_after_failed_round(self, stacked_shoe, rules):
        """A draw failing mid-round leaves the engine in DONE and reusable."""
        engine = RoundEngine(stacked_shoe(["10", "6"]), rules)
        with pytest.raises(IndexError):
            engine.play(10, 1000)

        assert engine.state == RoundState.DONE
        engine.shoe = stacked_shoe(["A", "9", "K", "5"])
        assert engine.play(10, 1000).net == 15

    def test_invalid_trigger_raises(self, shoe, rules):
        """Triggers outside the round cycle are refused by the machine."""
        engine = RoundEngine(shoe, rules)
        with pytest.raises(MachineError):
            engine.begin_settle()
