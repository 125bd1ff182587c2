"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: DEALING → PEEKING → PLAYER_ACTING → DEALER_REVEALING → DEALER_ACTING → SETTLING → DONE
    """

    # Cards being dealt
    DEALING = auto()

    # Dealer checks the hole card for blackjack
    PEEKING = auto()

    # Player hands are played left to right
    PLAYER_ACTING = auto()

    # Hole card turned over
    DEALER_REVEALING = auto()

    # Dealer draws to its rule
    DEALER_ACTING = auto()

    # Hands paid
    SETTLING = auto()

    # Round finished, ready for next
    DONE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[RoundState, list[RoundState]] = {
    RoundState.DONE: [RoundState.DEALING],
    RoundState.DEALING: [RoundState.PEEKING],
    RoundState.PEEKING: [RoundState.PLAYER_ACTING],
    RoundState.PLAYER_ACTING: [RoundState.DEALER_REVEALING],
    # SETTLING directly when nobody is left for the dealer to beat
    RoundState.DEALER_REVEALING: [RoundState.DEALER_ACTING, RoundState.SETTLING],
    RoundState.DEALER_ACTING: [RoundState.SETTLING],
    RoundState.SETTLING: [RoundState.DONE],
}


def is_valid_transition(from_state: RoundState, to_state: RoundState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
