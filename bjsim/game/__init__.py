"""Round engine and state management."""

from bjsim.game.events import GameEvent, EventType, EventLog
from bjsim.game.state import RoundState
from bjsim.game.results import Outcome, HandResult, RoundResult
from bjsim.game.engine import RoundEngine, play_round
from bjsim.game.session import PlaySession

__all__ = [
    "GameEvent",
    "EventType",
    "EventLog",
    "RoundState",
    "Outcome",
    "HandResult",
    "RoundResult",
    "RoundEngine",
    "play_round",
    "PlaySession",
]
