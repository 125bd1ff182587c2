"""Round events - the chronological trace of one round."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterator


class EventType(Enum):
    """Types of round events."""

    DEAL = auto()
    ACTION = auto()
    DEALER_REVEAL = auto()
    SHUFFLE = auto()
    RESULT = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable round event.

    Events are the primary communication mechanism between the core engine
    and the presentation layer, which replays them for animation.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


class EventLog:
    """
    Ordered, append-only event sink owned by one round.

    The shoe's shuffle notification is wired into ``shuffle_sink`` for the
    duration of the round, so reshuffles land in the trace in order.
    """

    def __init__(self) -> None:
        """Initialize an empty log."""
        self._events: list[GameEvent] = []

    def emit(self, event: GameEvent) -> None:
        """Append an event."""
        self._events.append(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """
        Create and append a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    def shuffle_sink(self) -> None:
        """Record a shoe reshuffle."""
        self.emit_new(EventType.SHUFFLE)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        """Return events of one type, in order."""
        return [e for e in self._events if e.event_type == event_type]

    @property
    def history(self) -> list[GameEvent]:
        """Return a copy of the event history."""
        return self._events.copy()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[GameEvent]:
        return iter(self._events)
