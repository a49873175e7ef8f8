import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, Dict, List

logger = logging.getLogger(__name__)


class EventType:
    """Event names published during a generation run."""

    # A single platform placement ran out of attempts
    PLACEMENT_SKIPPED = "platform.placement.skipped"

    # No platform in the upper part of the room could take the exit door
    DOOR_NOT_PLACED = "decoration.door.not_placed"

    # Every platform was already decorated when the key was allocated
    KEY_NOT_PLACED = "decoration.key.not_placed"

    # Emitted once, after decoration, with the final placement counts
    GENERATION_COMPLETED = "generation.completed"


@dataclass(frozen=True)
class Event:
    """Event container.

    Attributes:
        name: Event name, typically from EventType.
        payload: JSON-friendly details of the event.
    """
    name: str
    payload: Dict[str, Any]


class EventBus:
    """A small synchronous publish/subscribe bus.

    Each generation run owns its bus; callbacks run in registration order on
    the publishing thread.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Callable[[Event], None]]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: Callable[[Event], None]) -> None:
        """Register a callback for an event name.

        Args:
            event_name: The event name to listen for.
            callback: A function accepting a single Event argument.
        """
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._subs[event_name].append(callback)
        logger.debug("Subscribed %s to '%s'", getattr(callback, "__name__", str(callback)), event_name)

    def unsubscribe(self, event_name: str, callback: Callable[[Event], None]) -> None:
        if event_name in self._subs and callback in self._subs[event_name]:
            self._subs[event_name].remove(callback)
            logger.debug("Unsubscribed %s from '%s'", getattr(callback, "__name__", str(callback)), event_name)

    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        """Deliver an event to every subscriber of its name.

        A failing subscriber is logged and skipped; it never aborts generation.
        """
        event = Event(name=event_name, payload=payload)
        subs = list(self._subs.get(event_name, []))
        logger.debug("Publishing '%s' to %d subscribers: %s", event_name, len(subs), payload)
        for cb in subs:
            try:
                cb(event)
            except Exception:  # pragma: no cover - guard rail
                logger.exception("Unhandled exception in event subscriber for '%s'", event_name)
