"""Recoverable conditions reported during generation.

None of these stop the pipeline. They are logged at WARNING, published on the
run's EventBus and collected in ``GenerationResult.diagnostics``.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from .events import EventBus, EventType


@dataclass(frozen=True)
class PlacementSkipped:
    """A platform placement exhausted its attempt budget."""

    tier: int
    pass_name: str
    attempts: int
    anchor: Tuple[float, float, float]

    event_name = EventType.PLACEMENT_SKIPPED

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DoorNotPlaced:
    """No platform from the middle of the list onward reached the door height."""

    min_height: float
    scanned_from: int
    platform_count: int

    event_name = EventType.DOOR_NOT_PLACED

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KeyNotPlaced:
    """Every platform slot was already decorated when the key was allocated."""

    platform_count: int

    event_name = EventType.KEY_NOT_PLACED

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)


Diagnostic = Union[PlacementSkipped, DoorNotPlaced, KeyNotPlaced]


class DiagnosticLog:
    """Collects diagnostics for one run and forwards them to the event bus."""

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self.bus = bus if bus is not None else EventBus()
        self.items: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)
        self.bus.publish(diagnostic.event_name, diagnostic.to_payload())

    def of_type(self, cls: type) -> List[Diagnostic]:
        return [d for d in self.items if isinstance(d, cls)]
