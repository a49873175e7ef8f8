from __future__ import annotations

from enum import Enum
from typing import Hashable, Protocol

from .geometry import Vec3

Handle = Hashable


class ObjectKind(str, Enum):
    """Kinds of objects the generator asks the sink to materialize."""

    WALL = "wall"
    PLATFORM = "platform"
    TRAP = "trap"
    COIN = "coin"
    KEY = "key"
    DOOR = "door"


class SpatialOracle(Protocol):
    """Occupancy queries against whatever already exists in the scene."""

    def overlaps(self, center: Vec3, radius: float) -> bool:
        """Return True if any existing occupant intersects the sphere."""


class PlacementSink(Protocol):
    """Materializes objects and hands back opaque handles.

    Placement is synchronous: an object placed here must be visible to the
    oracle on the very next query.
    """

    def place(self, kind: ObjectKind, position: Vec3) -> Handle:
        """Create an object of the given kind at position and return its handle."""

    def remove(self, handle: Handle) -> None:
        """Destroy a previously placed object."""
