from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .geometry import Vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomBounds:
    """Inner (walkable) and outer (wall lattice) bounds of a room.

    - inner_min/inner_max are world-space corners of the interior volume:
      ``inner_min = cell_size`` and ``inner_max = cell_size * (length, height, width)``.
    - outer_* are lattice extents: the inner dimensions plus one wall on each
      side in X/Z, and one floor layer in Y (the room has no ceiling).
    """

    cell_size: Vec3
    room_length: int
    room_width: int
    room_height: int
    inner_min: Vec3
    inner_max: Vec3

    @classmethod
    def from_dimensions(
        cls,
        cell_size: Optional[Vec3],
        room_length: int,
        room_width: int,
        room_height: int,
    ) -> "RoomBounds":
        if cell_size is None:
            raise ConfigurationError("Cell size is not assigned; cannot determine the wall footprint")
        if not cell_size.is_positive():
            raise ConfigurationError(f"Cell size must be positive on every axis, got {cell_size.as_tuple()}")
        for name, value in (("length", room_length), ("width", room_width), ("height", room_height)):
            if value < 1:
                raise ConfigurationError(f"Room {name} must be >= 1, got {value}")

        inner_min = Vec3(cell_size.x, cell_size.y, cell_size.z)
        inner_max = cell_size.scale(Vec3(room_length, room_height, room_width))
        bounds = cls(cell_size, room_length, room_width, room_height, inner_min, inner_max)
        logger.debug(
            "Room bounds: inner=%s..%s outer=%dx%dx%d",
            inner_min.as_tuple(),
            inner_max.as_tuple(),
            bounds.outer_length,
            bounds.outer_height,
            bounds.outer_width,
        )
        return bounds

    @property
    def outer_length(self) -> int:
        return self.room_length + 2

    @property
    def outer_width(self) -> int:
        return self.room_width + 2

    @property
    def outer_height(self) -> int:
        return self.room_height + 1

    def is_degenerate(self) -> bool:
        """True when inner_min < inner_max does not hold on every axis."""
        return not (
            self.inner_min.x < self.inner_max.x
            and self.inner_min.y < self.inner_max.y
            and self.inner_min.z < self.inner_max.z
        )

    def to_dict(self) -> dict:
        return {
            "cell_size": list(self.cell_size.as_tuple()),
            "inner_min": list(self.inner_min.as_tuple()),
            "inner_max": list(self.inner_max.as_tuple()),
            "outer": [self.outer_length, self.outer_height, self.outer_width],
        }
