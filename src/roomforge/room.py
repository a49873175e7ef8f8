from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .bounds import RoomBounds
from .geometry import Vec3
from .interfaces import Handle, ObjectKind, PlacementSink

logger = logging.getLogger(__name__)

Coord = Tuple[int, int, int]


@dataclass
class Cell:
    """One unit of the room shell.

    The same Cell object is referenced from both the wall list and the floor
    list, so decorating a floor cell is visible through either.
    """

    coord: Coord
    position: Vec3
    handle: Handle
    kind: ObjectKind = ObjectKind.WALL
    is_floor: bool = False


def on_shell(x: int, y: int, z: int, outer_length: int, outer_width: int) -> bool:
    """Outer-shell membership for a lattice coordinate (the top face is never generated)."""
    return x == 0 or y == 0 or z == 0 or x == outer_length - 1 or z == outer_width - 1


class RoomBuilder:
    """Builds the hollow box of wall cells around the inner bounds.

    Floor classification has two modes:

    - legacy (default): the integer lattice coordinate is compared directly
      against the world-space inner bounds. With a unit cell size this is the
      inner footprint; with larger cells it drifts towards +X/+Z and can pick
      up cells from the far walls.
    - world: the cell's world position is compared against the inner bounds,
      which always yields exactly the inner footprint.
    """

    def __init__(self, sink: PlacementSink, legacy_floor_classification: bool = True) -> None:
        self.sink = sink
        self.legacy_floor_classification = legacy_floor_classification

    def build_room(
        self,
        cell_size: Optional[Vec3],
        room_length: int,
        room_width: int,
        room_height: int,
    ) -> Tuple[List[Cell], List[Cell]]:
        bounds = RoomBounds.from_dimensions(cell_size, room_length, room_width, room_height)
        return self.build(bounds)

    def build(self, bounds: RoomBounds) -> Tuple[List[Cell], List[Cell]]:
        walls: List[Cell] = []
        floor: List[Cell] = []
        for x in range(bounds.outer_length):
            for y in range(bounds.outer_height):
                for z in range(bounds.outer_width):
                    if not on_shell(x, y, z, bounds.outer_length, bounds.outer_width):
                        continue
                    position = bounds.cell_size.scale(Vec3(x, y, z))
                    cell = Cell(
                        coord=(x, y, z),
                        position=position,
                        handle=self.sink.place(ObjectKind.WALL, position),
                        is_floor=self.is_floor_cell(bounds, (x, y, z), position),
                    )
                    walls.append(cell)
                    if cell.is_floor:
                        floor.append(cell)
        logger.info("Built room shell: %d wall cells, %d floor cells", len(walls), len(floor))
        return walls, floor

    def is_floor_cell(self, bounds: RoomBounds, coord: Coord, position: Vec3) -> bool:
        x, y, z = coord
        if y != 0:
            return False
        lo, hi = bounds.inner_min, bounds.inner_max
        if self.legacy_floor_classification:
            return lo.x <= x <= hi.x and lo.z <= z <= hi.z
        return lo.x <= position.x <= hi.x and lo.z <= position.z <= hi.z
