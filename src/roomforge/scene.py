from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .geometry import Vec3, sphere_intersects_box
from .interfaces import ObjectKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneObject:
    handle: int
    kind: ObjectKind
    position: Vec3
    size: Vec3


class InMemoryScene:
    """
    Engine-free scene that is both a SpatialOracle and a PlacementSink.

    - Every placed object is an axis-aligned box centred on its position, sized
      by the footprint registered for its kind.
    - Handles are increasing integers and are never reused.
    - overlaps() reports strict sphere/box penetration against everything
      currently placed.
    """

    def __init__(self, footprints: Optional[Dict[ObjectKind, Vec3]] = None, default_size: Vec3 = Vec3(1, 1, 1)) -> None:
        self._footprints: Dict[ObjectKind, Vec3] = dict(footprints or {})
        self._default_size = default_size
        self._objects: Dict[int, SceneObject] = {}
        self._ids = itertools.count(1)
        self.placed_total = 0
        self.removed_total = 0

    @classmethod
    def for_sizes(cls, cell_size: Optional[Vec3], platform_size: Optional[Vec3]) -> "InMemoryScene":
        """Scene whose walls are cell-sized and platforms platform-sized."""
        cell = cell_size or Vec3(1, 1, 1)
        footprints = {kind: cell for kind in ObjectKind}
        if platform_size is not None:
            footprints[ObjectKind.PLATFORM] = platform_size
            for kind in (ObjectKind.KEY, ObjectKind.DOOR):
                footprints[kind] = platform_size
        return cls(footprints, default_size=cell)

    def footprint(self, kind: ObjectKind) -> Vec3:
        return self._footprints.get(kind, self._default_size)

    # PlacementSink

    def place(self, kind: ObjectKind, position: Vec3) -> int:
        handle = next(self._ids)
        self._objects[handle] = SceneObject(handle, kind, position, self.footprint(kind))
        self.placed_total += 1
        return handle

    def remove(self, handle: int) -> None:
        try:
            obj = self._objects.pop(handle)
        except KeyError:
            raise KeyError(f"Unknown scene handle: {handle!r}") from None
        self.removed_total += 1
        logger.debug("Removed %s #%d at %s", obj.kind.value, handle, obj.position.as_tuple())

    # SpatialOracle

    def overlaps(self, center: Vec3, radius: float) -> bool:
        return any(self.overlapping(center, radius))

    def overlapping(self, center: Vec3, radius: float) -> Iterator[SceneObject]:
        for obj in self._objects.values():
            if sphere_intersects_box(center, radius, obj.position, obj.size):
                yield obj

    # Inspection helpers

    def get(self, handle: int) -> SceneObject:
        return self._objects[handle]

    def __contains__(self, handle: object) -> bool:
        return handle in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def objects(self, kind: Optional[ObjectKind] = None) -> List[SceneObject]:
        return [o for o in self._objects.values() if kind is None or o.kind == kind]

    def count(self, kind: ObjectKind) -> int:
        return sum(1 for o in self._objects.values() if o.kind == kind)
