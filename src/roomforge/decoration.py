from __future__ import annotations

import logging
import random
from typing import FrozenSet, List, Optional, Sequence, Set, Union

from .bounds import RoomBounds
from .diagnostics import DiagnosticLog, DoorNotPlaced, KeyNotPlaced
from .errors import ConfigurationError
from .interfaces import ObjectKind, PlacementSink
from .platforms import Platform
from .room import Cell

logger = logging.getLogger(__name__)

Slot = Union[Cell, Platform]


class SlotLedger:
    """Indices of a candidate list that have already been decorated.

    An index can be marked once; marking it again is a programming error.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("SlotLedger size must be >= 0")
        self.size = size
        self._used: Set[int] = set()

    def __contains__(self, index: int) -> bool:
        return index in self._used

    def __len__(self) -> int:
        return len(self._used)

    @property
    def used(self) -> FrozenSet[int]:
        return frozenset(self._used)

    @property
    def available(self) -> int:
        return self.size - len(self._used)

    def unused(self) -> List[int]:
        return [i for i in range(self.size) if i not in self._used]

    def mark(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise IndexError(f"Slot {index} out of range for {self.size} slots")
        if index in self._used:
            raise ValueError(f"Slot {index} is already decorated")
        self._used.add(index)


class DecorationAllocator:
    """Turns generic floor cells and platforms into traps, coins, a key and a door.

    Every replacement removes the existing handle, places the new kind at the
    same position and overwrites the slot in place.
    """

    def __init__(
        self,
        sink: PlacementSink,
        rng: random.Random,
        bounds: RoomBounds,
        diagnostics: Optional[DiagnosticLog] = None,
    ) -> None:
        self.sink = sink
        self.rng = rng
        self.bounds = bounds
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    @property
    def door_min_height(self) -> float:
        """Doors only go in the top third of the room."""
        top = self.bounds.inner_max.y
        return top - top / 3

    def replace_random_unique(
        self,
        count: int,
        candidates: Sequence[Slot],
        kind: ObjectKind,
        ledger: SlotLedger,
    ) -> int:
        """Replace ``count`` distinct, not yet decorated slots with ``kind``.

        Raises:
            ConfigurationError: if fewer than ``count`` unused slots remain.
                Nothing is replaced in that case.
        """
        if count < 0:
            raise ConfigurationError(f"Cannot place a negative number of {kind.value} objects ({count})")
        if count == 0:
            return 0
        unused = ledger.unused()
        if count > len(unused):
            raise ConfigurationError(
                f"Requested {count} {kind.value} objects but only {len(unused)} of "
                f"{len(candidates)} slots are free"
            )
        for index in self.rng.sample(unused, count):
            self._replace(candidates, index, kind, ledger)
        logger.info("Placed %d %s objects (%d slots still free)", count, kind.value, ledger.available)
        return count

    def place_key(self, platforms: Sequence[Platform], ledger: SlotLedger) -> Optional[Platform]:
        """Put the key on one randomly drawn, not yet decorated platform."""
        unused = ledger.unused()
        if not unused:
            logger.warning("No free platform left for the key")
            self.diagnostics.report(KeyNotPlaced(platform_count=len(platforms)))
            return None
        index = self.rng.choice(unused)
        self._replace(platforms, index, ObjectKind.KEY, ledger)
        logger.info("Key placed on platform %d", index)
        return platforms[index]

    def place_end_door(self, platforms: Sequence[Platform], ledger: SlotLedger) -> Optional[Platform]:
        """Put the door on the first high platform from the middle of the list onward.

        The scan is deterministic; when no platform qualifies the room simply
        has no door and a DoorNotPlaced diagnostic is reported.
        """
        start = len(platforms) // 2
        min_height = self.door_min_height
        for index in range(start, len(platforms)):
            if index in ledger:
                continue
            if platforms[index].position.y >= min_height:
                self._replace(platforms, index, ObjectKind.DOOR, ledger)
                logger.info("End door placed on platform %d", index)
                return platforms[index]

        logger.warning(
            "No platform from index %d onward reaches the door height %.2f; room has no door",
            start,
            min_height,
        )
        self.diagnostics.report(
            DoorNotPlaced(min_height=min_height, scanned_from=start, platform_count=len(platforms))
        )
        return None

    def _replace(self, candidates: Sequence[Slot], index: int, kind: ObjectKind, ledger: SlotLedger) -> None:
        slot = candidates[index]
        self.sink.remove(slot.handle)
        slot.handle = self.sink.place(kind, slot.position)
        slot.kind = kind
        ledger.mark(index)
