from __future__ import annotations

import hashlib
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .bounds import RoomBounds
from .config import GeneratorConfig
from .decoration import DecorationAllocator, SlotLedger
from .diagnostics import Diagnostic, DiagnosticLog
from .errors import ConfigurationError
from .events import EventBus, EventType
from .interfaces import ObjectKind, PlacementSink, SpatialOracle
from .platforms import Platform, PlatformPlacer
from .rng import RNGManager
from .room import Cell, RoomBuilder

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Everything a run placed, in placement order.

    ``walls`` and ``floor_cells`` share Cell objects; ``platforms`` holds the
    platform slots including the ones turned into the key, door, traps and
    coins. ``door`` and ``key`` are None when they could not be placed.
    """

    config: GeneratorConfig
    bounds: RoomBounds
    seed_hex: str
    walls: List[Cell]
    floor_cells: List[Cell]
    platforms: List[Platform]
    floor_slots: SlotLedger
    platform_slots: SlotLedger
    door: Optional[Platform] = None
    key: Optional[Platform] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def decorated_floor_cells(self) -> List[Cell]:
        return [c for i, c in enumerate(self.floor_cells) if i in self.floor_slots]

    def decorated_platforms(self) -> List[Platform]:
        return [p for i, p in enumerate(self.platforms) if i in self.platform_slots]

    def counts(self) -> Dict[str, int]:
        kinds = Counter(c.kind.value for c in self.walls)
        kinds.update(p.kind.value for p in self.platforms)
        return {kind.value: kinds.get(kind.value, 0) for kind in ObjectKind}

    def placements(self) -> List[Dict[str, Any]]:
        """Final kind and position of every slot, walls first then platforms."""
        out = [{"kind": c.kind.value, "position": list(c.position.as_tuple())} for c in self.walls]
        out.extend({"kind": p.kind.value, "position": list(p.position.as_tuple())} for p in self.platforms)
        return out

    def signature(self) -> str:
        """Deterministic digest of the placement sequence."""
        payload = {"bounds": self.bounds.to_dict(), "placements": self.placements()}
        return hashlib.blake2b(str(payload).encode("utf-8"), digest_size=16).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed_hex": self.seed_hex,
            "signature": self.signature(),
            "bounds": self.bounds.to_dict(),
            "counts": self.counts(),
            "coin_amount": self.config.coin_amount,
            "platforms": [
                {
                    "kind": p.kind.value,
                    "position": list(p.position.as_tuple()),
                    "tier": p.tier,
                    "pass": p.pass_name,
                }
                for p in self.platforms
            ],
            "door": list(self.door.position.as_tuple()) if self.door is not None else None,
            "key": list(self.key.position.as_tuple()) if self.key is not None else None,
            "decorated_floor_cells": [list(c.coord) for c in self.decorated_floor_cells()],
            "diagnostics": [{"event": d.event_name, **d.to_payload()} for d in self.diagnostics],
        }


class Generator:
    """Runs the whole pipeline: room shell, platforms, then decoration.

    Fatal errors (ConfigurationError, InsufficientSpaceError) propagate to the
    caller; objects already placed in the sink stay there. Recoverable
    conditions end up in ``GenerationResult.diagnostics`` and on the bus.
    """

    def __init__(self, oracle: SpatialOracle, sink: PlacementSink, bus: Optional[EventBus] = None) -> None:
        self.oracle = oracle
        self.sink = sink
        self.bus = bus

    @classmethod
    def for_scene(cls, scene: Any, bus: Optional[EventBus] = None) -> "Generator":
        """Use one object (e.g. InMemoryScene) as both oracle and sink."""
        return cls(scene, scene, bus)

    @staticmethod
    def check_decoration_counts(config: GeneratorConfig, floor_count: int, platform_count: int) -> None:
        """Reject trap/coin requests that cannot fit before any slot is decorated.

        Door and key placement can still take platform slots afterwards, so a
        platform request that passes here may fail later in the allocator.
        """
        floor_wanted = config.floor_traps + config.floor_coins
        if floor_wanted > floor_count:
            raise ConfigurationError(
                f"Requested {floor_wanted} floor traps and coins but the room has only {floor_count} floor cells"
            )
        platform_wanted = config.platform_traps + config.platform_coins
        if platform_wanted > platform_count:
            raise ConfigurationError(
                f"Requested {platform_wanted} platform traps and coins but only {platform_count} platforms were placed"
            )

    def run(self, config: Union[GeneratorConfig, Mapping[str, Any]]) -> GenerationResult:
        if not isinstance(config, GeneratorConfig):
            config = GeneratorConfig.from_mapping(config)
        bus = self.bus if self.bus is not None else EventBus()
        diagnostics = DiagnosticLog(bus)
        rngm = RNGManager(config.seed)

        bounds = RoomBounds.from_dimensions(
            config.cell_vector, config.room_length, config.room_width, config.room_height
        )
        builder = RoomBuilder(self.sink, legacy_floor_classification=config.legacy_floor_classification)
        walls, floor_cells = builder.build(bounds)

        placer = PlatformPlacer(
            bounds,
            config.platform_vector,
            self.oracle,
            self.sink,
            rngm.context_rng("platforms"),
            max_platforms=config.max_platforms,
            vertical_levels=config.vertical_levels,
            max_horizontal_jump=config.max_horizontal_jump,
            min_radius=config.min_radius,
            max_attempts=config.max_attempts,
            legacy_z_sampling=config.legacy_z_sampling,
            diagnostics=diagnostics,
        )
        platforms = placer.generate_platforms()

        self.check_decoration_counts(config, len(floor_cells), len(platforms))
        floor_slots = SlotLedger(len(floor_cells))
        platform_slots = SlotLedger(len(platforms))
        allocator = DecorationAllocator(self.sink, rngm.context_rng("decorations"), bounds, diagnostics)
        # Door and key claim their slots before traps and coins
        door = allocator.place_end_door(platforms, platform_slots)
        key = allocator.place_key(platforms, platform_slots)
        allocator.replace_random_unique(config.floor_traps, floor_cells, ObjectKind.TRAP, floor_slots)
        allocator.replace_random_unique(config.platform_traps, platforms, ObjectKind.TRAP, platform_slots)
        allocator.replace_random_unique(config.platform_coins, platforms, ObjectKind.COIN, platform_slots)
        allocator.replace_random_unique(config.floor_coins, floor_cells, ObjectKind.COIN, floor_slots)

        result = GenerationResult(
            config=config,
            bounds=bounds,
            seed_hex=rngm.get_master_seed_hex(),
            walls=walls,
            floor_cells=floor_cells,
            platforms=platforms,
            floor_slots=floor_slots,
            platform_slots=platform_slots,
            door=door,
            key=key,
            diagnostics=list(diagnostics.items),
        )
        counts = result.counts()
        logger.info("Generation complete: %s (%d diagnostics)", counts, len(result.diagnostics))
        bus.publish(EventType.GENERATION_COMPLETED, {"counts": counts, "signature": result.signature()})
        return result
