from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .bounds import RoomBounds
from .diagnostics import DiagnosticLog, PlacementSkipped
from .errors import ConfigurationError, InsufficientSpaceError
from .geometry import Vec3, clamp
from .interfaces import Handle, ObjectKind, PlacementSink, SpatialOracle

logger = logging.getLogger(__name__)

TIER_PASS = "tier"
LEFTOVER_PASS = "leftover"


@dataclass
class Platform:
    """A placed platform.

    ``origin`` is the spawn cursor the placement was measured against, so the
    jump distance of any platform can be checked after the fact.
    """

    position: Vec3
    handle: Handle
    tier: int
    pass_name: str
    origin: Vec3
    kind: ObjectKind = ObjectKind.PLATFORM


class PlatformPlacer:
    """Places a tiered, jump-reachable chain of platforms inside a room.

    Every candidate is sampled within ``max_horizontal_jump`` of the spawn
    cursor (the last accepted platform) at the cursor's height, clamped so the
    platform footprint stays inside the inner bounds, and accepted when the
    oracle reports free space and the distance to the cursor lies in
    ``[min_radius, max_horizontal_jump]``.

    ``legacy_z_sampling`` keeps the historical behaviour of centring the Z
    sample on the cursor's X coordinate. Turning it off centres Z on the
    cursor's Z coordinate.
    """

    def __init__(
        self,
        bounds: RoomBounds,
        platform_size: Optional[Vec3],
        oracle: SpatialOracle,
        sink: PlacementSink,
        rng: random.Random,
        *,
        max_platforms: int = 10,
        vertical_levels: int = 5,
        max_horizontal_jump: float = 5.0,
        min_radius: float = 3.0,
        max_attempts: int = 100,
        legacy_z_sampling: bool = True,
        diagnostics: Optional[DiagnosticLog] = None,
    ) -> None:
        if platform_size is None:
            raise ConfigurationError("Platform size is not assigned; cannot determine the platform footprint")
        if not platform_size.is_positive():
            raise ConfigurationError(
                f"Platform size must be positive on every axis, got {platform_size.as_tuple()}"
            )
        if max_platforms < 1 or vertical_levels < 1 or max_attempts < 1:
            raise ConfigurationError("max_platforms, vertical_levels and max_attempts must all be >= 1")
        self.bounds = bounds
        self.platform_size = platform_size
        self.oracle = oracle
        self.sink = sink
        self.rng = rng
        self.max_platforms = max_platforms
        # More tiers than platforms is meaningless
        self.vertical_levels = min(vertical_levels, max_platforms)
        self.max_horizontal_jump = max_horizontal_jump
        self.min_radius = min_radius
        self.max_attempts = max_attempts
        self.legacy_z_sampling = legacy_z_sampling
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

        self.x_extent = platform_size.x / 2.0
        self.z_extent = platform_size.z / 2.0
        lo, hi = bounds.inner_min, bounds.inner_max
        self.x_range = (lo.x + self.x_extent, hi.x - self.x_extent)
        self.z_range = (lo.z + self.z_extent, hi.z - self.z_extent)
        self.overlap_radius = lo.y

        self.platforms: List[Platform] = []
        self.cursor = Vec3(lo.x, lo.y * 2, lo.z)

    @property
    def placed_count(self) -> int:
        return len(self.platforms)

    @property
    def platforms_per_level(self) -> int:
        return self.max_platforms // self.vertical_levels

    @property
    def level_height(self) -> float:
        return self.bounds.inner_max.y / self.vertical_levels

    def has_room(self) -> bool:
        return (
            not self.bounds.is_degenerate()
            and self.x_range[0] <= self.x_range[1]
            and self.z_range[0] <= self.z_range[1]
        )

    def generate_platforms(self) -> List[Platform]:
        """Run the tiered pass followed by the leftover pass.

        Raises:
            InsufficientSpaceError: if the geometry cannot hold a platform, or
                no platform could be placed.
        """
        if not self.has_room():
            raise InsufficientSpaceError(
                "Room is too small for a %.2fx%.2f platform footprint (inner bounds %s..%s)"
                % (
                    self.platform_size.x,
                    self.platform_size.z,
                    self.bounds.inner_min.as_tuple(),
                    self.bounds.inner_max.as_tuple(),
                )
            )

        logger.info(
            "Generating %d platforms over %d levels (%d per level, level height %.2f)",
            self.max_platforms,
            self.vertical_levels,
            self.platforms_per_level,
            self.level_height,
        )
        self.initial_random_position()
        for i in range(1, self.vertical_levels):
            for _ in range(self.platforms_per_level):
                self.try_place_platform(self.cursor, tier=i, pass_name=TIER_PASS)
            self._raise_cursor(i)

        if self.vertical_levels > 1 and not self.platforms:
            raise InsufficientSpaceError("Room is too small, no platforms generated")

        self.generate_leftovers()

        if not self.platforms:
            raise InsufficientSpaceError("Room is too small, no platforms generated")
        logger.info("Placed %d/%d platforms", self.placed_count, self.max_platforms)
        return list(self.platforms)

    def generate_leftovers(self) -> None:
        """Consume the shortfall left by integer division and skipped placements."""
        remaining = self.max_platforms - self.placed_count
        if remaining <= 0:
            return
        logger.debug("Leftover pass: %d platforms", remaining)
        self.initial_random_position()
        for k in range(1, remaining + 1):
            self.try_place_platform(self.cursor, tier=k, pass_name=LEFTOVER_PASS)
            self._raise_cursor(k)

    def initial_random_position(self) -> Vec3:
        """Reseed the spawn cursor at a random point just above the floor."""
        x = self.rng.uniform(*self.x_range)
        z = self.rng.uniform(*self.z_range)
        self.cursor = Vec3(x, self.bounds.inner_min.y * 2, z)
        logger.debug("Spawn cursor reseeded at %s", self.cursor.as_tuple())
        return self.cursor

    def try_place_platform(self, anchor: Vec3, tier: int = 0, pass_name: str = TIER_PASS) -> Optional[Platform]:
        """Try up to max_attempts candidates around anchor; None if all fail."""
        jump = self.max_horizontal_jump
        for _ in range(self.max_attempts):
            x = clamp(self.rng.uniform(anchor.x - jump, anchor.x + jump), *self.x_range)
            z_center = anchor.x if self.legacy_z_sampling else anchor.z
            z = clamp(self.rng.uniform(z_center - jump, z_center + jump), *self.z_range)
            candidate = Vec3(x, anchor.y, z)

            if not self.oracle.overlaps(candidate, self.overlap_radius) and self.within_jump(candidate):
                platform = Platform(
                    position=candidate,
                    handle=self.sink.place(ObjectKind.PLATFORM, candidate),
                    tier=tier,
                    pass_name=pass_name,
                    origin=self.cursor,
                )
                self.platforms.append(platform)
                self.cursor = candidate
                logger.debug("Platform %d placed at %s (%s %d)", self.placed_count, candidate.as_tuple(), pass_name, tier)
                return platform

        logger.warning("Failed to find a valid platform position after %d attempts", self.max_attempts)
        self.diagnostics.report(
            PlacementSkipped(tier=tier, pass_name=pass_name, attempts=self.max_attempts, anchor=anchor.as_tuple())
        )
        return None

    def within_jump(self, candidate: Vec3) -> bool:
        distance = self.cursor.distance_to(candidate)
        return self.min_radius <= distance <= self.max_horizontal_jump

    def _raise_cursor(self, step: int) -> None:
        lo, hi = self.bounds.inner_min, self.bounds.inner_max
        self.cursor = self.cursor.with_y(clamp(lo.y + self.level_height * step, lo.y, hi.y))
