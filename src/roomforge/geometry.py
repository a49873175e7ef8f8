from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp a float between min_value and max_value inclusive."""
    return max(min_value, min(value, max_value))


@dataclass(frozen=True)
class Vec3:
    """Immutable 3D point/vector in world units (y is up)."""

    x: float
    y: float
    z: float

    @classmethod
    def of(cls, values: Iterable[float]) -> "Vec3":
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, other: "Vec3") -> "Vec3":
        """Componentwise product."""
        return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)

    def with_y(self, y: float) -> "Vec3":
        return Vec3(self.x, y, self.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to(self, other: "Vec3") -> float:
        return (self - other).length()

    def is_positive(self) -> bool:
        return self.x > 0 and self.y > 0 and self.z > 0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


def sphere_intersects_box(center: Vec3, radius: float, box_center: Vec3, box_size: Vec3) -> bool:
    """True if the sphere strictly penetrates the axis-aligned box.

    Touching surfaces (distance == radius) do not count as an overlap.
    """
    half = Vec3(box_size.x / 2.0, box_size.y / 2.0, box_size.z / 2.0)
    nearest = Vec3(
        clamp(center.x, box_center.x - half.x, box_center.x + half.x),
        clamp(center.y, box_center.y - half.y, box_center.y + half.y),
        clamp(center.z, box_center.z - half.z, box_center.z + half.z),
    )
    return center.distance_to(nearest) < radius
