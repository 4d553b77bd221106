"""Core spatial types for terrain analysis."""

import math

from pydantic import BaseModel

# Vectors shorter than this normalize to the zero vector
NORMALIZE_EPSILON = 1e-4


class GridCoord(BaseModel, frozen=True):
    """Immutable lattice coordinate within a chunk's local grid.

    Coordinate system: +X is East, +Z is South.
    """

    x: int
    z: int

    def __hash__(self) -> int:
        return hash((self.x, self.z))

    def __str__(self) -> str:
        return f"({self.x}, {self.z})"

    def __repr__(self) -> str:
        return f"GridCoord(x={self.x}, z={self.z})"


class Vector3(BaseModel, frozen=True):
    """Immutable 3D float vector. Y is up (elevation)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Vector3":
        """Return the unit vector, or the zero vector if nearly zero-length."""
        length = self.length()
        if length < NORMALIZE_EPSILON:
            return ZERO_VECTOR
        return Vector3(x=self.x / length, y=self.y / length, z=self.z / length)

    def distance_to(self, other: "Vector3") -> float:
        return (self - other).length()

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0

    def __hash__(self) -> int:
        return hash((self.x, self.y, self.z))

    def __str__(self) -> str:
        return f"({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


ZERO_VECTOR = Vector3()
UP_VECTOR = Vector3(y=1.0)
