"""
Geometric Primitives for polyhedron construction.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vector3:
    """
    An immutable vector in 3D space. Every operation returns a new value.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3:
        if scalar == 0.0: raise ZeroDivisionError("Cannot divide a Vector3 by zero.")
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def scale(self, scalar: float) -> Vector3:
        return self * scalar

    def divide(self, scalar: float) -> Vector3:
        return self / scalar

    @property
    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.length_squared)

    def normalize(self) -> Vector3:
        """
        Returns the unit vector in the same direction.

        Zero-length and already unit-length vectors are returned unchanged.
        """
        len_sq = self.length_squared
        if len_sq == 0.0 or len_sq == 1.0:
            return self
        return self * (1.0 / math.sqrt(len_sq))

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def lerp(self, target: Vector3, alpha: float) -> Vector3:
        """Linear interpolation, `self` at alpha=0 and `target` at alpha=1."""
        return Vector3(
            self.x + alpha * (target.x - self.x),
            self.y + alpha * (target.y - self.y),
            self.z + alpha * (target.z - self.z)
        )

    def to_tuple(self) -> Tuple[float, float, float]:
        return self.x, self.y, self.z

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])


ZERO = Vector3(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Triangle:
    """
    Three indices into a position list.
    The order is counter-clockwise when seen from outside the solid.
    """
    a: int
    b: int
    c: int

    @property
    def indices(self) -> Tuple[int, int, int]:
        return self.a, self.b, self.c

    def contains(self, index: int) -> bool:
        return index == self.a or index == self.b or index == self.c

    def others(self, index: int) -> Tuple[int, ...]:
        """The vertices other than `index`, keeping the triangle's order."""
        return tuple(v for v in self.indices if v != index)

    def reversed(self) -> Triangle:
        """Same triangle, opposite winding."""
        return Triangle(self.c, self.b, self.a)
