import math
from dataclasses import dataclass
from typing import Iterator

import numpy as np


@dataclass(frozen=True)
class Vector3D:
    """Immutable 3D vector; every operation returns a new vector"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def zero(cls) -> "Vector3D":
        return cls(0.0, 0.0, 0.0)

    def multiply(self, num: float) -> "Vector3D":
        return Vector3D(self.x * num, self.y * num, self.z * num)

    def divide(self, num: float) -> "Vector3D":
        """Componentwise division. Dividing by zero gives inf/nan, not an error."""
        with np.errstate(divide="ignore", invalid="ignore"):
            x, y, z = np.divide((self.x, self.y, self.z), num)
        return Vector3D(float(x), float(y), float(z))

    def add(self, vec: "Vector3D") -> "Vector3D":
        return Vector3D(self.x + vec.x, self.y + vec.y, self.z + vec.z)

    def subtract(self, vec: "Vector3D") -> "Vector3D":
        return Vector3D(self.x - vec.x, self.y - vec.y, self.z - vec.z)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        length_squared = self.length_squared()
        if length_squared == 0.0:
            return 0.0
        return math.sqrt(length_squared)

    def normalize(self) -> "Vector3D":
        length = self.length()
        if length == 0.0:
            return Vector3D.zero()
        return Vector3D(self.x / length, self.y / length, self.z / length)

    def dot(self, vec: "Vector3D") -> float:
        return self.x * vec.x + self.y * vec.y + self.z * vec.z

    def cross(self, vec: "Vector3D") -> "Vector3D":
        return Vector3D(
            self.y * vec.z - self.z * vec.y,
            self.z * vec.x - self.x * vec.z,
            self.x * vec.y - self.y * vec.x,
        )

    def set_magnitude(self, magnitude: float) -> "Vector3D":
        """Same direction, new length. A zero-length vector comes back as is."""
        length = self.length()
        if length == 0.0:
            return self
        return Vector3D(
            (self.x / length) * magnitude,
            (self.y / length) * magnitude,
            (self.z / length) * magnitude,
        )

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Vector3D") -> "Vector3D":
        return self.add(other)

    def __sub__(self, other: "Vector3D") -> "Vector3D":
        return self.subtract(other)

    def __mul__(self, num: float) -> "Vector3D":
        return self.multiply(num)

    __rmul__ = __mul__

    def __truediv__(self, num: float) -> "Vector3D":
        return self.divide(num)

    def __neg__(self) -> "Vector3D":
        return self.multiply(-1.0)
