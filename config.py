"""
Setup constants for the orbit simulation. The window size decides where the
central body sits; everything else describes the initial population.
"""
from dataclasses import dataclass, replace
from typing import Optional, Tuple


@dataclass
class SimConfig:
    width: int = 800
    height: int = 800
    max_fps: int = 60
    orbiting_count: int = 1000
    seed: Optional[int] = None
    collisions: bool = False
    g_const: float = 0.0001

    center_mass: float = 10_000_000.0
    center_scale_divisor: float = 250_000.0
    center_color: Tuple[int, int, int] = (204, 76, 76)

    orbit_offset_range: Tuple[float, float] = (-50.0, -40.0)
    orbit_mass_range: Tuple[float, float] = (10.0, 50.0)
    orbit_scale_divisor: float = 20.0
    orbit_velocity: Tuple[float, float, float] = (10.0, 30.0, 5.0)
    orbit_color: Tuple[int, int, int] = (255, 255, 255)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"window size must be positive, got {self.width}x{self.height}")
        if self.max_fps < 0:
            raise ValueError(f"max_fps must be >= 0, got {self.max_fps}")
        if self.orbiting_count < 0:
            raise ValueError(f"orbiting_count must be >= 0, got {self.orbiting_count}")
        if self.center_mass <= 0:
            raise ValueError("center_mass must be positive")
        if self.center_scale_divisor <= 0 or self.orbit_scale_divisor <= 0:
            raise ValueError("scale divisors must be positive")
        for name in ("orbit_offset_range", "orbit_mass_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} is inverted: {low} > {high}")
        if self.orbit_mass_range[0] <= 0:
            raise ValueError("orbiting bodies need a positive mass")

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2, self.height / 2

    def copy(self, **changes) -> "SimConfig":
        return replace(self, **changes)
