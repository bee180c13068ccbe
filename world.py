import logging
import random
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from bodies import Body
from config import SimConfig
from vector3d import Vector3D

logger = logging.getLogger(__name__)


class RenderItem(NamedTuple):
    points: np.ndarray
    color: Tuple[int, int, int]


class World:
    """Owns the bodies and advances them one frame at a time"""

    def __init__(self,
                 config: Optional[SimConfig] = None,
                 center: Optional[Tuple[float, float]] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or SimConfig()
        self.center_x, self.center_y = center if center is not None else self.config.center
        self.rng = rng or random.Random(self.config.seed)
        self.bodies: List[Body] = []

    @classmethod
    def from_config(cls, config: SimConfig, center=None, rng=None) -> "World":
        world = cls(config, center=center, rng=rng)
        world.setup()
        return world

    def __len__(self):
        return len(self.bodies)

    def __iter__(self):
        return iter(self.bodies)

    def add_body(self, body: Body) -> Body:
        self.bodies.append(body)
        return body

    def _add_center_body(self):
        cfg = self.config
        self.add_body(Body(
            position=Vector3D(self.center_x, self.center_y, 0.0),
            mass=cfg.center_mass,
            scale=cfg.center_mass / cfg.center_scale_divisor,
            g_const=cfg.g_const,
            color=cfg.center_color,
        ))

    def _add_orbiting_body(self):
        cfg = self.config
        x = self.center_x - self.rng.uniform(*cfg.orbit_offset_range)
        y = self.center_y - self.rng.uniform(*cfg.orbit_offset_range)
        mass = self.rng.uniform(*cfg.orbit_mass_range)
        self.add_body(Body(
            position=Vector3D(x, y, 0.0),
            velocity=Vector3D(*cfg.orbit_velocity),
            mass=mass,
            scale=mass / cfg.orbit_scale_divisor,
            g_const=cfg.g_const,
            color=cfg.orbit_color,
        ))

    def setup(self):
        self.bodies.clear()
        self._add_center_body()
        for _ in range(self.config.orbiting_count):
            self._add_orbiting_body()
        logger.info("World set up with %d bodies around (%.1f, %.1f)",
                    len(self.bodies), self.center_x, self.center_y)

    def step(self, dt: float) -> List[RenderItem]:
        # Pairwise forces read the pre-step snapshot, never the live bodies
        snapshot = [body.snapshot() for body in self.bodies]
        collisions = self.config.collisions

        for i, body in enumerate(self.bodies):
            for j, other in enumerate(snapshot):
                if i == j:
                    continue
                body.attract_to(other)
                if collisions:
                    # the other side of a collision lands on a scratch copy
                    scratch = other.snapshot()
                    body.apply_collision(scratch, body.displacement_to(scratch), dt, self.rng)
            body.update(dt)

        logger.debug("Stepped %d bodies, dt=%.5f", len(self.bodies), dt)
        return self.render_items()

    def render_items(self) -> List[RenderItem]:
        return [RenderItem(body.world_points(), body.color) for body in self.bodies]

    def non_finite_bodies(self) -> List[int]:
        return [i for i, body in enumerate(self.bodies) if not body.is_finite()]

    def total_momentum(self) -> Vector3D:
        momentum = Vector3D.zero()
        for body in self.bodies:
            momentum = momentum.add(body.velocity.multiply(body.mass))
        return momentum
