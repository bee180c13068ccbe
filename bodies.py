import copy
import random
from typing import List, Optional, Tuple

import numpy as np

from vector3d import Vector3D


G_CONST = 0.0001
DEFAULT_COLOR = (255, 255, 255)

CUBE = [
    [-1.0, -1.0, -1.0],
    [1.0, -1.0, -1.0],
    [1.0, 1.0, -1.0],
    [-1.0, 1.0, -1.0],
    [-1.0, -1.0, 1.0],
    [1.0, -1.0, 1.0],
    [1.0, 1.0, 1.0],
    [-1.0, 1.0, 1.0],
]


def rotation_x(theta: float) -> np.ndarray:
    cs, sn = np.cos(theta), np.sin(theta)
    return np.array([[1.0, 0.0, 0.0],
                     [0.0, cs, -sn],
                     [0.0, sn, cs]])


def rotation_y(theta: float) -> np.ndarray:
    cs, sn = np.cos(theta), np.sin(theta)
    return np.array([[cs, 0.0, sn],
                     [0.0, 1.0, 0.0],
                     [-sn, 0.0, cs]])


def rotation_z(theta: float) -> np.ndarray:
    cs, sn = np.cos(theta), np.sin(theta)
    return np.array([[cs, -sn, 0.0],
                     [sn, cs, 0.0],
                     [0.0, 0.0, 1.0]])


def random_direction(rng=None) -> Vector3D:
    """Random in-plane direction used when two bodies sit on the same point"""
    rng = rng or random
    return Vector3D(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0), 0.0)


class Body:
    """Rigid body with translational state, a kinematic spin and a local shape.

    Preconditions: ``mass > 0`` and ``scale > 0``. They are not checked; a zero
    mass or scale turns the body's state into inf/nan and it stays that way.
    """

    def __init__(self,
                 shape: Optional[List[List[float]] | np.ndarray] = None,
                 position: Optional[Vector3D] = None,
                 velocity: Optional[Vector3D] = None,
                 spin_velocity: Optional[Vector3D] = None,
                 mass: float = 1.0,
                 scale: float = 1.0,
                 g_const: float = G_CONST,
                 color: Tuple[int, int, int] = DEFAULT_COLOR):
        """Creates body with initial property"""
        self.shape = np.array(CUBE if shape is None else shape, dtype=float).reshape(-1, 3)
        self.position = position or Vector3D.zero()
        self.velocity = velocity or Vector3D.zero()
        self.spin_velocity = spin_velocity or Vector3D.zero()
        self.mass = mass
        self.scale = scale
        self.g_const = g_const
        self.color = color

        # Per-step accumulators, cleared by update()
        self.acceleration = Vector3D.zero()
        self.spin_acceleration = Vector3D.zero()

    def __repr__(self) -> str:
        return (f"Body(position={tuple(self.position)}, velocity={tuple(self.velocity)}, "
                f"mass={self.mass}, scale={self.scale})")

    def snapshot(self) -> "Body":
        """Independent copy of the current state"""
        clone = copy.copy(self)
        clone.shape = self.shape.copy()
        return clone

    def displacement_to(self, other: "Body") -> Vector3D:
        return other.position.subtract(self.position)

    def apply_attraction(self, other: "Body", displacement: Vector3D) -> None:
        distance = displacement.length()
        if distance > 0.0:
            # set_magnitude only rescales, so |F| = G * m1 * m2 / d
            strength = self.g_const * ((self.mass * other.mass) / distance)
            force = displacement.set_magnitude(strength)
            force = force.divide(self.mass)
            self.acceleration = self.acceleration.add(force)
            self.spin_acceleration = self.spin_acceleration.add(force)

    def attract_to(self, other: "Body") -> None:
        self.apply_attraction(other, self.displacement_to(other))

    def apply_collision(self, other: "Body", displacement: Vector3D, dt: float, rng=None) -> None:
        self_radius = self.scale + self.position.length() * dt
        other_radius = other.scale + other.position.length() * dt

        edge_distance = displacement.length() - (self_radius + other_radius)
        if edge_distance <= 0.0:
            direction = displacement.multiply(-1.0).normalize()
            self._exchange_velocities(other, direction)
            self._separate(other, direction, edge_distance, dt, rng)

    def apply_forces(self, other: "Body", dt: float, rng=None) -> None:
        displacement = self.displacement_to(other)
        self.apply_attraction(other, displacement)
        self.apply_collision(other, displacement, dt, rng)

    def _exchange_velocities(self, other: "Body", direction: Vector3D) -> None:
        """1D elastic collision along direction, perpendicular parts untouched"""
        v1i = self.velocity.dot(direction)
        v2i = other.velocity.dot(direction)
        v1p = self.velocity.subtract(direction.multiply(v1i))
        v2p = other.velocity.subtract(direction.multiply(v2i))

        m1, m2 = self.mass, other.mass
        v1f = ((v1i * (m1 - m2)) + 2.0 * (m2 * v2i)) / (m1 + m2)
        v2f = ((v2i * (m2 - m1)) + 2.0 * (m1 * v1i)) / (m1 + m2)

        self.velocity = v1p.add(direction.multiply(v1f))
        other.velocity = v2p.add(direction.multiply(v2f))

    def _separate(self, other: "Body", direction: Vector3D, edge_distance: float, dt: float, rng=None) -> None:
        edge = edge_distance + dt
        if direction.length_squared() == 0.0:
            direction = random_direction(rng)

        self.position = self.position.add(direction.multiply(-edge))
        other.position = other.position.add(direction.multiply(edge))

    def _integrate_position(self, dt: float) -> None:
        # Position moves with the old velocity, then velocity takes this step's acceleration
        self.position = self.position.add(self.velocity.multiply(dt))
        self.velocity = self.velocity.add(self.acceleration.multiply(dt))

    def _integrate_spin(self, dt: float) -> None:
        self.spin_velocity = self.spin_velocity.add(self.spin_acceleration.multiply(dt))
        x_angle, y_angle, z_angle = self.spin_velocity.multiply(dt)

        # Rotations compound onto the stored shape every step
        with np.errstate(invalid="ignore"):
            shape = self.shape @ rotation_x(x_angle).T
            shape = shape @ rotation_y(y_angle).T
            self.shape = shape @ rotation_z(z_angle).T

    def update(self, dt: float) -> None:
        self._integrate_position(dt)
        self._integrate_spin(dt)
        self.acceleration = Vector3D.zero()
        self.spin_acceleration = Vector3D.zero()

    def world_points(self) -> np.ndarray:
        """Shape vertices scaled and moved to the body's position"""
        return self.shape * self.scale + self.position.to_array()

    def is_finite(self) -> bool:
        return bool(np.isfinite(self.position.to_array()).all()
                    and np.isfinite(self.velocity.to_array()).all())
