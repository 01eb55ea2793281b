# MIT License (see LICENSE)
"""
3D rigid body used by fragments.

Implements the equations of motion for a free rigid body with a diagonal
inertia tensor (box approximation of the fragment bounds):
  dx/dt = v           (position rate of change)
  dv/dt = F/m         (velocity rate of change)
  dω/dt = I⁻¹ τ       (angular velocity rate of change)

Forces can be applied with any ForceMode:
  FORCE            accumulate F, integrated over the next step
  ACCELERATION     accumulate m·a, integrated over the next step
  IMPULSE          Δv = J / m
  VELOCITY_CHANGE  Δv = J
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .damage import ForceMode
from .util import f64, norm


@dataclass(eq=False)
class RigidBody3D:
    """
    A 3D rigid body with kinematic and dynamic state.

    Attributes:
        mass: Mass in kg. Use mass <= 0 for static/immovable bodies.
        position: World-space centre of mass.
        velocity: Linear velocity in m/s.
        angular_velocity: Angular velocity in rad/s (world axes).
        inertia: Principal moments of inertia [Ixx, Iyy, Izz].
        use_gravity: Whether Scene gravity applies.
        force: Accumulated force (cleared each step).
        torque: Accumulated torque (cleared each step).
    """
    mass: float = 1.0
    position: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    angular_velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    inertia: np.ndarray | tuple[float, float, float] = (1.0, 1.0, 1.0)
    use_gravity: bool = True

    force: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    torque: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))

    def __post_init__(self) -> None:
        self.position = f64(self.position)
        self.velocity = f64(self.velocity)
        self.angular_velocity = f64(self.angular_velocity)
        self.inertia = f64(self.inertia)
        self.force = f64(self.force)
        self.torque = f64(self.torque)

    @classmethod
    def for_box(cls, size: np.ndarray, mass: float = 1.0, position=(0.0, 0.0, 0.0)) -> "RigidBody3D":
        """
        Body with the inertia of a solid box of full edge lengths `size`.

        I_xx = m (h² + d²) / 12, and cyclically.
        """
        w, h, d = (float(s) for s in f64(size))
        inertia = (mass / 12.0) * np.array([h * h + d * d, w * w + d * d, w * w + h * h])
        # A flat box has zero moment about its normal; keep the body rotatable.
        inertia = np.maximum(inertia, 1e-9)
        return cls(mass=mass, position=position, inertia=inertia)

    @property
    def inv_mass(self) -> float:
        """Inverse mass (1/m). Returns 0 for static bodies (mass <= 0)."""
        return 0.0 if self.mass <= 0 else 1.0 / self.mass

    @property
    def inv_inertia(self) -> np.ndarray:
        if self.mass <= 0:
            return np.zeros(3, dtype=np.float64)
        return np.where(self.inertia > 0, 1.0 / np.where(self.inertia > 0, self.inertia, 1.0), 0.0)

    def clear_forces(self) -> None:
        """Reset accumulated force and torque to zero for next timestep."""
        self.force[:] = 0.0
        self.torque[:] = 0.0

    def add_force(self, force: np.ndarray, mode: ForceMode = ForceMode.FORCE) -> None:
        """Apply a force through the centre of mass."""
        if self.mass <= 0:
            return
        f = f64(force)
        if mode is ForceMode.FORCE:
            self.force += f
        elif mode is ForceMode.ACCELERATION:
            self.force += self.mass * f
        elif mode is ForceMode.IMPULSE:
            self.velocity += f * self.inv_mass
        elif mode is ForceMode.VELOCITY_CHANGE:
            self.velocity += f
        else:
            raise ValueError(f"Unknown force mode: {mode}")

    def add_torque(self, torque: np.ndarray, mode: ForceMode = ForceMode.FORCE) -> None:
        """Apply a torque about the centre of mass."""
        if self.mass <= 0:
            return
        t = f64(torque)
        if mode is ForceMode.FORCE:
            self.torque += t
        elif mode is ForceMode.ACCELERATION:
            self.torque += self.inertia * t
        elif mode is ForceMode.IMPULSE:
            self.angular_velocity += self.inv_inertia * t
        elif mode is ForceMode.VELOCITY_CHANGE:
            self.angular_velocity += t
        else:
            raise ValueError(f"Unknown force mode: {mode}")

    def add_explosion_force(
        self,
        explosion_force: float,
        explosion_position: np.ndarray,
        explosion_radius: float,
        upwards_modifier: float = 0.0,
        mode: ForceMode = ForceMode.FORCE,
    ) -> None:
        """
        Push the body away from an explosion centre.

        The apparent centre is lowered by `upwards_modifier` along -Y, which
        tilts the push upwards. Strength falls off linearly from full at the
        centre to zero at `explosion_radius`; bodies beyond the radius are
        unaffected. A radius of 0 applies the full force regardless of
        distance.
        """
        center = f64(explosion_position).copy()
        center[1] -= upwards_modifier
        offset = self.position - center
        dist = norm(offset)

        if explosion_radius > 0.0:
            if dist > explosion_radius:
                return
            scale = 1.0 - dist / explosion_radius
        else:
            scale = 1.0

        if dist < 1e-12:
            # Body sits on the explosion centre: push straight up.
            direction = np.array([0.0, 1.0, 0.0])
        else:
            direction = offset / dist

        self.add_force(direction * explosion_force * scale, mode=mode)

    def integrate(self, dt: float, gravity: np.ndarray) -> np.ndarray:
        """
        Semi-implicit Euler step. Returns the position delta.

        v ← v + (F/m + g) dt ; x ← x + v dt ; ω ← ω + I⁻¹τ dt
        """
        if self.mass <= 0:
            self.clear_forces()
            return np.zeros(3, dtype=np.float64)
        acc = self.force * self.inv_mass
        if self.use_gravity:
            acc = acc + f64(gravity)
        self.velocity += acc * dt
        self.angular_velocity += self.inv_inertia * self.torque * dt
        delta = self.velocity * dt
        self.position += delta
        self.clear_forces()
        return delta
