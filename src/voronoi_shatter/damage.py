# MIT License (see LICENSE)
"""
Damage events and the damage-receiving capability.

Anything that exposes ``do_damage(event)`` can be hit. The fragmenting
VoronoiBreakable (see breakable.py) is one implementation;
HealthDamageable below is the simple, non-fragmenting one.
"""
from __future__ import annotations
import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from .util import f64, unit

if TYPE_CHECKING:
    from .scene import SceneObject

logger = logging.getLogger(__name__)


class DamageType(enum.Enum):
    EXPLOSION = "explosion"
    SHOOT = "shoot"


class ForceMode(enum.Enum):
    """
    How a force vector is turned into a velocity change.

    FORCE and ACCELERATION accumulate and are integrated over the next step;
    IMPULSE and VELOCITY_CHANGE change velocity immediately.
    """
    FORCE = "force"
    ACCELERATION = "acceleration"
    IMPULSE = "impulse"
    VELOCITY_CHANGE = "velocity_change"


@dataclass(frozen=True, eq=False)
class DamageEvent:
    """
    Description of a single hit. Read-only for every receiver.

    Attributes:
        hit_point: World-space impact point.
        hit_dir: Normalized impact direction.
        hit_force: Explosion force magnitude (>= 0).
        explosion_radius: Radius of the explosion falloff (>= 0, 0 = no falloff).
        upwards_modifier: Lowers the apparent explosion centre along -Y,
                          which lifts fragments.
        force_mode: How hit_force is applied to fragment bodies.
        damage_type: EXPLOSION or SHOOT.
        can_dismember: Hint for receivers that support partial breakage.
        sender: Opaque reference to whatever caused the hit.
        dmg: Scalar damage amount for health-based receivers.
    """
    hit_point: np.ndarray = (0.0, 0.0, 0.0)
    hit_dir: np.ndarray = (0.0, 0.0, 0.0)
    hit_force: float = 0.0
    explosion_radius: float = 0.0
    upwards_modifier: float = 0.0
    force_mode: ForceMode = ForceMode.IMPULSE
    damage_type: DamageType = DamageType.SHOOT
    can_dismember: bool = False
    sender: Any = None
    dmg: float = 0.0

    def __post_init__(self) -> None:
        if self.hit_force < 0:
            raise ValueError(f"hit_force must be >= 0, got {self.hit_force}")
        if self.explosion_radius < 0:
            raise ValueError(f"explosion_radius must be >= 0, got {self.explosion_radius}")
        hit_point = f64(self.hit_point)
        hit_dir = unit(f64(self.hit_dir))
        hit_point.setflags(write=False)
        hit_dir.setflags(write=False)
        object.__setattr__(self, "hit_point", hit_point)
        object.__setattr__(self, "hit_dir", hit_dir)


class Damageable(ABC):
    """Capability interface for objects that react to DamageEvents."""

    @abstractmethod
    def do_damage(self, event: DamageEvent) -> None:
        """Receive a hit. Must never raise into the caller."""
        ...


class HealthDamageable(Damageable):
    """
    Non-fragmenting damage handler: subtracts ``event.dmg`` from a health
    pool and deactivates its object once health reaches zero.
    """

    def __init__(self, target: "SceneObject", health: float = 100.0):
        self.target = target
        self.health = float(health)

    @property
    def is_dead(self) -> bool:
        return self.health <= 0.0

    def do_damage(self, event: DamageEvent) -> None:
        if self.is_dead:
            return
        self.health = max(0.0, self.health - event.dmg)
        logger.debug("%s took %.2f damage, %.2f left", self.target.name, event.dmg, self.health)
        if self.is_dead:
            self.target.deactivate()
