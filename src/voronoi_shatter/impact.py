# MIT License (see LICENSE)
"""
Turning collisions into damage.

ImpactTrigger sits on a "breaker" object. When something it hits carries a
Damageable and the relative speed clears a minimum, it builds a
DamageEvent from the contact and hands it over.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass

import numpy as np

from .damage import Damageable, DamageEvent
from .util import f64, norm, unit

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class CollisionContact:
    """
    What the collision detector reports for one contact.

    Attributes:
        relative_velocity: Velocity of the other object relative to the trigger.
        contact_point: World position of the first contact point.
        other_position: Position of the object that was hit.
        trigger_position: Position of the trigger's own object.
        other: The Damageable attached to the hit object, or None.
    """
    relative_velocity: np.ndarray
    contact_point: np.ndarray
    other_position: np.ndarray
    trigger_position: np.ndarray
    other: Damageable | None = None


class ImpactTrigger:
    """
    Converts hard enough collisions into DamageEvents.

    Args:
        break_force: Force per unit of impact speed (and the minimum force).
        minimum_break_velocity: Impacts slower than this are ignored.
    """

    def __init__(self, break_force: float = 10.0, minimum_break_velocity: float = 5.0):
        self.break_force = float(break_force)
        self.minimum_break_velocity = float(minimum_break_velocity)

    def make_event(self, contact: CollisionContact) -> DamageEvent | None:
        """The DamageEvent for `contact`, or None if it is below the speed gate."""
        speed = norm(f64(contact.relative_velocity))
        if speed < self.minimum_break_velocity:
            return None
        return DamageEvent(
            hit_point=f64(contact.contact_point),
            hit_dir=unit(f64(contact.other_position) - f64(contact.trigger_position)),
            hit_force=max(self.break_force, speed * self.break_force),
        )

    def on_collision(self, contact: CollisionContact) -> DamageEvent | None:
        """Deliver damage for `contact`. Returns the event sent, if any."""
        if contact.other is None:
            return None
        event = self.make_event(contact)
        if event is None:
            return None
        contact.other.do_damage(event)
        logger.info("Impact at %.2f m/s delivered %.1f force", norm(f64(contact.relative_velocity)), event.hit_force)
        return event
