# MIT License (see LICENSE)
"""
Outward impulses for fresh fragments.

Every fragment body gets an explosion push centred on the hit point and a
random spin whose scale is half the hit force.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Iterable

import numpy as np

from ..constants import TORQUE_SCALE
from ..damage import DamageEvent, ForceMode

if TYPE_CHECKING:
    from ..scene import SceneObject

logger = logging.getLogger(__name__)


class ImpulseApplicator:
    """
    Applies explosion force and random torque to fragments.

    Args:
        rng: Random source for torque axes.
    """

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def random_torque(self, hit_force: float) -> np.ndarray:
        """Torque with independent components in [-1, 1), scaled by hit_force * 0.5."""
        return self.rng.uniform(-1.0, 1.0, size=3) * hit_force * TORQUE_SCALE

    def apply(self, fragments: Iterable["SceneObject"], event: DamageEvent) -> None:
        for fragment in fragments:
            body = fragment.body
            if body is None:
                logger.error("Fragment %s reached impulse stage without a rigid body", fragment.name)
                continue
            body.add_explosion_force(
                event.hit_force,
                event.hit_point,
                event.explosion_radius,
                event.upwards_modifier,
                mode=event.force_mode,
            )
            body.add_torque(self.random_torque(event.hit_force), mode=ForceMode.IMPULSE)
