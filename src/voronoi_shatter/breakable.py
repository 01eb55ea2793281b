# MIT License (see LICENSE)
"""
The fragmenting damage receiver.

VoronoiBreakable is what gets hit. Damage usually arrives from inside a
collision callback, where creating and destroying scene objects is unsafe,
so ``do_damage`` only queues the pass for the next scene tick. The queued
pass then runs to completion in one go: fragment, push, deactivate.

Duplicate hits: the first accepted hit wins. Hits arriving while a pass is
queued, or after the object has shattered, are ignored.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING

import numpy as np

from .config import FragmentationConfig
from .damage import Damageable, DamageEvent
from .errors import FragmentationError
from .fracture.impulses import ImpulseApplicator
from .fracture.orchestrator import FragmentationOrchestrator, FragmentationResult
from .fracture.slicer import FragmentSlicer
from .profiler import Profiler

if TYPE_CHECKING:
    from .scene import Scene, SceneObject

logger = logging.getLogger(__name__)


class VoronoiBreakable(Damageable):
    """
    Shatters `target` when damaged.

    Args:
        target: The object to break.
        scene: Scene that owns `target` and schedules the deferred pass.
        config: Fragmentation settings.
        slicer: Mesh slicing capability (default: trimesh).
        rng: Random source for seeds and torques.
        profiler: Optional Profiler passed to the orchestrator.
    """

    def __init__(
        self,
        target: "SceneObject",
        scene: "Scene",
        config: FragmentationConfig | None = None,
        slicer: FragmentSlicer | None = None,
        rng: np.random.Generator | None = None,
        profiler: Profiler | None = None,
    ):
        self.target = target
        self.scene = scene
        self.config = config or FragmentationConfig()
        rng = rng if rng is not None else np.random.default_rng()
        self.orchestrator = FragmentationOrchestrator(
            scene, self.config, slicer=slicer, rng=rng, profiler=profiler
        )
        self.impulses = ImpulseApplicator(rng)
        self.pending = False
        self.shattered = False
        self.last_result: FragmentationResult | None = None

    def do_damage(self, event: DamageEvent) -> None:
        if self.pending or self.shattered:
            logger.debug("Ignoring damage on %s: already breaking", self.target.name)
            return
        if not self.target.active or self.target.destroyed:
            logger.debug("Ignoring damage on inactive %s", self.target.name)
            return
        self.pending = True
        self.scene.call_next_tick(lambda: self._break(event))

    def _break(self, event: DamageEvent) -> None:
        try:
            result = self.orchestrator.fragment(self.target)
        except FragmentationError as exc:
            logger.warning("Cannot shatter %s: %s", self.target.name, exc)
            self.pending = False
            return
        except Exception:
            # Runs inside Scene.step; a failed pass must not take the tick down.
            logger.exception("Shatter pass for %s failed", self.target.name)
            self.pending = False
            return

        self.impulses.apply(result.fragments, event)
        self.target.deactivate()
        self.last_result = result
        self.pending = False
        self.shattered = True
