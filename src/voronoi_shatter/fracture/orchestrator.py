# MIT License (see LICENSE)
"""
The fragmentation pass.

Algorithm (approximate Voronoi fracture):

    seeds  := K uniform points in the source bounds
    for each seed i, in order:
        current := source
        for each bisector plane of seed i (nearest to the source first):
            sides := slice(current, plane)
            no sides           -> keep current
            otherwise          -> validate sides; invalid ones are released;
                                  of the valid sides in seed i's half-space,
                                  the one nearest seed i becomes current;
                                  everything else, and the superseded current,
                                  is released
                                  (no valid side in the half-space -> the
                                  cell is dropped)
        current is the cell of seed i -> promoted
        release everything queued for deletion
    set up each promoted cell: rigid body, second validation, collider, lifetime

The working set is the source for every seed; cells are not fed back in
as the next seed's input. Carving each seed's cell out of the previous
seed's survivor would keep at most one piece per pass, so a cube split by
two mirrored seeds could never yield its two halves.

Applying the half-spaces one by one instead of intersecting them is
exact for a convex source and an approximation otherwise; a slicer that
fails on a cut simply leaves that face of the cell open.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from ..config import FragmentationConfig
from ..errors import MissingPrerequisiteError
from ..profiler import Profiler
from ..types import Plane
from ..util import distance
from .collider_strategy import ColliderStrategy
from .planes import build_bisector_planes
from .seeds import generate_seeds
from .slicer import FragmentSlicer, TrimeshSlicer
from .validator import FragmentValidator

if TYPE_CHECKING:
    from ..scene import Scene, SceneObject

logger = logging.getLogger(__name__)


class PendingDeletionSet:
    """
    Candidates waiting to be released, in insertion order.

    Flushing takes a snapshot and clears the set before destroying anything,
    so the set is never iterated while it changes.
    """

    def __init__(self) -> None:
        self._items: dict[int, "SceneObject"] = {}

    def add(self, obj: "SceneObject") -> None:
        self._items.setdefault(obj.id, obj)

    def __contains__(self, obj: "SceneObject") -> bool:
        return obj.id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def flush(self, scene: "Scene") -> list["SceneObject"]:
        """Destroy every queued candidate. Returns what was released."""
        released = list(self._items.values())
        self._items.clear()
        for obj in released:
            scene.destroy(obj)
        return released


@dataclass
class FragmentationResult:
    """
    Outcome of one pass.

    Attributes:
        fragments: Promoted fragments, in seed order.
        seeds: The seed layout used.
        released: Candidates destroyed during the pass (never overlaps fragments).
        planes_built: Total bisector planes built across all seeds.
    """
    fragments: list["SceneObject"]
    seeds: np.ndarray
    released: list["SceneObject"] = field(default_factory=list)
    planes_built: int = 0


class FragmentationOrchestrator:
    """
    Runs seed generation, slicing, validation and collider setup for a
    source object.

    Args:
        scene: Arena in which candidates are created and released.
        config: Fragmentation settings.
        slicer: Mesh slicing capability (default: TrimeshSlicer).
        validator: Fragment predicate (default: built from config).
        collider_strategy: Collider selection (default: hull with box fallback).
        rng: Random source for seeds.
        profiler: Optional Profiler; sections "seeds", "slice", "setup".
    """

    def __init__(
        self,
        scene: "Scene",
        config: FragmentationConfig | None = None,
        slicer: FragmentSlicer | None = None,
        validator: FragmentValidator | None = None,
        collider_strategy: ColliderStrategy | None = None,
        rng: np.random.Generator | None = None,
        profiler: Profiler | None = None,
    ):
        self.scene = scene
        self.config = config or FragmentationConfig()
        self.slicer = slicer or TrimeshSlicer()
        self.validator = validator or FragmentValidator(
            minimum_vertex_count=self.config.minimum_vertex_count,
            minimum_fragment_size=self.config.minimum_fragment_size,
        )
        self.collider_strategy = collider_strategy or ColliderStrategy()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.profiler = profiler

    def _slice(self, obj: "SceneObject", plane: Plane):
        if self.profiler:
            with self.profiler.section("slice"):
                return self.slicer.slice(obj, plane, self.config.cross_section)
        return self.slicer.slice(obj, plane, self.config.cross_section)

    def _carve(
        self,
        fragment: "SceneObject",
        planes: list[Plane],
        seed: np.ndarray,
        pending: PendingDeletionSet,
        created: list["SceneObject"],
        name: str,
    ) -> "SceneObject | None":
        """
        Narrow `fragment` toward `seed` one plane at a time.

        Returns the carved cell, `fragment` itself if no cut took, or None
        if the seed's side of some cut was too small to keep.
        """
        current = fragment
        for plane in planes:
            sides = self._slice(current, plane)
            if not sides:
                logger.debug("Cut of %s produced nothing; keeping it", current.name)
                continue

            valid = []
            for hull in sides:
                candidate = self.scene.instantiate(f"{name}_{hull.side}", hull.mesh, hull.transform)
                created.append(candidate)
                if self.validator.is_valid(candidate.mesh):
                    valid.append(candidate)
                else:
                    pending.add(candidate)
            if not valid:
                continue

            # Only sides in the seed's half-space belong to its cell.
            seed_sign = np.sign(plane.signed_distance(seed))
            inside = [c for c in valid if _mean_side(c, plane) * seed_sign > 0]
            for candidate in valid:
                if candidate not in inside:
                    pending.add(candidate)
            if current is not fragment:
                pending.add(current)
            if not inside:
                logger.debug("Cell %s lost its seed side to a cut; dropping it", name)
                return None

            # Bounds centre, not the vertex mean: cap triangulation adds
            # vertices on the cut face. min() keeps the first of ties.
            chosen = min(inside, key=lambda c: distance(c.world_bounds().center, seed))
            for candidate in inside:
                if candidate is not chosen:
                    pending.add(candidate)
            current = chosen
        return current

    def _setup(self, fragment: "SceneObject") -> bool:
        """Rigid body, second validation, collider and lifetime. False if dropped."""
        fragment.add_rigid_body()
        if not self.validator.is_valid(fragment.mesh):
            logger.warning("Fragment %s failed validation after setup; destroying", fragment.name)
            self.scene.destroy(fragment)
            return False
        self.collider_strategy.attach(fragment)
        self.scene.destroy_after(fragment, self.config.fragment_lifetime)
        return True

    def fragment(self, source: "SceneObject") -> FragmentationResult:
        """
        Shatter `source` into at most ``config.fragment_count`` fragments.

        The source itself is never destroyed or deactivated here; that is
        the caller's job once the pass is over. If anything raises during
        the pass, every object the pass created is destroyed before the
        exception propagates.

        Raises:
            MissingPrerequisiteError: If the source has no mesh or bounds.
        """
        if source.mesh is None or source.mesh.is_empty:
            raise MissingPrerequisiteError(f"{source.name} has no mesh to fragment")
        bounds = source.world_bounds()
        if bounds is None:
            raise MissingPrerequisiteError(f"{source.name} has no bounding volume")

        if self.profiler:
            with self.profiler.section("seeds"):
                seeds = generate_seeds(bounds, self.config.fragment_count, self.rng)
        else:
            seeds = generate_seeds(bounds, self.config.fragment_count, self.rng)

        created: list["SceneObject"] = []
        try:
            return self._run(source, seeds, created)
        except Exception:
            for obj in created:
                self.scene.destroy(obj)
            logger.debug("Pass over %s aborted; released %d objects", source.name, len(created))
            raise

    def _run(self, source: "SceneObject", seeds: np.ndarray, created: list["SceneObject"]) -> FragmentationResult:
        # Every seed carves its cell out of the source itself.
        working = [source]
        cells: list["SceneObject"] = []
        released: list["SceneObject"] = []
        promoted_uncut: set[int] = set()
        pending = PendingDeletionSet()
        planes_built = 0

        for i, seed in enumerate(seeds):
            for fragment in working:
                planes = build_bisector_planes(seeds, i, reference=fragment.world_centroid)
                planes_built += len(planes)
                name = f"{source.name}_cell{i}"
                current = self._carve(fragment, planes, seed, pending, created, name)

                if current is fragment:
                    # No cut took; the cell is the whole working fragment.
                    if fragment.id not in promoted_uncut:
                        promoted_uncut.add(fragment.id)
                        current = self.scene.duplicate(fragment, name=name)
                        created.append(current)
                        cells.append(current)
                elif current is not None:
                    current.name = name
                    cells.append(current)
                released.extend(pending.flush(self.scene))
            released.extend(pending.flush(self.scene))

        if self.profiler:
            with self.profiler.section("setup"):
                fragments = [f for f in cells if self._setup(f)]
        else:
            fragments = [f for f in cells if self._setup(f)]

        logger.info(
            "Shattered %s into %d fragments (%d candidates released)",
            source.name, len(fragments), len(released),
        )
        return FragmentationResult(
            fragments=fragments,
            seeds=seeds,
            released=released,
            planes_built=planes_built,
        )


def _mean_side(obj: "SceneObject", plane: Plane) -> float:
    """Mean signed distance of an object's world-space vertices to `plane`."""
    return float(np.mean(plane.signed_distance(obj.transform.to_world(obj.mesh.vertices))))
