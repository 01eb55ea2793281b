# MIT License (see LICENSE)
"""
Collision shape selection with a guaranteed fallback.

State machine:

    TRY_EXACT ──(basic gate / unique-vertex test fails)──────────┐
        │                                                       │
        ▼                                                       ▼
    TRY_VOLUME_TEST ──(flat)──────────────────────────────► FALLBACK_BOX
        │                                                       ▲
        ▼                                                       │
    exact construction ──(ColliderConstructionError)────────────┘
        │
        ▼
    EXACT_COLLIDER_ATTACHED                              BOX_COLLIDER_ATTACHED

The cheap local tests reject most doomed hull attempts; the box fallback
always succeeds, so the strategy never fails outward.
"""
from __future__ import annotations
import enum
import logging
from typing import TYPE_CHECKING, Callable

import numpy as np

from ..colliders import BoxCollider, ConvexMeshCollider, build_convex_collider
from ..constants import FLATNESS_TOLERANCE, MIN_HULL_VERTICES, MIN_TRIANGLE_INDICES, UNIQUE_VERTEX_EPS
from ..errors import ColliderConstructionError
from ..types import Mesh
from ..util import unit

if TYPE_CHECKING:
    from ..scene import SceneObject

logger = logging.getLogger(__name__)


class ColliderState(enum.Enum):
    TRY_EXACT = "try_exact"
    TRY_VOLUME_TEST = "try_volume_test"
    FALLBACK_BOX = "fallback_box"


class ColliderOutcome(enum.Enum):
    EXACT_COLLIDER_ATTACHED = "exact"
    BOX_COLLIDER_ATTACHED = "box"


def unique_vertices(vertices: np.ndarray, threshold: float = UNIQUE_VERTEX_EPS) -> np.ndarray:
    """
    Greedy deduplication in input order.

    A vertex is kept unless it lies within `threshold` of a vertex already
    kept.
    """
    kept: list[np.ndarray] = []
    for v in vertices:
        if kept and np.min(np.linalg.norm(np.asarray(kept) - v, axis=1)) < threshold:
            continue
        kept.append(v)
    return np.asarray(kept, dtype=np.float64).reshape(-1, 3)


def is_volume(points: np.ndarray, tolerance: float = FLATNESS_TOLERANCE) -> bool:
    """
    True if some point lies more than `tolerance` off the plane through the
    first three points.

    Collinear first points give no plane normal, so every distance is zero
    and the set is reported flat.
    """
    if len(points) < MIN_HULL_VERTICES:
        return False
    a, b, c = points[0], points[1], points[2]
    normal = unit(np.cross(b - a, c - a))
    distances = np.abs((points[3:] - a) @ normal)
    return bool(np.any(distances > tolerance))


class ColliderStrategy:
    """
    Chooses and attaches a collider for a fragment.

    Args:
        builder: Exact convex collider construction. Must raise
                 ColliderConstructionError on rejection.

    Attributes:
        path: States visited by the last `attach` call, in order.
    """

    def __init__(self, builder: Callable[[Mesh], ConvexMeshCollider] = build_convex_collider):
        self.builder = builder
        self.path: list[ColliderState] = []
        self._unique: np.ndarray | None = None

    def _try_exact(self, mesh: Mesh | None) -> ColliderState:
        if mesh is None or mesh.vertex_count < MIN_HULL_VERTICES or mesh.index_count < MIN_TRIANGLE_INDICES:
            logger.debug("Collider: too little geometry for a hull")
            return ColliderState.FALLBACK_BOX
        unique = unique_vertices(mesh.vertices)
        if len(unique) < MIN_HULL_VERTICES:
            logger.debug("Collider: only %d unique vertices", len(unique))
            return ColliderState.FALLBACK_BOX
        self._unique = unique
        return ColliderState.TRY_VOLUME_TEST

    def _try_volume(self, obj: "SceneObject") -> ColliderState | ColliderOutcome:
        if not is_volume(self._unique):
            logger.debug("Collider: vertices are coplanar, no volume")
            return ColliderState.FALLBACK_BOX
        try:
            hull = self.builder(obj.mesh)
        except ColliderConstructionError as exc:
            logger.warning("Convex collider construction failed for %s: %s", obj.name, exc)
            return ColliderState.FALLBACK_BOX
        obj.set_collider(hull)
        return ColliderOutcome.EXACT_COLLIDER_ATTACHED

    def _fallback_box(self, obj: "SceneObject") -> ColliderOutcome:
        if obj.mesh is not None:
            box = BoxCollider.from_bounds(obj.mesh.bounds)
        else:
            box = BoxCollider(center=np.zeros(3), size=np.zeros(3))
        obj.set_collider(box)
        logger.debug("Collider: box fallback for %s", obj.name)
        return ColliderOutcome.BOX_COLLIDER_ATTACHED

    def attach(self, obj: "SceneObject") -> ColliderOutcome:
        """
        Give `obj` exactly one collider.

        Runs the state machine from TRY_EXACT until a terminal outcome.

        Returns:
            Which terminal state was reached.
        """
        self.path = []
        self._unique = None
        step: ColliderState | ColliderOutcome = ColliderState.TRY_EXACT
        while isinstance(step, ColliderState):
            self.path.append(step)
            if step is ColliderState.TRY_EXACT:
                step = self._try_exact(obj.mesh)
            elif step is ColliderState.TRY_VOLUME_TEST:
                step = self._try_volume(obj)
            else:
                step = self._fallback_box(obj)
        return step
