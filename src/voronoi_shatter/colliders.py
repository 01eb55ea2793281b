# MIT License (see LICENSE)
"""
Collision shapes attached to fragments.

Two representations are supported:
- BoxCollider: an axis-aligned box in the object's local frame. Cheap and
  always constructible.
- ConvexMeshCollider: the convex hull of the fragment's vertices. Built by
  `build_convex_collider`, which wraps Qhull and may reject nearly
  degenerate inputs.
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .errors import ColliderConstructionError
from .types import Bounds, Mesh
from .util import f64


@dataclass(frozen=True, eq=False)
class BoxCollider:
    """
    Box collision shape.

    Attributes:
        center: Local-space box centre.
        size: Full edge lengths.
    """
    center: np.ndarray
    size: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", f64(self.center))
        object.__setattr__(self, "size", f64(self.size))

    @classmethod
    def from_bounds(cls, bounds: Bounds) -> "BoxCollider":
        return cls(center=bounds.center, size=bounds.size)

    @property
    def kind(self) -> str:
        return "box"


@dataclass(frozen=True, eq=False)
class ConvexMeshCollider:
    """
    Convex hull collision shape.

    Attributes:
        vertices: Hull vertices [N, 3] in local space.
        faces: Hull triangles [M, 3], indices into `vertices`.
        volume: Enclosed volume.
    """
    vertices: np.ndarray
    faces: np.ndarray
    volume: float

    @property
    def kind(self) -> str:
        return "convex"


Collider = BoxCollider | ConvexMeshCollider


def build_convex_collider(mesh: Mesh) -> ConvexMeshCollider:
    """
    Build a convex hull collider from a mesh's vertices.

    Raises:
        ColliderConstructionError: If Qhull rejects the point set (too few
            points, coplanar or otherwise degenerate input) or the hull has
            no volume.
    """
    points = mesh.vertices
    if len(points) < 4:
        raise ColliderConstructionError(f"need at least 4 points for a hull, got {len(points)}")
    try:
        hull = ConvexHull(points)
    except (QhullError, ValueError) as exc:
        raise ColliderConstructionError(str(exc).splitlines()[0] if str(exc) else type(exc).__name__) from exc

    if not np.isfinite(hull.volume) or hull.volume <= 0.0:
        raise ColliderConstructionError(f"hull has no volume ({hull.volume})")

    # Re-index simplices onto the hull's own vertex list.
    remap = np.full(len(points), -1, dtype=np.int64)
    remap[hull.vertices] = np.arange(len(hull.vertices))
    return ConvexMeshCollider(
        vertices=points[hull.vertices].copy(),
        faces=remap[hull.simplices],
        volume=float(hull.volume),
    )
