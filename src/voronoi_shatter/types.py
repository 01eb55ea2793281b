# MIT License (see LICENSE)
"""
Core type definitions for the fracture pipeline.

Defines the fundamental geometric data structures:
- Bounds: an axis-aligned bounding box.
- Plane: an oriented plane (point + unit normal), used for bisector cuts.
- Transform: a rigid placement (rotation + translation) of a mesh.
- CrossSection: the material descriptor applied to freshly cut faces.
- Mesh: an indexed triangle mesh in local coordinates.

Meshes are never modified in place by the pipeline. Every cut produces new
Mesh instances, which keeps fragment geometry exclusively owned.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .constants import CAP_FACE_TOLERANCE
from .util import f64, norm


# =============================================================================
# Bounds / Plane / Transform
# =============================================================================

@dataclass(frozen=True, eq=False)
class Bounds:
    """
    Axis-aligned bounding box.

    Attributes:
        min: Minimum corner [x, y, z].
        max: Maximum corner [x, y, z].
    """
    min: np.ndarray
    max: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "min", f64(self.min))
        object.__setattr__(self, "max", f64(self.max))

    @classmethod
    def from_points(cls, points: np.ndarray) -> "Bounds":
        """Tightest box around a point set. An empty set yields a zero box at the origin."""
        pts = f64(points).reshape(-1, 3)
        if len(pts) == 0:
            return cls(np.zeros(3), np.zeros(3))
        return cls(pts.min(axis=0), pts.max(axis=0))

    @property
    def center(self) -> np.ndarray:
        return 0.5 * (self.min + self.max)

    @property
    def size(self) -> np.ndarray:
        """Full edge lengths along x, y, z."""
        return self.max - self.min

    @property
    def diagonal(self) -> float:
        """Length of the box diagonal (magnitude of the size vector)."""
        return norm(self.size)

    def corners(self) -> np.ndarray:
        """The 8 corners as an (8, 3) array."""
        lo, hi = self.min, self.max
        return np.array([
            [x, y, z]
            for x in (lo[0], hi[0])
            for y in (lo[1], hi[1])
            for z in (lo[2], hi[2])
        ], dtype=np.float64)

    def contains(self, point: np.ndarray, eps: float = 1e-12) -> bool:
        p = f64(point)
        return bool(np.all(p >= self.min - eps) and np.all(p <= self.max + eps))


@dataclass(frozen=True, eq=False)
class Plane:
    """
    Oriented plane through `point` with unit `normal`.

    The positive half-space is the side the normal points to. For bisector
    planes this is the side of the owning seed.
    """
    point: np.ndarray
    normal: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", f64(self.point))
        object.__setattr__(self, "normal", f64(self.normal))

    def signed_distance(self, points: np.ndarray) -> np.ndarray | float:
        """Signed distance of one point (float) or an (N, 3) array (ndarray)."""
        d = (f64(points) - self.point) @ self.normal
        return float(d) if np.ndim(d) == 0 else d


@dataclass(eq=False)
class Transform:
    """
    Rigid placement of a mesh in world space.

    p_world = R @ p_local + position

    Attributes:
        position: Translation [x, y, z].
        rotation: 3x3 orthonormal rotation matrix.
    """
    position: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: np.ndarray | None = None

    def __post_init__(self) -> None:
        self.position = f64(self.position)
        self.rotation = np.eye(3) if self.rotation is None else f64(self.rotation)

    def copy(self) -> "Transform":
        return Transform(self.position.copy(), self.rotation.copy())

    def to_world(self, points: np.ndarray) -> np.ndarray:
        """Transform a point or (N, 3) points from local to world coordinates."""
        return f64(points) @ self.rotation.T + self.position

    def to_local(self, points: np.ndarray) -> np.ndarray:
        """Transform a point or (N, 3) points from world to local coordinates."""
        return (f64(points) - self.position) @ self.rotation

    def direction_to_local(self, direction: np.ndarray) -> np.ndarray:
        return f64(direction) @ self.rotation

    def plane_to_local(self, plane: Plane) -> Plane:
        return Plane(self.to_local(plane.point), self.direction_to_local(plane.normal))


@dataclass(frozen=True)
class CrossSection:
    """
    Material descriptor for faces exposed by a cut.

    Attributes:
        material: Name of the material applied to cap faces.
        color: RGBA tint, for renderers that use it.
    """
    material: str = "cross_section"
    color: tuple[float, float, float, float] = (0.8, 0.8, 0.8, 1.0)


# =============================================================================
# Mesh
# =============================================================================

# Outward-wound unit cube faces over the vertex order produced by Mesh.box.
_BOX_FACES = np.array([
    [1, 3, 0], [4, 1, 0], [0, 3, 2], [2, 4, 0],
    [1, 7, 3], [5, 1, 4], [5, 7, 1], [3, 7, 2],
    [6, 4, 2], [2, 7, 6], [6, 5, 4], [7, 5, 6],
], dtype=np.int64)


@dataclass(eq=False)
class Mesh:
    """
    Indexed triangle mesh in local coordinates.

    Attributes:
        vertices: Vertex positions [N, 3].
        triangles: Vertex indices per triangle [M, 3].
        cut_planes: Local-space planes of every cut that shaped this mesh.
        cross_section: Material descriptor of the cap faces, if any.
    """
    vertices: np.ndarray
    triangles: np.ndarray
    cut_planes: tuple[Plane, ...] = ()
    cross_section: CrossSection | None = None

    def __post_init__(self) -> None:
        self.vertices = f64(self.vertices).reshape(-1, 3)
        self.triangles = np.asarray(self.triangles, dtype=np.int64).reshape(-1, 3)

    @classmethod
    def box(cls, extents=(1.0, 1.0, 1.0), center=(0.0, 0.0, 0.0)) -> "Mesh":
        """Closed, outward-wound box of the given full extents (8 vertices, 12 triangles)."""
        corners = np.array(
            [[x, y, z] for x in (0, 1) for y in (0, 1) for z in (0, 1)],
            dtype=np.float64,
        )
        vertices = (corners - 0.5) * f64(extents) + f64(center)
        return cls(vertices, _BOX_FACES.copy())

    @property
    def vertex_count(self) -> int:
        return int(len(self.vertices))

    @property
    def index_count(self) -> int:
        """Number of triangle indices (3 per triangle)."""
        return int(self.triangles.size)

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0 or len(self.triangles) == 0

    @property
    def bounds(self) -> Bounds:
        return Bounds.from_points(self.vertices)

    @property
    def centroid(self) -> np.ndarray:
        """Mean vertex position (local space)."""
        if self.vertex_count == 0:
            return np.zeros(3, dtype=np.float64)
        return self.vertices.mean(axis=0)

    @property
    def cap_face_mask(self) -> np.ndarray:
        """Boolean mask of triangles lying on one of the cut planes."""
        mask = np.zeros(len(self.triangles), dtype=bool)
        if not self.cut_planes or len(self.triangles) == 0:
            return mask
        tri_pts = self.vertices[self.triangles]  # [M, 3, 3]
        for plane in self.cut_planes:
            d = np.abs((tri_pts - plane.point) @ plane.normal)
            mask |= np.all(d <= CAP_FACE_TOLERANCE, axis=1)
        return mask

    def copy(self) -> "Mesh":
        return Mesh(
            self.vertices.copy(),
            self.triangles.copy(),
            cut_planes=self.cut_planes,
            cross_section=self.cross_section,
        )
