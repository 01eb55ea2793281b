# MIT License (see LICENSE)
"""
Geometric tolerances and scale factors used by the fracture pipeline.

All lengths are in scene units (metres in the default host).
"""
from __future__ import annotations

# Vertices closer than this to the first vertex count as "the same place"
# when checking a candidate fragment for total collapse.
DEGENERATE_VERTEX_EPS: float = 1e-3

# Deduplication radius used before attempting a convex collider.
UNIQUE_VERTEX_EPS: float = 1e-3

# Maximum out-of-plane distance for a vertex set to be considered flat.
FLATNESS_TOLERANCE: float = 1e-2

# A closed volume needs at least 4 triangles (a tetrahedron), i.e. 12 indices.
MIN_TRIANGLE_INDICES: int = 12

# A convex hull needs at least 4 non-coplanar points.
MIN_HULL_VERTICES: int = 4

# Seeds closer than this produce no bisector plane (normal undefined).
COINCIDENT_SEED_EPS: float = 1e-9

# Distance from a cut plane within which a face is treated as cap geometry.
CAP_FACE_TOLERANCE: float = 1e-6

# Random torque impulse magnitude relative to the hit force.
TORQUE_SCALE: float = 0.5
