# MIT License (see LICENSE)
"""
Geometric sanity checks for candidate fragments.

A candidate is accepted only if it has enough vertices, at least a
tetrahedron's worth of triangles, a non-trivial size, and has not
collapsed onto a single point. The checks depend on geometry alone, so the
same mesh always gets the same verdict.
"""
from __future__ import annotations
import logging

import numpy as np

from ..constants import DEGENERATE_VERTEX_EPS, MIN_TRIANGLE_INDICES
from ..types import Mesh

logger = logging.getLogger(__name__)


class FragmentValidator:
    """
    Accept/reject predicate for fragment meshes.

    Args:
        minimum_vertex_count: Reject meshes with fewer vertices.
        minimum_fragment_size: Reject meshes whose bounds diagonal is smaller.
    """

    def __init__(self, minimum_vertex_count: int = 8, minimum_fragment_size: float = 0.1):
        self.minimum_vertex_count = int(minimum_vertex_count)
        self.minimum_fragment_size = float(minimum_fragment_size)

    def validate(self, mesh: Mesh | None) -> str | None:
        """Return the reason `mesh` is rejected, or None if it is acceptable."""
        if mesh is None:
            return "no mesh"
        if mesh.vertex_count < self.minimum_vertex_count:
            return f"too few vertices: {mesh.vertex_count} < {self.minimum_vertex_count}"
        if mesh.index_count < MIN_TRIANGLE_INDICES:
            return f"too few triangles: {mesh.index_count // 3} < {MIN_TRIANGLE_INDICES // 3}"
        diagonal = mesh.bounds.diagonal
        if diagonal < self.minimum_fragment_size:
            return f"too small: {diagonal:.4g} < {self.minimum_fragment_size:.4g}"
        if mesh.vertex_count > 0:
            spread = np.linalg.norm(mesh.vertices - mesh.vertices[0], axis=1)
            if np.all(spread <= DEGENERATE_VERTEX_EPS):
                return "all vertices at the same position"
        return None

    def is_valid(self, mesh: Mesh | None) -> bool:
        reason = self.validate(mesh)
        if reason is not None:
            logger.debug("Rejected fragment: %s", reason)
            return False
        return True
