# MIT License (see LICENSE)
"""
Perpendicular-bisector planes between seeds.

For seed i and every other seed j, the plane through the midpoint with
normal (s_i - s_j)/|s_i - s_j| bounds the Voronoi cell of s_i against s_j
alone. The cell itself is the intersection of all these half-spaces; the
orchestrator approximates it by applying the planes one cut at a time.
"""
from __future__ import annotations
import logging

import numpy as np

from ..constants import COINCIDENT_SEED_EPS
from ..types import Plane
from ..util import f64, norm

logger = logging.getLogger(__name__)


def bisector_plane(owner: np.ndarray, other: np.ndarray) -> Plane | None:
    """
    Bisector of two seeds, oriented toward `owner`.

    Returns None when the seeds coincide (the normal would be undefined).
    """
    owner, other = f64(owner), f64(other)
    diff = owner - other
    length = norm(diff)
    if length < COINCIDENT_SEED_EPS:
        return None
    return Plane(point=0.5 * (owner + other), normal=diff / length)


def build_bisector_planes(
    seeds: np.ndarray,
    index: int,
    reference: np.ndarray | None = None,
) -> list[Plane]:
    """
    Planes bounding the cell of seeds[index], one per other seed.

    Args:
        seeds: Seed array [K, 3].
        index: The owning seed.
        reference: Optional point (the fragment centroid). When given, the
                   planes are stably ordered by their distance to it, nearest
                   first; equal distances keep seed order.

    Returns:
        Up to K-1 planes. Planes toward coincident seeds are skipped.
    """
    owner = seeds[index]
    planes: list[Plane] = []
    for j, other in enumerate(seeds):
        if j == index:
            continue
        plane = bisector_plane(owner, other)
        if plane is None:
            logger.debug("Seeds %d and %d coincide; skipping bisector", index, j)
            continue
        planes.append(plane)

    if reference is not None and planes:
        ref = f64(reference)
        # sorted() is stable, so ties keep seed order.
        planes = sorted(planes, key=lambda p: abs(p.signed_distance(ref)))
    return planes
