# MIT License (see LICENSE)
"""
Voronoi seed placement.

Seeds are sampled independently and uniformly inside the source object's
world bounds. Randomness always comes from an injected numpy Generator so
a pass can be reproduced exactly.
"""
from __future__ import annotations

import numpy as np

from ..types import Bounds


def generate_seeds(bounds: Bounds, count: int, rng: np.random.Generator) -> np.ndarray:
    """
    Sample `count` points uniformly inside `bounds`.

    Args:
        bounds: World-space AABB of the source volume.
        count: Number of seeds (K >= 1).
        rng: Random source; a seeded Generator gives a reproducible layout.

    Returns:
        Read-only array of shape [count, 3].

    Raises:
        ValueError: If count < 1.
    """
    if count < 1:
        raise ValueError(f"seed count must be >= 1, got {count}")
    # uniform(low, high) with low == high returns low, so flat axes are fine.
    seeds = rng.uniform(bounds.min, bounds.max, size=(count, 3))
    seeds.setflags(write=False)
    return seeds
