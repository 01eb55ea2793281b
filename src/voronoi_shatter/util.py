# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Provides low-level 3D vector helpers shared by the fracture pipeline and
the scene host. All functions operate on vectors represented as numpy
arrays of shape (3,).
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase to ensure consistent numeric precision
    and allow tuple/list inputs for points, directions and vertices.
    """
    return np.array(x, dtype=np.float64)


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a vector. Avoids sqrt for performance."""
    return float(np.dot(v, v))


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a vector."""
    return float(np.sqrt(norm2(v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit (normalized) vector in the same direction as v.

    Returns zero vector if |v| < eps to avoid division by zero.
    """
    n = norm(v)
    if n < eps:
        return np.zeros_like(v, dtype=np.float64)
    return v / n


def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points."""
    return norm(f64(a) - f64(b))
