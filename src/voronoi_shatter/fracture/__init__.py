# MIT License (see LICENSE)
"""
The fragmentation engine.

This subpackage provides:
    - Seeds: uniform Voronoi seed placement.
    - Planes: perpendicular-bisector planes between seeds.
    - Slicer: the mesh/plane cutting boundary (trimesh-backed by default).
    - Validator: geometric sanity checks on candidate fragments.
    - ColliderStrategy: convex hull collider with a box fallback.
    - Orchestrator: the seed x plane x slice pass.
    - Impulses: explosion push and random spin for fragments.

Typical usage:
    from voronoi_shatter.fracture import FragmentationOrchestrator

    result = FragmentationOrchestrator(scene, config).fragment(obj)
"""
from .seeds import generate_seeds
from .planes import bisector_plane, build_bisector_planes
from .slicer import FragmentSlicer, SlicedHull, TrimeshSlicer
from .validator import FragmentValidator
from .collider_strategy import (
    ColliderOutcome,
    ColliderState,
    ColliderStrategy,
    is_volume,
    unique_vertices,
)
from .orchestrator import FragmentationOrchestrator, FragmentationResult, PendingDeletionSet
from .impulses import ImpulseApplicator

__all__ = [
    # Seeds / planes
    "generate_seeds",
    "bisector_plane",
    "build_bisector_planes",
    # Slicing
    "FragmentSlicer",
    "SlicedHull",
    "TrimeshSlicer",
    # Validation / colliders
    "FragmentValidator",
    "ColliderOutcome",
    "ColliderState",
    "ColliderStrategy",
    "is_volume",
    "unique_vertices",
    # Pass
    "FragmentationOrchestrator",
    "FragmentationResult",
    "PendingDeletionSet",
    "ImpulseApplicator",
]
