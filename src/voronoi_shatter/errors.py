# MIT License (see LICENSE)
"""
Exception types raised inside the fracture pipeline.

None of these escape ``Damageable.do_damage``: the entry point and the
collider strategy catch them and degrade to skip, discard, or fall back.
"""
from __future__ import annotations


class FragmentationError(Exception):
    """Base class for errors raised while shattering an object."""


class MissingPrerequisiteError(FragmentationError):
    """The source object has no usable mesh or bounding volume."""


class ColliderConstructionError(FragmentationError):
    """The physics capability rejected a convex collider for a mesh."""
