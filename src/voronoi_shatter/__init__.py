# MIT License (see LICENSE)
"""
voronoi_shatter - Approximate Voronoi fracture for triangle meshes.

Breaks a solid mesh into convex-ish fragments when it is hit, gives each
fragment a rigid body and a collider, and pushes the pieces outward.

Main entry points:
    - VoronoiBreakable: A Damageable that shatters its object on the next tick.
    - FragmentationConfig: Per-object fracture settings.
    - DamageEvent: Description of a hit.
    - Scene, SceneObject: The host world and its entities.
    - Mesh: Indexed triangle mesh.

Submodules:
    - fracture: Seeds, bisector planes, slicing, validation, colliders, impulses.
    - io: JSON serialization of configs, events and fragment reports.
    - renderer: Optional text/buffered inspection adapters.

Example:
    from voronoi_shatter import Scene, Mesh, VoronoiBreakable, DamageEvent

    scene = Scene()
    crate = scene.instantiate("crate", Mesh.box((1, 1, 1)))
    breakable = VoronoiBreakable(crate, scene)
    breakable.do_damage(DamageEvent(hit_point=(0, 0.5, 0), hit_force=10, explosion_radius=2))
    scene.step()
"""
from .scene import Scene, SceneObject
from .types import Bounds, CrossSection, Mesh, Plane, Transform
from .config import FragmentationConfig
from .damage import Damageable, DamageEvent, DamageType, ForceMode, HealthDamageable
from .body import RigidBody3D
from .colliders import BoxCollider, ConvexMeshCollider
from .breakable import VoronoiBreakable
from .impact import CollisionContact, ImpactTrigger

__all__ = [
    # Host
    "Scene",
    "SceneObject",
    "RigidBody3D",
    "BoxCollider",
    "ConvexMeshCollider",
    # Geometry
    "Bounds",
    "CrossSection",
    "Mesh",
    "Plane",
    "Transform",
    # Damage
    "Damageable",
    "DamageEvent",
    "DamageType",
    "ForceMode",
    "HealthDamageable",
    "VoronoiBreakable",
    "FragmentationConfig",
    "CollisionContact",
    "ImpactTrigger",
]
