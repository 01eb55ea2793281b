# MIT License (see LICENSE)
"""
The scene host: object arena, tick scheduler and rigid-body stepping.

The Scene class is the minimal world the fracture pipeline needs:
- An arena of SceneObjects (instantiate, duplicate, destroy, destroy-after-delay).
- A cooperative tick scheduler (call_next_tick), used to defer work out of
  collision callbacks.
- A simple rigid-body step (gravity + semi-implicit Euler) so fragments move.

Structure:
    - User creates a Scene.
    - User instantiates objects and attaches Damageables to them.
    - User calls scene.step(dt) in a loop. Each step:
        1. Runs callbacks queued before the step began.
        2. Integrates active bodies and moves their objects.
        3. Destroys objects whose lifetime has expired.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from .body import RigidBody3D
from .colliders import BoxCollider, Collider, ConvexMeshCollider
from .profiler import Profiler
from .types import Bounds, Mesh, Transform
from .util import f64, norm

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SceneObject:
    """
    An entity in the scene: a mesh placed by a transform, optionally
    simulated by a rigid body and collided through a collider.

    Attributes:
        name: Human-readable identifier.
        mesh: Render/geometry mesh in local coordinates (None for empty objects).
        transform: Placement in world space.
        body: Attached rigid body, if any.
        collider: Attached collision shape, if any (at most one).
        active: Inactive objects are neither simulated nor rendered.
        destroyed: Set once the object has been released by the scene.
        id: Unique identifier assigned by Scene.add().
    """
    name: str
    mesh: Mesh | None = None
    transform: Transform = field(default_factory=Transform)
    body: RigidBody3D | None = None
    collider: Collider | None = None
    active: bool = True
    destroyed: bool = False
    id: int = -1

    def deactivate(self) -> None:
        if self.active:
            logger.debug("Deactivating %s", self.name)
        self.active = False

    @property
    def world_centroid(self) -> np.ndarray:
        if self.mesh is None:
            return self.transform.position.copy()
        return self.transform.to_world(self.mesh.centroid)

    def world_bounds(self) -> Bounds | None:
        """
        World-space AABB of the object's bounding volume.

        Prefers the collider (the physics volume), then the mesh. Returns
        None if the object has neither.
        """
        if isinstance(self.collider, BoxCollider):
            local = Bounds(
                self.collider.center - 0.5 * self.collider.size,
                self.collider.center + 0.5 * self.collider.size,
            )
            return Bounds.from_points(self.transform.to_world(local.corners()))
        if isinstance(self.collider, ConvexMeshCollider):
            return Bounds.from_points(self.transform.to_world(self.collider.vertices))
        if self.mesh is not None and not self.mesh.is_empty:
            return Bounds.from_points(self.transform.to_world(self.mesh.vertices))
        return None

    def add_rigid_body(self, mass: float = 1.0) -> RigidBody3D:
        """Attach a rigid body sized from the mesh bounds, unless one exists."""
        if self.body is None:
            size = self.mesh.bounds.size if self.mesh is not None else np.ones(3)
            self.body = RigidBody3D.for_box(size, mass=mass, position=self.world_centroid)
        return self.body

    def set_collider(self, collider: Collider) -> None:
        """Replace any existing collider with `collider`."""
        self.collider = collider


def _axis_angle_matrix(rotvec: np.ndarray) -> np.ndarray:
    """Rodrigues' formula for a rotation vector (axis * angle)."""
    angle = norm(rotvec)
    if angle < 1e-12:
        return np.eye(3)
    k = rotvec / angle
    K = np.array([
        [0.0, -k[2], k[1]],
        [k[2], 0.0, -k[0]],
        [-k[1], k[0], 0.0],
    ])
    return np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * (K @ K)


@dataclass
class Scene:
    """
    Object arena and simulation loop.

    Attributes:
        gravity: Global gravity vector (default: Earth gravity [0, -9.81, 0]).
        dt: Default timestep in seconds.
        profiler: Optional Profiler instance for timing statistics.
    """
    gravity: tuple[float, float, float] = (0.0, -9.81, 0.0)
    dt: float = 1 / 60
    profiler: Profiler | None = None

    # Internal state
    objects: list[SceneObject] = field(default_factory=list)
    time: float = 0.0
    tick: int = 0

    def __post_init__(self) -> None:
        self._g = f64(self.gravity)
        self._next_id = 1
        self._next_tick: list[Callable[[], None]] = []
        self._expiry: dict[int, float] = {}

    # ------------------------------------------------------------------
    # Arena
    # ------------------------------------------------------------------

    def add(self, obj: SceneObject) -> SceneObject:
        """Register an object with the scene and assign it a unique id."""
        obj.id = self._next_id
        self._next_id += 1
        self.objects.append(obj)
        return obj

    def instantiate(self, name: str, mesh: Mesh | None = None, transform: Transform | None = None) -> SceneObject:
        return self.add(SceneObject(name=name, mesh=mesh, transform=transform or Transform()))

    def duplicate(self, obj: SceneObject, name: str | None = None) -> SceneObject:
        """Copy an object's geometry and placement (not its body or collider)."""
        mesh = obj.mesh.copy() if obj.mesh is not None else None
        return self.instantiate(name or f"{obj.name}_copy", mesh, obj.transform.copy())

    def destroy(self, obj: SceneObject) -> None:
        """Release an object immediately. Destroying twice is a no-op."""
        if obj.destroyed:
            return
        obj.destroyed = True
        obj.active = False
        self._expiry.pop(obj.id, None)
        if obj in self.objects:
            self.objects.remove(obj)

    def destroy_after(self, obj: SceneObject, delay: float) -> None:
        """Release an object at the end of the first step where `delay` seconds have passed."""
        self._expiry[obj.id] = self.time + max(0.0, float(delay))

    def expires_at(self, obj: SceneObject) -> float | None:
        return self._expiry.get(obj.id)

    def active_objects(self) -> list[SceneObject]:
        return [o for o in self.objects if o.active]

    def find(self, name: str) -> SceneObject | None:
        for o in self.objects:
            if o.name == name:
                return o
        return None

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def call_next_tick(self, callback: Callable[[], None]) -> None:
        """Run `callback` at the start of the next step."""
        self._next_tick.append(callback)

    @property
    def pending_callbacks(self) -> int:
        return len(self._next_tick)

    def _run_callbacks(self) -> None:
        # Snapshot: callbacks queued while these run wait for the next tick.
        due, self._next_tick = self._next_tick, []
        for callback in due:
            callback()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _integrate(self, dt: float) -> None:
        for obj in self.objects:
            body = obj.body
            if not obj.active or body is None:
                continue
            center_before = body.position.copy()
            delta = body.integrate(dt, self._g)
            rot = _axis_angle_matrix(body.angular_velocity * dt)
            tf = obj.transform
            # Rotate about the centre of mass, then translate with it.
            tf.position = center_before + rot @ (tf.position - center_before) + delta
            tf.rotation = rot @ tf.rotation

    def _expire(self) -> None:
        expired = [o for o in self.objects if o.id in self._expiry and self._expiry[o.id] <= self.time]
        for obj in expired:
            logger.debug("Lifetime expired for %s", obj.name)
            self.destroy(obj)

    def step(self, dt: float | None = None) -> None:
        """
        Advance the scene by one tick.

        1. Deferred callbacks.
        2. Body integration.
        3. Timed destruction.
        """
        dt = float(self.dt if dt is None else dt)
        prof = self.profiler
        self.tick += 1

        if prof:
            with prof.section("callbacks"):
                self._run_callbacks()
            with prof.section("integrate"):
                self._integrate(dt)
        else:
            self._run_callbacks()
            self._integrate(dt)

        self.time += dt
        self._expire()
