# MIT License (see LICENSE)
"""
Renderer adapters for inspecting a scene.

The fracture engine has no rendering dependency; these adapters show what
a pass produced (fragments, colliders, cap faces) without a graphics stack.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO
import sys

if TYPE_CHECKING:
    from ..scene import Scene, SceneObject


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Usage:
        renderer.render_scene(scene)

    which calls begin_frame, draw_object for every active object, then
    end_frame.
    """

    @abstractmethod
    def begin_frame(self, time: float) -> None:
        ...

    @abstractmethod
    def draw_object(self, obj: "SceneObject") -> None:
        ...

    @abstractmethod
    def end_frame(self) -> None:
        ...

    def render_scene(self, scene: "Scene") -> None:
        """Render all active objects in a scene."""
        self.begin_frame(scene.time)
        for obj in scene.active_objects():
            self.draw_object(obj)
        self.end_frame()


class DebugRenderer(RendererAdapter):
    """
    Text renderer for development and testing.

    Output:
        === Frame t=0.0167 ===
        [3] crate_cell0 verts=8 tris=12 caps=2 collider=convex @ (-0.25, 0.00, 0.00)
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True):
        self.output = output or sys.stdout
        self.verbose = verbose

    def begin_frame(self, time: float) -> None:
        self.output.write(f"=== Frame t={time:.4f} ===\n")

    def draw_object(self, obj: "SceneObject") -> None:
        pos = obj.transform.position
        line = f"[{obj.id}] {obj.name}"
        if obj.mesh is not None:
            caps = int(obj.mesh.cap_face_mask.sum())
            line += f" verts={obj.mesh.vertex_count} tris={obj.mesh.index_count // 3} caps={caps}"
        collider = obj.collider.kind if obj.collider is not None else "none"
        line += f" collider={collider} @ ({pos[0]:.2f}, {pos[1]:.2f}, {pos[2]:.2f})"

        if self.verbose and obj.body is not None:
            v = obj.body.velocity
            w = obj.body.angular_velocity
            line += f" v=({v[0]:.2f}, {v[1]:.2f}, {v[2]:.2f}) w=({w[0]:.2f}, {w[1]:.2f}, {w[2]:.2f})"

        self.output.write(line + "\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer, for benchmarks."""

    def begin_frame(self, time: float) -> None:
        pass

    def draw_object(self, obj: "SceneObject") -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Records per-frame object state for later inspection.

    Example:
        renderer = BufferedRenderer()
        for _ in range(60):
            scene.step()
            renderer.render_scene(scene)
        counts = [len(f["objects"]) for f in renderer.frames]
    """

    def __init__(self):
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, time: float) -> None:
        self._current_frame = {"time": time, "objects": []}

    def draw_object(self, obj: "SceneObject") -> None:
        if self._current_frame is None:
            return
        self._current_frame["objects"].append({
            "id": obj.id,
            "name": obj.name,
            "position": obj.transform.position.tolist(),
            "collider": obj.collider.kind if obj.collider is not None else None,
        })

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
