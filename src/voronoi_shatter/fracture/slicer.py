# MIT License (see LICENSE)
"""
Mesh/plane slicing.

The pipeline treats slicing as an opaque capability: given an object and a
world-space plane, return zero, one or two sides of the cut. FragmentSlicer
is that boundary; TrimeshSlicer implements it on top of
``trimesh.intersections.slice_mesh_plane``.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import trimesh

from ..types import CrossSection, Mesh, Plane, Transform

if TYPE_CHECKING:
    from ..scene import SceneObject

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SlicedHull:
    """
    One side of a cut.

    Attributes:
        mesh: Geometry of this side, in the local frame of `transform`.
        transform: Placement (a copy of the sliced object's transform).
        side: "upper" (the side the plane normal points to) or "lower".
    """
    mesh: Mesh
    transform: Transform
    side: str


class FragmentSlicer(ABC):
    """Capability interface: cut an object's mesh with a plane."""

    @abstractmethod
    def slice(self, obj: "SceneObject", plane: Plane, cross_section: CrossSection | None) -> list[SlicedHull]:
        """
        Cut `obj` with a world-space plane.

        Returns:
            The non-empty sides, upper first. An empty list means the cut
            produced nothing usable; it is never an error.
        """
        ...


class TrimeshSlicer(FragmentSlicer):
    """
    Slicer backed by trimesh.

    Watertight inputs are capped, so every fragment stays closed. Inputs
    that are not watertight are sliced open.
    """

    def __init__(self, cap: bool = True):
        self.cap = cap

    def _slice_side(self, tm: trimesh.Trimesh, normal: np.ndarray, origin: np.ndarray, cap: bool):
        try:
            return trimesh.intersections.slice_mesh_plane(
                tm, plane_normal=normal, plane_origin=origin, cap=cap
            )
        except Exception as exc:
            if not cap:
                raise
            # Capping needs a triangulation backend and a closed section;
            # an open side is still a usable fragment.
            logger.warning("Capped slice failed (%s); slicing without cap", exc)
            return trimesh.intersections.slice_mesh_plane(
                tm, plane_normal=normal, plane_origin=origin, cap=False
            )

    def slice(self, obj: "SceneObject", plane: Plane, cross_section: CrossSection | None) -> list[SlicedHull]:
        mesh = obj.mesh
        if mesh is None or mesh.is_empty:
            return []

        local = obj.transform.plane_to_local(plane)
        tm = trimesh.Trimesh(vertices=mesh.vertices, faces=mesh.triangles, process=True)
        cap = self.cap and tm.is_watertight

        sides: list[SlicedHull] = []
        for label, normal in (("upper", local.normal), ("lower", -local.normal)):
            try:
                piece = self._slice_side(tm, normal, local.point, cap)
            except Exception as exc:
                logger.debug("Slice of %s failed: %s", obj.name, exc)
                return []
            if piece is None or len(piece.faces) == 0:
                continue
            out = Mesh(
                np.asarray(piece.vertices),
                np.asarray(piece.faces),
                cut_planes=mesh.cut_planes + (local,),
                cross_section=cross_section if cross_section is not None else mesh.cross_section,
            )
            sides.append(SlicedHull(out, obj.transform.copy(), label))
        return sides
