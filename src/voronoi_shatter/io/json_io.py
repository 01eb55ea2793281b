# MIT License (see LICENSE)
"""
JSON serialization for fragmentation settings, damage events and results.

JSON Schema Overview:
---------------------
Config:
{
  "fragment_count": int,            # Default: 8
  "fragment_lifetime": float,       # Seconds, default: 1.0
  "minimum_fragment_size": float,   # Default: 0.1
  "minimum_vertex_count": int,      # Default: 8
  "cross_section": {                # Optional
    "material": string,             # Default: "cross_section"
    "color": [r, g, b, a]
  }
}

Damage event:
{
  "hit_point": [x, y, z],           # Default: [0, 0, 0]
  "hit_dir": [x, y, z],             # Normalized on load
  "hit_force": float,
  "explosion_radius": float,
  "upwards_modifier": float,
  "force_mode": "force" | "acceleration" | "impulse" | "velocity_change",
  "damage_type": "explosion" | "shoot",
  "can_dismember": bool,
  "dmg": float
}

Fragment report (output only):
[
  {
    "name": string,
    "position": [x, y, z],
    "vertex_count": int,
    "triangle_count": int,
    "collider": "box" | "convex" | null,
    "bounds": {"min": [x, y, z], "max": [x, y, z]},
    "mesh": {"vertices": [[x, y, z], ...], "triangles": [[i, j, k], ...]}   # if include_mesh
  }
]
"""
from __future__ import annotations
import json
from typing import TYPE_CHECKING, Any

import numpy as np

from ..config import FragmentationConfig
from ..damage import DamageEvent, DamageType, ForceMode
from ..types import CrossSection, Mesh

if TYPE_CHECKING:
    from ..scene import SceneObject


def load_json_raw(path: str) -> dict[str, Any]:
    """Load raw JSON data from a file without object construction."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# Config
# =============================================================================

def config_from_json(d: dict[str, Any]) -> FragmentationConfig:
    """
    Build a FragmentationConfig from a dictionary, with safe defaults.

    Raises:
        ValueError: If a value is out of range (see FragmentationConfig).
    """
    cs_data = d.get("cross_section", {})
    cross_section = CrossSection(
        material=str(cs_data.get("material", "cross_section")),
        color=tuple(float(c) for c in cs_data.get("color", (0.8, 0.8, 0.8, 1.0))),
    )
    return FragmentationConfig(
        fragment_count=int(d.get("fragment_count", 8)),
        fragment_lifetime=float(d.get("fragment_lifetime", 1.0)),
        minimum_fragment_size=float(d.get("minimum_fragment_size", 0.1)),
        minimum_vertex_count=int(d.get("minimum_vertex_count", 8)),
        cross_section=cross_section,
    )


def config_to_json(config: FragmentationConfig) -> dict[str, Any]:
    """Serialize a FragmentationConfig (round-trip compatible)."""
    return {
        "fragment_count": config.fragment_count,
        "fragment_lifetime": config.fragment_lifetime,
        "minimum_fragment_size": config.minimum_fragment_size,
        "minimum_vertex_count": config.minimum_vertex_count,
        "cross_section": {
            "material": config.cross_section.material,
            "color": list(config.cross_section.color),
        },
    }


def load_config(path: str) -> FragmentationConfig:
    """
    Load a FragmentationConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If a setting is out of range.
    """
    return config_from_json(load_json_raw(path))


def save_config(config: FragmentationConfig, path: str, indent: int = 2) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_to_json(config), f, indent=indent)


# =============================================================================
# Damage events
# =============================================================================

def damage_event_from_json(d: dict[str, Any]) -> DamageEvent:
    """
    Parse a DamageEvent. The sender is not serializable and is always None.

    Raises:
        ValueError: On unknown enum names or negative force/radius.
    """
    try:
        force_mode = ForceMode(d.get("force_mode", ForceMode.IMPULSE.value))
        damage_type = DamageType(d.get("damage_type", DamageType.SHOOT.value))
    except ValueError as exc:
        raise ValueError(f"Invalid damage event: {exc}") from exc

    return DamageEvent(
        hit_point=tuple(d.get("hit_point", [0.0, 0.0, 0.0])),
        hit_dir=tuple(d.get("hit_dir", [0.0, 0.0, 0.0])),
        hit_force=float(d.get("hit_force", 0.0)),
        explosion_radius=float(d.get("explosion_radius", 0.0)),
        upwards_modifier=float(d.get("upwards_modifier", 0.0)),
        force_mode=force_mode,
        damage_type=damage_type,
        can_dismember=bool(d.get("can_dismember", False)),
        dmg=float(d.get("dmg", 0.0)),
    )


def damage_event_to_json(event: DamageEvent) -> dict[str, Any]:
    result = {
        "hit_point": _to_list(event.hit_point),
        "hit_dir": _to_list(event.hit_dir),
        "hit_force": event.hit_force,
        "explosion_radius": event.explosion_radius,
        "force_mode": event.force_mode.value,
        "damage_type": event.damage_type.value,
    }
    # Optional fields (skip if default)
    if event.upwards_modifier != 0.0:
        result["upwards_modifier"] = event.upwards_modifier
    if event.can_dismember:
        result["can_dismember"] = True
    if event.dmg != 0.0:
        result["dmg"] = event.dmg
    return result


# =============================================================================
# Meshes and fragment reports
# =============================================================================

def mesh_to_json(mesh: Mesh) -> dict[str, Any]:
    return {
        "vertices": mesh.vertices.tolist(),
        "triangles": mesh.triangles.tolist(),
    }


def mesh_from_json(d: dict[str, Any]) -> Mesh:
    if "vertices" not in d or "triangles" not in d:
        raise ValueError("Mesh definition needs 'vertices' and 'triangles'.")
    return Mesh(np.array(d["vertices"], dtype=np.float64), np.array(d["triangles"], dtype=np.int64))


def fragment_to_json(obj: "SceneObject", include_mesh: bool = False) -> dict[str, Any]:
    """Summary of a fragment's geometry, placement and collider."""
    mesh = obj.mesh
    bounds = obj.world_bounds()
    result: dict[str, Any] = {
        "name": obj.name,
        "position": _to_list(obj.transform.position),
        "vertex_count": mesh.vertex_count if mesh is not None else 0,
        "triangle_count": mesh.index_count // 3 if mesh is not None else 0,
        "collider": obj.collider.kind if obj.collider is not None else None,
    }
    if bounds is not None:
        result["bounds"] = {"min": _to_list(bounds.min), "max": _to_list(bounds.max)}
    if include_mesh and mesh is not None:
        result["mesh"] = mesh_to_json(mesh)
    return result


def save_fragments(fragments: list["SceneObject"], path: str, include_mesh: bool = False, indent: int = 2) -> None:
    data = [fragment_to_json(f, include_mesh=include_mesh) for f in fragments]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent)


def _to_list(arr: Any) -> list[float]:
    """Helper: Convert numpy array or tuple to a clean list of floats."""
    if isinstance(arr, np.ndarray):
        return arr.tolist()
    return list(arr)
