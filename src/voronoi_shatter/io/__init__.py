# MIT License (see LICENSE)
"""
Input/Output utilities.

This subpackage provides:
    - Config files: load and save FragmentationConfig as JSON.
    - Damage events: JSON form of DamageEvent, for replaying hits.
    - Fragment reports: per-fragment geometry/collider summaries.

Typical usage:
    from voronoi_shatter.io import load_config, save_fragments

    config = load_config("crate.json")
    save_fragments(breakable.last_result.fragments, "fragments.json")
"""
from .json_io import (
    load_json_raw,
    config_from_json,
    config_to_json,
    load_config,
    save_config,
    damage_event_from_json,
    damage_event_to_json,
    mesh_from_json,
    mesh_to_json,
    fragment_to_json,
    save_fragments,
)

__all__ = [
    # Loading
    "load_json_raw",
    "load_config",
    "config_from_json",
    "damage_event_from_json",
    "mesh_from_json",
    # Saving
    "save_config",
    "save_fragments",
    "config_to_json",
    "damage_event_to_json",
    "mesh_to_json",
    "fragment_to_json",
]
