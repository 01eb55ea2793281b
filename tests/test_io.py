import json

import numpy as np
import pytest
from voronoi_shatter import DamageType, FragmentationConfig, ForceMode, Mesh, Scene
from voronoi_shatter.colliders import BoxCollider
from voronoi_shatter.types import CrossSection, Transform
from voronoi_shatter.io import (
    config_from_json,
    damage_event_from_json,
    damage_event_to_json,
    fragment_to_json,
    load_config,
    mesh_from_json,
    save_config,
    save_fragments,
)


def test_config_file_round_trip(tmp_path):
    config = FragmentationConfig(
        fragment_count=12,
        fragment_lifetime=3.5,
        minimum_fragment_size=0.05,
        minimum_vertex_count=6,
        cross_section=CrossSection(material="stone_inner", color=(0.5, 0.4, 0.3, 1.0)),
    )
    path = tmp_path / "crate.json"
    save_config(config, str(path))
    assert load_config(str(path)) == config


def test_config_defaults_and_validation():
    assert config_from_json({}) == FragmentationConfig()
    with pytest.raises(ValueError):
        config_from_json({"fragment_count": 0})
    with pytest.raises(ValueError):
        config_from_json({"fragment_lifetime": -1})


def test_damage_event_json():
    event = damage_event_from_json({
        "hit_point": [1, 2, 3],
        "hit_dir": [0, 3, 0],
        "hit_force": 25,
        "explosion_radius": 4,
        "force_mode": "force",
        "damage_type": "explosion",
    })
    assert np.allclose(event.hit_dir, [0, 1, 0])
    assert event.force_mode is ForceMode.FORCE
    assert event.damage_type is DamageType.EXPLOSION
    assert event.sender is None

    data = damage_event_to_json(event)
    assert data["hit_point"] == [1.0, 2.0, 3.0]
    assert data["force_mode"] == "force"
    assert "dmg" not in data


def test_damage_event_defaults():
    event = damage_event_from_json({})
    assert event.force_mode is ForceMode.IMPULSE
    assert event.damage_type is DamageType.SHOOT
    assert event.hit_force == 0.0


def test_invalid_enum_raises():
    with pytest.raises(ValueError):
        damage_event_from_json({"force_mode": "shove"})
    with pytest.raises(ValueError):
        damage_event_from_json({"damage_type": "laser"})


def test_mesh_from_json():
    mesh = mesh_from_json({"vertices": [[0, 0, 0], [1, 0, 0], [0, 1, 0]], "triangles": [[0, 1, 2]]})
    assert mesh.vertex_count == 3
    assert mesh.index_count == 3
    with pytest.raises(ValueError):
        mesh_from_json({"vertices": []})


def test_fragment_report(tmp_path):
    scene = Scene()
    frag = scene.instantiate("crate_cell0", Mesh.box((1, 2, 1)), Transform(position=(0, 1, 0)))
    frag.set_collider(BoxCollider(center=(0, 0, 0), size=(1, 2, 1)))

    data = fragment_to_json(frag)
    assert data["name"] == "crate_cell0"
    assert data["vertex_count"] == 8
    assert data["triangle_count"] == 12
    assert data["collider"] == "box"
    assert data["bounds"] == {"min": [-0.5, 0.0, -0.5], "max": [0.5, 2.0, 0.5]}
    assert "mesh" not in data

    path = tmp_path / "fragments.json"
    save_fragments([frag], str(path), include_mesh=True)
    with open(path, encoding="utf-8") as f:
        saved = json.load(f)
    assert len(saved) == 1
    assert len(saved[0]["mesh"]["triangles"]) == 12
