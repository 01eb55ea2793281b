# examples/shatter_cube.py
"""
Shatter a crate with a single explosion and watch the pieces fly.

Run:
  python examples/shatter_cube.py
"""
import logging

import numpy as np
from voronoi_shatter import DamageEvent, DamageType, FragmentationConfig, Mesh, Scene, VoronoiBreakable
from voronoi_shatter.io import save_fragments
from voronoi_shatter.logging_config import setup_logging
from voronoi_shatter.renderer import DebugRenderer

setup_logging(logging.INFO)

scene = Scene(dt=1/60)
crate = scene.instantiate("crate", Mesh.box((1.0, 1.0, 1.0)))

config = FragmentationConfig(fragment_count=8, fragment_lifetime=2.0)
breakable = VoronoiBreakable(crate, scene, config, rng=np.random.default_rng(7))

breakable.do_damage(DamageEvent(
    hit_point=(0.0, -0.6, 0.0),
    hit_dir=(0.0, 1.0, 0.0),
    hit_force=8.0,
    explosion_radius=3.0,
    upwards_modifier=0.5,
    damage_type=DamageType.EXPLOSION,
))

renderer = DebugRenderer(verbose=True)
for i in range(30):
    scene.step()
    if i % 10 == 0:
        renderer.render_scene(scene)

result = breakable.last_result
print("fragments:", len(result.fragments), "released:", len(result.released))
save_fragments(result.fragments, "fragments.json")
