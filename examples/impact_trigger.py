# examples/impact_trigger.py
"""
A fast projectile hits a window: the collision becomes damage and the
window breaks on the next tick. A slow one bounces off harmlessly.
"""
from voronoi_shatter import CollisionContact, FragmentationConfig, ImpactTrigger, Mesh, Scene, VoronoiBreakable
from voronoi_shatter.logging_config import setup_logging

setup_logging()

scene = Scene()
window = scene.instantiate("window", Mesh.box((2.0, 1.5, 0.1)))
breakable = VoronoiBreakable(window, scene, FragmentationConfig(fragment_count=6, minimum_fragment_size=0.05))
trigger = ImpactTrigger(break_force=2.0, minimum_break_velocity=5.0)

for speed in (3.0, 12.0):
    event = trigger.on_collision(CollisionContact(
        relative_velocity=(0.0, 0.0, speed),
        contact_point=(0.2, 0.1, -0.05),
        other_position=(0.0, 0.0, 0.0),
        trigger_position=(0.2, 0.1, -1.0),
        other=breakable,
    ))
    print(f"speed={speed:5.1f}  event={'none' if event is None else f'force {event.hit_force:.1f}'}")

scene.step()
print("window active:", window.active)
print("fragments:", len(breakable.last_result.fragments) if breakable.last_result else 0)
