"""
Microbenchmark: time per shatter pass vs fragment count.
Run:
  python benchmarks/bench_fragment.py
"""
import time
import numpy as np
from voronoi_shatter.config import FragmentationConfig
from voronoi_shatter.fracture import FragmentationOrchestrator
from voronoi_shatter.profiler import Profiler
from voronoi_shatter.scene import Scene
from voronoi_shatter.types import Mesh

def run(k: int, passes: int = 5):
    prof = Profiler()
    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)
    config = FragmentationConfig(fragment_count=k)

    total = 0.0
    fragments = 0
    for _ in range(passes):
        scene = Scene(profiler=prof)
        crate = scene.instantiate("crate", Mesh.box((1.0, 1.0, 1.0)))
        orch = FragmentationOrchestrator(scene, config, rng=rng, profiler=prof)

        t0 = time.perf_counter()
        result = orch.fragment(crate)
        total += time.perf_counter() - t0
        fragments += len(result.fragments)

    return total / passes, fragments / passes, prof.stats.summary()

if __name__ == "__main__":
    for k in [2, 4, 8, 16, 32]:
        per_pass, mean_fragments, summary = run(k)
        print(f"K={k:3d}  pass={1e3*per_pass:8.3f} ms  fragments={mean_fragments:5.1f}")
        # print top sections
        for name in ["seeds", "slice", "setup"]:
            if name in summary:
                print(" ", name, summary[name])
        print()
