import numpy as np
import pytest
from voronoi_shatter.config import FragmentationConfig
from voronoi_shatter.errors import MissingPrerequisiteError
from voronoi_shatter.profiler import Profiler
from voronoi_shatter.scene import Scene
from voronoi_shatter.types import Mesh, Transform
from voronoi_shatter.fracture.orchestrator import FragmentationOrchestrator, PendingDeletionSet
from voronoi_shatter.fracture.planes import build_bisector_planes
from voronoi_shatter.fracture.slicer import FragmentSlicer, SlicedHull
from voronoi_shatter.fracture.validator import FragmentValidator


class FixedSeeds:
    """Stands in for a numpy Generator: uniform() returns a fixed seed layout."""

    def __init__(self, seeds):
        self.seeds = np.asarray(seeds, dtype=np.float64)

    def uniform(self, low, high, size=None):
        return self.seeds.copy()


class AxisBoxSlicer(FragmentSlicer):
    """Cuts an object's bounding box with axis-aligned planes. Records every cut."""

    def __init__(self):
        self.cuts: list[list[SlicedHull]] = []

    def slice(self, obj, plane, cross_section):
        local = obj.transform.plane_to_local(plane)
        axis = int(np.argmax(np.abs(local.normal)))
        n = local.normal[axis]
        cut = local.point[axis]
        b = obj.mesh.bounds

        sides = []
        for label, sign in (("upper", 1.0), ("lower", -1.0)):
            lo, hi = b.min.copy(), b.max.copy()
            if sign * n > 0:
                lo[axis] = max(lo[axis], cut)
            else:
                hi[axis] = min(hi[axis], cut)
            if hi[axis] - lo[axis] <= 0:
                continue
            mesh = Mesh.box(hi - lo, center=0.5 * (hi + lo))
            sides.append(SlicedHull(mesh, obj.transform.copy(), label))
        self.cuts.append(sides)
        return sides


class NothingSlicer(FragmentSlicer):
    def slice(self, obj, plane, cross_section):
        return []


class TinySidesSlicer(FragmentSlicer):
    """Every cut yields two sides too small to be fragments."""

    def slice(self, obj, plane, cross_section):
        return [
            SlicedHull(Mesh.box((0.01, 0.01, 0.01)), obj.transform.copy(), "upper"),
            SlicedHull(Mesh.box((0.01, 0.01, 0.01), center=(1, 0, 0)), obj.transform.copy(), "lower"),
        ]


class SecondLookValidator(FragmentValidator):
    """Accepts a mesh the first time it is checked and rejects it afterwards."""

    def __init__(self):
        super().__init__()
        self.seen: set[int] = set()

    def is_valid(self, mesh):
        if id(mesh) in self.seen:
            return False
        self.seen.add(id(mesh))
        return super().is_valid(mesh)


def _cube_scene(extents=(2.0, 2.0, 2.0)):
    scene = Scene()
    cube = scene.instantiate("cube", Mesh.box(extents))
    return scene, cube


def test_symmetric_cube_splits_in_two_halves():
    """Two seeds mirrored about the centroid -> two equal halves through the centroid."""
    scene, cube = _cube_scene()
    config = FragmentationConfig(fragment_count=2, fragment_lifetime=5.0)
    orch = FragmentationOrchestrator(scene, config, rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0]]))

    result = orch.fragment(cube)

    assert result.planes_built == 2
    assert len(result.fragments) == 2
    left, right = result.fragments
    lb, rb = left.world_bounds(), right.world_bounds()
    assert np.allclose(lb.size, [1.0, 2.0, 2.0], atol=1e-6)
    assert np.allclose(rb.size, [1.0, 2.0, 2.0], atol=1e-6)
    assert lb.center[0] == pytest.approx(-0.5, abs=1e-6)
    assert rb.center[0] == pytest.approx(0.5, abs=1e-6)

    for frag in result.fragments:
        assert frag.body is not None
        assert frag.collider is not None and frag.collider.kind == "convex"
        assert frag.collider.volume == pytest.approx(4.0, rel=1e-6)
        # Cut faces carry the cross-section material.
        assert frag.mesh.cross_section == config.cross_section
        assert frag.mesh.cap_face_mask.any()
        assert scene.expires_at(frag) == pytest.approx(5.0)

    # The source is untouched by the orchestrator.
    assert cube.active and not cube.destroyed


def test_each_cut_promotes_at_most_one_side():
    """Two sides of the same cut never both survive; the loser is released."""
    scene, cube = _cube_scene()
    slicer = AxisBoxSlicer()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=2), slicer=slicer,
        rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0]]),
    )
    result = orch.fragment(cube)
    promoted = {id(f.mesh) for f in result.fragments}
    released = {id(o.mesh) for o in result.released}

    assert len(slicer.cuts) == 2
    for sides in slicer.cuts:
        assert len(sides) == 2
        survivors = [s for s in sides if id(s.mesh) in promoted]
        assert len(survivors) == 1
        losers = [s for s in sides if id(s.mesh) not in promoted]
        assert all(id(s.mesh) in released for s in losers)

    # The survivor is the side nearest its seed.
    assert result.fragments[0].world_centroid[0] < 0
    assert result.fragments[1].world_centroid[0] > 0


def test_transformed_source_is_cut_in_world_space():
    """Planes are world-space; a moved/rotated source still splits at the seeds' bisector."""
    scene = Scene()
    rot = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])  # 90 deg about z
    cube = scene.instantiate("cube", Mesh.box((2, 2, 2)), Transform(position=(10, 0, 0), rotation=rot))
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=2), slicer=AxisBoxSlicer(),
        rng=FixedSeeds([[9.5, 0, 0], [10.5, 0, 0]]),
    )
    result = orch.fragment(cube)

    assert len(result.fragments) == 2
    centers = sorted(f.world_bounds().center[0] for f in result.fragments)
    assert centers == pytest.approx([9.5, 10.5], abs=1e-6)


@pytest.mark.parametrize("k", [2, 5, 8])
def test_fragment_count_bounded_and_disjoint_from_released(k):
    scene, cube = _cube_scene()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=k), rng=np.random.default_rng(100 + k)
    )
    result = orch.fragment(cube)

    assert 0 <= len(result.fragments) <= k
    assert len(result.seeds) == k
    assert result.planes_built <= k * (k - 1)

    fragment_ids = {f.id for f in result.fragments}
    released_ids = {o.id for o in result.released}
    assert fragment_ids.isdisjoint(released_ids)

    for frag in result.fragments:
        assert frag.body is not None
        assert frag.collider is not None
        assert frag in scene.objects
    for obj in result.released:
        assert obj.destroyed
        assert obj not in scene.objects


def test_slicer_that_never_cuts_promotes_one_copy():
    """No cut succeeds: the whole source becomes one fragment, once."""
    scene, cube = _cube_scene()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=3), slicer=NothingSlicer(),
        rng=np.random.default_rng(0),
    )
    result = orch.fragment(cube)

    assert result.planes_built == 6
    assert len(result.fragments) == 1
    assert result.released == []
    frag = result.fragments[0]
    assert frag is not cube
    assert np.allclose(frag.mesh.vertices, cube.mesh.vertices)


def test_invalid_sides_are_released_and_cut_is_noop():
    scene, cube = _cube_scene()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=2), slicer=TinySidesSlicer(),
        rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0]]),
    )
    result = orch.fragment(cube)

    # 2 seeds x 1 plane x 2 tiny sides
    assert len(result.released) == 4
    assert len(result.fragments) == 1
    assert all(o.destroyed for o in result.released)


def test_second_validation_drops_fragments():
    """A fragment rejected after setup is destroyed and not returned."""
    scene, cube = _cube_scene()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=2), slicer=AxisBoxSlicer(),
        validator=SecondLookValidator(), rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0]]),
    )
    result = orch.fragment(cube)

    assert result.fragments == []
    assert [o for o in scene.objects if o is not cube] == []


def test_missing_mesh_is_a_missing_prerequisite():
    scene = Scene()
    empty = scene.instantiate("empty")
    with pytest.raises(MissingPrerequisiteError):
        FragmentationOrchestrator(scene).fragment(empty)

    hollow = scene.instantiate("hollow", Mesh(np.zeros((0, 3)), np.zeros((0, 3))))
    with pytest.raises(MissingPrerequisiteError):
        FragmentationOrchestrator(scene).fragment(hollow)


def test_pending_deletion_set_flush():
    scene = Scene()
    a = scene.instantiate("a", Mesh.box())
    b = scene.instantiate("b", Mesh.box())
    pending = PendingDeletionSet()
    pending.add(a)
    pending.add(b)
    pending.add(a)

    assert len(pending) == 2
    assert a in pending
    released = pending.flush(scene)
    assert released == [a, b]
    assert len(pending) == 0
    assert a.destroyed and b.destroyed
    assert scene.objects == []


def test_profiler_sections():
    scene, cube = _cube_scene()
    prof = Profiler()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=2), slicer=AxisBoxSlicer(),
        rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0]]), profiler=prof,
    )
    orch.fragment(cube)
    summary = prof.stats.summary()

    assert summary["seeds"]["n"] == 1
    assert summary["slice"]["n"] == 2
    assert summary["setup"]["n"] == 1


class ClutteredSeedSideSlicer(AxisBoxSlicer):
    """Like AxisBoxSlicer, but pads the upper side with repeated cut-face vertices.

    Capped slices triangulate the cut face and repeat its vertices, which
    drags the vertex mean toward the cap.
    """

    def slice(self, obj, plane, cross_section):
        sides = super().slice(obj, plane, cross_section)
        out = []
        for hull in sides:
            mesh = hull.mesh
            if hull.side == "upper":
                local = obj.transform.plane_to_local(plane)
                axis = int(np.argmax(np.abs(local.normal)))
                corner = mesh.bounds.max.copy()
                corner[axis] = local.point[axis]
                extra = np.repeat(corner[None, :], 40, axis=0)
                mesh = Mesh(np.vstack([mesh.vertices, extra]), mesh.triangles)
            out.append(SlicedHull(mesh, hull.transform, hull.side))
        return out


class TinySeedSideSlicer(AxisBoxSlicer):
    """The side facing the seed is too small to keep; the far side is fine."""

    def slice(self, obj, plane, cross_section):
        sides = super().slice(obj, plane, cross_section)
        return [
            SlicedHull(Mesh.box((0.01, 0.01, 0.01), center=hull.mesh.bounds.center), hull.transform, hull.side)
            if hull.side == "upper" else hull
            for hull in sides
        ]


class FailSecondCallSlicer(AxisBoxSlicer):
    def slice(self, obj, plane, cross_section):
        if len(self.cuts) == 1:
            raise RuntimeError("slicer gave up")
        return super().slice(obj, plane, cross_section)


def test_cells_stay_inside_their_seed_half_spaces():
    """Every vertex of cell i lies on seed i's side of each of its bisector planes."""
    scene, cube = _cube_scene()
    k = 6
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=k),
        validator=FragmentValidator(minimum_vertex_count=4, minimum_fragment_size=0.0),
        rng=np.random.default_rng(0),
    )
    result = orch.fragment(cube)
    assert len(result.fragments) >= 1

    for frag in result.fragments:
        i = int(frag.name.rsplit("cell", 1)[1])
        verts = frag.transform.to_world(frag.mesh.vertices)
        for plane in build_bisector_planes(result.seeds, i):
            assert plane.signed_distance(verts).min() >= -1e-6, frag.name


def test_side_choice_ignores_repeated_cap_vertices():
    """The kept side is the one around the seed, however its vertices are distributed."""
    scene, cube = _cube_scene()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=2), slicer=ClutteredSeedSideSlicer(),
        rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0]]),
    )
    result = orch.fragment(cube)

    assert len(result.fragments) == 2
    left, right = result.fragments
    assert left.mesh.bounds.center[0] == pytest.approx(-0.5)
    assert right.mesh.bounds.center[0] == pytest.approx(0.5)


def test_cell_dropped_when_seed_side_is_invalid():
    """Only the far side of a cut is valid: the cell is dropped, not swapped for the far side."""
    scene, cube = _cube_scene()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=2), slicer=TinySeedSideSlicer(),
        rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0]]),
    )
    result = orch.fragment(cube)

    assert result.fragments == []
    assert len(result.released) == 4
    assert scene.objects == [cube]


def test_failed_pass_leaves_no_candidates_behind():
    """A slicer error after earlier cuts succeeded releases everything the pass created."""
    scene, cube = _cube_scene()
    orch = FragmentationOrchestrator(
        scene, FragmentationConfig(fragment_count=3), slicer=FailSecondCallSlicer(),
        rng=FixedSeeds([[-0.5, 0, 0], [0.5, 0, 0], [0.0, 0.5, 0]]),
    )
    with pytest.raises(RuntimeError):
        orch.fragment(cube)

    assert scene.objects == [cube]
    assert cube.active and not cube.destroyed
