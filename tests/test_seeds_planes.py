import numpy as np
import pytest
from voronoi_shatter.types import Bounds
from voronoi_shatter.fracture.seeds import generate_seeds
from voronoi_shatter.fracture.planes import bisector_plane, build_bisector_planes


def test_seeds_inside_bounds_and_count():
    """K seeds, all inside the box."""
    bounds = Bounds((-1.0, 0.0, 2.0), (1.0, 3.0, 2.5))
    seeds = generate_seeds(bounds, 50, np.random.default_rng(7))

    assert seeds.shape == (50, 3)
    for s in seeds:
        assert bounds.contains(s)


def test_seeds_deterministic_for_seeded_rng():
    """Same seeded generator -> same layout; different seed -> different layout."""
    bounds = Bounds((0, 0, 0), (1, 1, 1))
    a = generate_seeds(bounds, 8, np.random.default_rng(42))
    b = generate_seeds(bounds, 8, np.random.default_rng(42))
    c = generate_seeds(bounds, 8, np.random.default_rng(43))

    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_seeds_flat_axis():
    """A zero-extent axis gives the constant coordinate."""
    bounds = Bounds((0, 5, 0), (1, 5, 1))
    seeds = generate_seeds(bounds, 10, np.random.default_rng(0))
    assert np.all(seeds[:, 1] == 5.0)


def test_seeds_reject_zero_count():
    with pytest.raises(ValueError):
        generate_seeds(Bounds((0, 0, 0), (1, 1, 1)), 0, np.random.default_rng(0))


def test_bisector_plane_geometry():
    """Midpoint and unit normal toward the owning seed."""
    plane = bisector_plane(np.array([2.0, 0, 0]), np.array([0.0, 0, 0]))
    assert np.allclose(plane.point, [1.0, 0, 0])
    assert np.allclose(plane.normal, [1.0, 0, 0])
    # Owner is on the positive side, the other seed on the negative side.
    assert plane.signed_distance([2.0, 0, 0]) > 0
    assert plane.signed_distance([0.0, 0, 0]) < 0


def test_plane_count_is_k_minus_one():
    seeds = np.random.default_rng(3).uniform(-1, 1, size=(6, 3))
    for i in range(6):
        planes = build_bisector_planes(seeds, i)
        assert len(planes) == 5
        for p in planes:
            assert np.isclose(np.linalg.norm(p.normal), 1.0)


def test_single_seed_has_no_planes():
    seeds = np.array([[0.0, 0.0, 0.0]])
    assert build_bisector_planes(seeds, 0) == []


def test_coincident_seeds_are_skipped():
    """Duplicate seeds would give a NaN normal; that plane is dropped."""
    seeds = np.array([
        [0.0, 0.0, 0.0],
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
    ])
    planes = build_bisector_planes(seeds, 0)
    assert len(planes) == 1
    assert np.all(np.isfinite(planes[0].normal))
    assert np.allclose(planes[0].normal, [-1.0, 0, 0])


def test_reference_orders_nearest_plane_first():
    """With a reference point, planes are sorted by distance to it."""
    seeds = np.array([
        [0.0, 0.0, 0.0],
        [4.0, 0.0, 0.0],   # plane at x=2
        [1.0, 0.0, 0.0],   # plane at x=0.5
    ])
    unordered = build_bisector_planes(seeds, 0)
    assert np.allclose(unordered[0].point, [2.0, 0, 0])

    ordered = build_bisector_planes(seeds, 0, reference=np.zeros(3))
    assert np.allclose(ordered[0].point, [0.5, 0, 0])
    assert np.allclose(ordered[1].point, [2.0, 0, 0])


def test_symmetric_seeds_give_centroid_plane():
    """Seeds mirrored about the origin along x: one plane through the origin, normal along x."""
    seeds = np.array([[-0.5, 0.0, 0.0], [0.5, 0.0, 0.0]])
    (p0,) = build_bisector_planes(seeds, 0)
    (p1,) = build_bisector_planes(seeds, 1)

    assert np.allclose(p0.point, 0.0)
    assert np.allclose(p0.normal, [-1.0, 0, 0])
    assert np.allclose(p1.point, 0.0)
    assert np.allclose(p1.normal, [1.0, 0, 0])
