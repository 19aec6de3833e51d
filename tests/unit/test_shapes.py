import numpy as np
import pytest

from ultvox.core.shapes import Sphere, Triangle, Triangle2D, kept_axes


def test_triangle2d_contains() -> None:
    p1 = (0.0, 0.0)
    p2 = (1.0, 1.0)
    p3 = (0.5, 3.0)
    p4 = (3.0, 0.5)
    p5 = (-2.0, -1.0)

    tri1 = Triangle2D(a=p5, b=p3, c=p4)
    assert tri1.contains(p1)
    assert tri1.contains(p2)
    assert not tri1.contains((-2.0, -0.1))

    tri2 = Triangle2D(a=p1, b=p2, c=p4)
    assert not tri2.contains(p3)
    assert not tri2.contains(p5)

    tri3 = Triangle2D(a=p5, b=p2, c=p4)
    assert tri3.contains(p1)
    assert not tri3.contains(p3)


def test_triangle2d_boundary_is_inside() -> None:
    tri = Triangle2D(a=(0.0, 0.0), b=(2.0, 0.0), c=(0.0, 2.0))
    pts = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0], [1.0, 0.0], [1.0, 1.0], [1.5, 1.0]])
    np.testing.assert_array_equal(tri.contains(pts), [True, True, True, True, True, False])


def test_lattice_points_inside() -> None:
    tri = Triangle2D(a=(-2.0, -1.0), b=(0.5, 3.0), c=(3.0, 0.5))
    found = {tuple(p) for p in tri.lattice_points_inside().tolist()}
    assert (0.0, 0.0) in found
    assert (1.0, 1.0) in found
    assert (-2.0, -1.0) in found
    assert (3.0, 1.0) not in found
    assert (3.0, 0.0) not in found
    assert (0.0, 3.0) not in found


def test_degenerate_projection_reports_nothing_inside() -> None:
    tri = Triangle2D(a=(0.0, 0.0), b=(1.0, 1.0), c=(2.0, 2.0))
    with np.errstate(all="raise"):
        pts = tri.lattice_points_inside()
    assert pts.shape == (0, 2)


def test_plane_from_points() -> None:
    tri = Triangle.from_points((0, 0, 0), (4, 0, 1), (4, 3, 2))
    np.testing.assert_allclose(tri.normal, [-3.0, -4.0, 12.0])
    assert tri.offset == pytest.approx(0.0)
    for p in (tri.a, tri.b, tri.c):
        assert np.dot(tri.normal, p) == pytest.approx(tri.offset)


def test_project_keeps_remaining_axes_in_order() -> None:
    tri = Triangle.from_points((1, 2, 3), (4, 5, 6), (7, 8, 9))
    np.testing.assert_array_equal(tri.project(0).a, [2, 3])
    np.testing.assert_array_equal(tri.project(1).b, [4, 6])
    np.testing.assert_array_equal(tri.project(2).c, [7, 8])
    with pytest.raises(ValueError):
        kept_axes(3)


def test_solve_recovers_dropped_coordinate() -> None:
    tri = Triangle.from_points((0, 0, 0), (4, 0, 1), (4, 3, 2))
    assert float(tri.solve((4.0, 3.0), 2)) == pytest.approx(2.0)
    assert float(tri.solve((0.0, 1.0), 0)) == pytest.approx(4.0)
    rays = np.array([[0.0, 0.0], [4.0, 0.0], [4.0, 3.0]])
    np.testing.assert_allclose(tri.solve(rays, 2), [0.0, 1.0, 2.0])


def test_solve_returns_sentinel_for_parallel_plane() -> None:
    # plane x = 0 is parallel to the z axis
    tri = Triangle.from_points((0, 0, 0), (0, 1, 0), (0, 0, 1))
    assert np.isinf(tri.solve((0.5, 0.5), 2))
    assert np.all(np.isinf(tri.solve(np.array([[0.0, 0.0], [1.0, 1.0]]), 1)))
    assert float(tri.solve((0.2, 0.2), 0)) == pytest.approx(0.0)


def test_collinear_triangle_has_zero_normal() -> None:
    tri = Triangle.from_points((0, 0, 0), (1, 1, 1), (2, 2, 2))
    np.testing.assert_allclose(tri.normal, 0.0)
    for axis in range(3):
        assert np.isinf(tri.solve((0.0, 0.0), axis))


def test_sphere_bounds_grow_by_one() -> None:
    s = Sphere(center=(0.5, 0.0, 0.0), radius=2.0)
    lo, hi = s.bounds()
    np.testing.assert_array_equal(lo, [-2, -3, -3])
    np.testing.assert_array_equal(hi, [3, 3, 3])


def test_sphere_contains_shell_only() -> None:
    s = Sphere(center=(0, 0, 0), radius=2.0)
    assert s.contains(np.array([2.0, 0.0, 0.0]))
    assert s.contains(np.array([1.0, 1.0, 1.0]))
    assert not s.contains(np.array([0.0, 0.0, 0.0]))
    assert not s.contains(np.array([3.0, 0.0, 0.0]))
