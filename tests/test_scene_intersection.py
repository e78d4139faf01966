"""Unit tests for world storage and nearest-hit queries."""

import math

import numpy as np
import pytest
import taichi as ti


def _make_world_query():
    """Build a kernel that runs hit_world for one ray.

    Returns:
        query(origin, direction, t_min, t_max) -> (hit, t, material_id)
    """
    from spheretrace.core.ray import Ray
    from spheretrace.core.vec3 import vec3
    from spheretrace.scene.intersection import hit_world

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def kernel(
        ox: ti.f64, oy: ti.f64, oz: ti.f64,
        dx: ti.f64, dy: ti.f64, dz: ti.f64,
        t_min: ti.f64, t_max: ti.f64,
    ):
        # Single-iteration outer loop keeps the world scan serial
        for _ in range(1):
            ray = Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
            rec = hit_world(ray, t_min, t_max)
            hit[None] = rec.hit
            t_val[None] = rec.t
            material_id[None] = rec.material_id

    def query(origin, direction, t_min=0.001, t_max=math.inf):
        kernel(*origin, *direction, t_min, t_max)
        return int(hit[None]), float(t_val[None]), int(material_id[None])

    return query


def _reference_hit(origin, direction, centers, radii, t_min, t_max):
    """Nearest accepted root over all spheres, computed with NumPy."""
    best_t, best_idx = t_max, -1
    d = np.asarray(direction, dtype=np.float64)
    for idx, (center, radius) in enumerate(zip(centers, radii)):
        oc = np.asarray(origin, dtype=np.float64) - center
        a = d @ d
        half_b = d @ oc
        c = oc @ oc - radius * radius
        disc = half_b * half_b - a * c
        if disc < 0.0:
            continue
        for root in ((-half_b - math.sqrt(disc)) / a, (-half_b + math.sqrt(disc)) / a):
            if t_min < root < best_t:
                best_t, best_idx = root, idx
                break
    return best_idx, best_t


class TestWorldStorage:
    """Tests for adding and reading back spheres."""

    def test_add_and_get_sphere(self):
        from spheretrace.scene.intersection import add_sphere, get_sphere, get_sphere_count

        assert get_sphere_count() == 0
        idx = add_sphere((1.0, 2.0, 3.0), -0.4, material_id=2)

        assert idx == 0
        assert get_sphere_count() == 1
        assert get_sphere(0) == ((1.0, 2.0, 3.0), -0.4, 2)

    def test_zero_radius_is_rejected(self):
        from spheretrace.scene.intersection import add_sphere

        with pytest.raises(ValueError, match="non-zero"):
            add_sphere((0.0, 0.0, 0.0), 0.0)

    def test_get_sphere_out_of_range(self):
        from spheretrace.scene.intersection import add_sphere, get_sphere

        add_sphere((0.0, 0.0, 0.0), 1.0)
        with pytest.raises(IndexError):
            get_sphere(1)

    def test_clear_world(self):
        from spheretrace.scene.intersection import add_sphere, clear_world, get_sphere_count

        add_sphere((0.0, 0.0, 0.0), 1.0)
        add_sphere((0.0, 0.0, 5.0), 1.0)
        clear_world()

        assert get_sphere_count() == 0

    def test_capacity_exceeded(self):
        from spheretrace.scene.intersection import MAX_SPHERES, add_sphere

        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.5)

        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere((0.0, 0.0, 0.0), 0.5)


class TestHitWorld:
    """Tests for nearest-hit queries over the world."""

    def test_empty_world_misses(self):
        query = _make_world_query()
        hit, _, material_id = query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 0
        assert material_id == -1

    def test_nearest_sphere_wins_regardless_of_order(self):
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -10.0), 1.0, material_id=0)
        add_sphere((0.0, 0.0, -3.0), 1.0, material_id=1)
        add_sphere((0.0, 0.0, -6.0), 1.0, material_id=2)

        query = _make_world_query()
        hit, t, material_id = query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert t == pytest.approx(2.0)
        assert material_id == 1

    def test_t_max_limits_the_search(self):
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -3.0), 1.0)

        query = _make_world_query()
        hit, _, _ = query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=1.5)

        assert hit == 0

    def test_matches_per_sphere_minimum_on_random_scenes(self):
        """hit_world agrees with the minimum over independent sphere tests."""
        from spheretrace.scene.intersection import add_sphere

        rng = np.random.default_rng(1234)
        centers = rng.uniform(-4.0, 4.0, size=(24, 3))
        centers[:, 2] -= 6.0
        radii = rng.uniform(0.3, 1.5, size=24) * rng.choice([-1.0, 1.0], size=24)
        for idx, (center, radius) in enumerate(zip(centers, radii)):
            add_sphere(tuple(center), float(radius), material_id=idx)

        query = _make_world_query()
        for _ in range(100):
            origin = tuple(rng.uniform(-1.0, 1.0, size=3))
            direction = tuple(rng.normal(size=3))

            hit, t, material_id = query(origin, direction)
            expected_idx, expected_t = _reference_hit(
                origin, direction, centers, radii, 0.001, math.inf
            )

            if expected_idx < 0:
                assert hit == 0
            else:
                assert hit == 1
                assert t == pytest.approx(expected_t, rel=1e-9)
                assert material_id == expected_idx
