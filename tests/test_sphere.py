"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Inverted spheres (negative radius)
- Exclusive t_min / t_max bounds
"""

import math

import pytest
import taichi as ti


def _make_hit_query():
    """Build a kernel that intersects one ray with one sphere.

    Returns:
        (query, results) where query(origin, direction, center, radius,
        t_min, t_max) runs the kernel and results holds the record fields.
    """
    from spheretrace.core.ray import Ray
    from spheretrace.core.vec3 import vec3
    from spheretrace.geometry.sphere import Sphere, hit_sphere

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    point = ti.Vector.field(3, dtype=ti.f64, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def kernel(
        ox: ti.f64, oy: ti.f64, oz: ti.f64,
        dx: ti.f64, dy: ti.f64, dz: ti.f64,
        cx: ti.f64, cy: ti.f64, cz: ti.f64,
        radius: ti.f64, t_min: ti.f64, t_max: ti.f64,
    ):
        ray = Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
        sphere = Sphere(center=vec3(cx, cy, cz), radius=radius, material_id=7)
        rec = hit_sphere(ray, sphere, t_min, t_max)
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal
        front_face[None] = rec.front_face
        material_id[None] = rec.material_id

    def query(origin, direction, center, radius, t_min=0.001, t_max=math.inf):
        kernel(*origin, *direction, *center, radius, t_min, t_max)
        return {
            "hit": int(hit[None]),
            "t": float(t_val[None]),
            "point": tuple(point[None]),
            "normal": tuple(normal[None]),
            "front_face": int(front_face[None]),
            "material_id": int(material_id[None]),
        }

    return query


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_from_outside(self):
        """A ray from the origin down -z hits the front of the sphere at t=0.5."""
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), 0.5)

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(0.5)
        assert rec["point"] == pytest.approx((0.0, 0.0, -0.5))
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0))
        assert rec["front_face"] == 1
        assert rec["material_id"] == 7

    def test_unnormalized_direction_scales_t(self):
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), (0.0, 0.0, -2.0), (0.0, 0.0, -1.0), 0.5)

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(0.25)
        assert rec["point"] == pytest.approx((0.0, 0.0, -0.5))

    def test_miss(self):
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, -1.0), 0.5)

        assert rec["hit"] == 0
        assert rec["material_id"] == -1

    def test_sphere_behind_ray_is_missed(self):
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -3.0), 0.5)

        assert rec["hit"] == 0

    def test_hit_from_inside_is_back_face(self):
        """From the center only the far root is in range; the normal is flipped."""
        query = _make_hit_query()
        rec = query((0.0, 0.0, -1.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), 0.5)

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(0.5)
        assert rec["point"] == pytest.approx((0.0, 0.0, -1.5))
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0))
        assert rec["front_face"] == 0

    def test_negative_radius_inverts_normal(self):
        """The outward normal of an inverted sphere points to its center."""
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), -0.5)

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(0.5)
        # Outward normal is (0, 0, -1), along the ray, so the hit is a back face
        assert rec["front_face"] == 0
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0))

    def test_t_max_is_exclusive(self):
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), 0.5, t_max=0.5)

        assert rec["hit"] == 0

    def test_t_min_is_exclusive_and_falls_back_to_far_root(self):
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0), 0.5, t_min=0.5)

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(1.5)
        assert rec["front_face"] == 0

    @pytest.mark.parametrize(
        "direction",
        [(0.0, 0.0, -1.0), (0.3, 0.2, -1.0), (-0.4, -0.1, -1.0), (0.1, 0.45, -1.0)],
    )
    def test_normal_faces_against_ray(self, direction):
        query = _make_hit_query()
        rec = query((0.0, 0.0, 0.0), direction, (0.0, 0.0, -2.0), 1.0)

        assert rec["hit"] == 1
        n = rec["normal"]
        assert sum(a * b for a, b in zip(direction, n)) <= 0.0
        assert math.sqrt(sum(c * c for c in n)) == pytest.approx(1.0)

    def test_hit_point_lies_on_sphere_and_on_ray(self):
        query = _make_hit_query()
        origin = (0.2, -0.1, 0.5)
        center = (0.3, 0.4, -3.0)
        radius = -1.25
        for direction in [(0.0, 0.1, -1.0), (0.2, 0.3, -1.0), (0.1, 0.4, -1.0)]:
            rec = query(origin, direction, center, radius)

            assert rec["hit"] == 1
            dist = math.dist(rec["point"], center)
            assert dist == pytest.approx(abs(radius))
            on_ray = tuple(o + rec["t"] * d for o, d in zip(origin, direction))
            assert rec["point"] == pytest.approx(on_ray)
