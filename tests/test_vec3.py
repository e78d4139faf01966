"""Unit tests for vector algebra and random sampling."""

import math

import pytest
import taichi as ti


def _vec_field():
    return ti.Vector.field(3, dtype=ti.f64, shape=())


def _assert_vec_close(actual, expected, tol=1e-12):
    for a, e in zip(actual, expected):
        assert abs(a - e) < tol, f"{tuple(actual)} != {expected}"


class TestConversion:
    """Tests for the Python-side helpers."""

    def test_as_vec3_roundtrips_through_to_tuple(self):
        from spheretrace.core.vec3 import as_vec3, to_tuple

        assert to_tuple(as_vec3([1, 2.5, -3])) == (1.0, 2.5, -3.0)

    def test_as_vec3_rejects_wrong_length(self):
        from spheretrace.core.vec3 import as_vec3

        with pytest.raises(ValueError, match="3 components"):
            as_vec3((1.0, 2.0))


class TestVectorOperations:
    """Tests for the geometric operations."""

    def test_dot_and_length(self):
        from spheretrace.core.vec3 import dot, length, length_squared, vec3

        results = ti.field(dtype=ti.f64, shape=3)

        @ti.kernel
        def run():
            a = vec3(1.0, 2.0, 3.0)
            b = vec3(4.0, -5.0, 6.0)
            results[0] = dot(a, b)
            results[1] = length_squared(a)
            results[2] = length(vec3(3.0, 4.0, 0.0))

        run()
        assert results[0] == pytest.approx(12.0)
        assert results[1] == pytest.approx(14.0)
        assert results[2] == pytest.approx(5.0)

    def test_cross_follows_right_hand_rule(self):
        from spheretrace.core.vec3 import cross, vec3

        result = _vec_field()

        @ti.kernel
        def run():
            result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        run()
        _assert_vec_close(result[None], (0.0, 0.0, 1.0))

    def test_unit_vector_has_unit_length(self):
        from spheretrace.core.vec3 import unit_vector, vec3

        result = _vec_field()

        @ti.kernel
        def run():
            result[None] = unit_vector(vec3(3.0, 0.0, -4.0))

        run()
        _assert_vec_close(result[None], (0.6, 0.0, -0.8))

    def test_near_zero(self):
        from spheretrace.core.vec3 import near_zero, vec3

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def run():
            results[0] = near_zero(vec3(1e-9, -1e-9, 0.0))
            results[1] = near_zero(vec3(1e-9, 1e-7, 0.0))
            results[2] = near_zero(vec3(0.0, 0.0, 0.0))

        run()
        assert results[0] == 1
        assert results[1] == 0
        assert results[2] == 1

    def test_reflect_mirrors_about_normal(self):
        from spheretrace.core.vec3 import reflect, vec3

        result = _vec_field()

        @ti.kernel
        def run():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        run()
        _assert_vec_close(result[None], (1.0, 1.0, 0.0))

    def test_reflecting_twice_restores_vector(self):
        from spheretrace.core.vec3 import reflect, unit_vector, vec3

        result = _vec_field()

        @ti.kernel
        def run():
            n = unit_vector(vec3(0.3, 1.0, -0.2))
            result[None] = reflect(reflect(vec3(1.5, -2.0, 0.7), n), n)

        run()
        _assert_vec_close(result[None], (1.5, -2.0, 0.7))

    def test_refract_with_unit_ratio_keeps_direction(self):
        from spheretrace.core.vec3 import refract, unit_vector, vec3

        result = _vec_field()

        @ti.kernel
        def run():
            uv = unit_vector(vec3(1.0, -2.0, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0)

        run()
        s = 1.0 / math.sqrt(5.0)
        _assert_vec_close(result[None], (s, -2.0 * s, 0.0), tol=1e-12)

    def test_refract_bends_toward_normal_entering_denser_medium(self):
        from spheretrace.core.vec3 import refract, unit_vector, vec3

        result = _vec_field()

        @ti.kernel
        def run():
            uv = unit_vector(vec3(1.0, -1.0, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        run()
        out = result[None]
        # Snell: sin(theta') = sin(45 deg) / 1.5
        expected_sin = math.sin(math.pi / 4.0) / 1.5
        assert out[0] == pytest.approx(expected_sin)
        assert out[1] == pytest.approx(-math.sqrt(1.0 - expected_sin**2))

    def test_schlick_reflectance(self):
        from spheretrace.core.vec3 import schlick_reflectance

        results = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def run():
            results[0] = schlick_reflectance(1.0, 1.5)
            results[1] = schlick_reflectance(0.0, 1.5)

        run()
        # Head-on reflectance of glass is ((1 - 1.5) / (1 + 1.5))^2
        assert results[0] == pytest.approx(0.04)
        assert results[1] == pytest.approx(1.0)


N_SAMPLES = 2000


class TestRandomSampling:
    """Tests for the random sampling routines."""

    def test_random_double_range(self):
        from spheretrace.core.vec3 import random_double_range

        samples = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def run():
            for i in range(N_SAMPLES):
                samples[i] = random_double_range(-2.0, 3.0)

        run()
        values = samples.to_numpy()
        assert values.min() >= -2.0
        assert values.max() < 3.0

    def test_random_in_unit_sphere_stays_inside(self):
        from spheretrace.core.vec3 import length_squared, random_in_unit_sphere

        samples = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def run():
            for i in range(N_SAMPLES):
                samples[i] = length_squared(random_in_unit_sphere())

        run()
        assert samples.to_numpy().max() < 1.0

    def test_random_unit_vector_has_unit_length(self):
        from spheretrace.core.vec3 import length, random_unit_vector

        samples = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def run():
            for i in range(N_SAMPLES):
                samples[i] = length(random_unit_vector())

        run()
        values = samples.to_numpy()
        assert abs(values - 1.0).max() < 1e-12

    def test_random_vec3_components_in_unit_interval(self):
        from spheretrace.core.vec3 import random_vec3

        samples = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def run():
            for i in range(N_SAMPLES):
                samples[i] = random_vec3()

        run()
        values = samples.to_numpy()
        assert values.min() >= 0.0
        assert values.max() < 1.0
        # Each component is drawn independently, not one value repeated
        assert (values[:, 0] != values[:, 1]).any()
