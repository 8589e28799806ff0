"""Unit tests for the ray module.

Tests cover:
- Ray dataclass, make_ray and ray_at
- Vector helpers (length_squared, unit_vector, reflect, refract, reflectance)
- Random sampling functions for Monte Carlo
"""

import math

import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from src.pathtracer.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0), time=0.0)
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_unnormalized_direction(self):
        """Test ray_at scales by the direction's length."""
        from src.pathtracer.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(2.0, 0.0, 0.0), 0.0)
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 5.0) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_make_ray_keeps_time(self):
        """Test make_ray stores the ray time."""
        from src.pathtracer.core.ray import make_ray, vec3

        time_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), 0.75)
            time_result[None] = ray.time

        test_kernel()
        assert abs(time_result[None] - 0.75) < 1e-6


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_length_squared(self):
        from src.pathtracer.core.ray import length_squared, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = length_squared(vec3(1.0, 2.0, 2.0))

        test_kernel()
        assert abs(result[None] - 9.0) < 1e-6

    def test_unit_vector(self):
        from src.pathtracer.core.ray import unit_vector, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = unit_vector(vec3(0.0, 3.0, 4.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1] - 0.6) < 1e-6
        assert abs(r[2] - 0.8) < 1e-6

    def test_reflect(self):
        """Test reflection about an upward normal flips the y component."""
        from src.pathtracer.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_refract_normal_incidence(self):
        """Test a ray hitting head-on passes straight through."""
        from src.pathtracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1] + 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_refract_obeys_snell(self):
        """Test sin(theta_t) = eta * sin(theta_i) for an oblique ray."""
        from src.pathtracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        s = math.sqrt(0.5)

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(s, -s, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        length = math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert abs(length - 1.0) < 1e-5
        assert abs(r[0] / length - s / 1.5) < 1e-5
        assert r[1] < 0.0

    def test_reflectance_normal_incidence(self):
        """Test Schlick's r0 for glass at normal incidence."""
        from src.pathtracer.core.ray import reflectance

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflectance(1.0, 1.5)

        test_kernel()
        assert abs(result[None] - 0.04) < 1e-5

    def test_reflectance_grazing(self):
        """Test reflectance approaches 1 at grazing incidence."""
        from src.pathtracer.core.ray import reflectance

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflectance(0.0, 1.5)

        test_kernel()
        assert abs(result[None] - 1.0) < 1e-5

    def test_near_zero(self):
        from src.pathtracer.core.ray import near_zero, vec3

        result_zero = ti.field(dtype=ti.i32, shape=())
        result_nonzero = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result_zero[None] = near_zero(vec3(1e-9, -1e-9, 0.0))
            result_nonzero[None] = near_zero(vec3(1e-9, 1e-3, 0.0))

        test_kernel()
        assert result_zero[None] == 1
        assert result_nonzero[None] == 0


class TestRandomSampling:
    """Tests for random sampling functions."""

    def test_random_range_bounds(self):
        from src.pathtracer.core.ray import random_range

        min_val = ti.field(dtype=ti.f32, shape=())
        max_val = ti.field(dtype=ti.f32, shape=())
        min_val[None] = 10.0
        max_val[None] = -10.0

        @ti.kernel
        def test_kernel():
            for _ in range(1000):
                x = random_range(-2.0, 3.0)
                ti.atomic_min(min_val[None], x)
                ti.atomic_max(max_val[None], x)

        test_kernel()
        assert min_val[None] >= -2.0
        assert max_val[None] < 3.0
        assert max_val[None] - min_val[None] > 4.0

    def test_random_in_unit_sphere_bounds(self):
        """Test random_in_unit_sphere returns points inside unit sphere."""
        from src.pathtracer.core.ray import length_squared, random_in_unit_sphere

        max_len_sq = ti.field(dtype=ti.f32, shape=())
        max_len_sq[None] = 0.0

        @ti.kernel
        def test_kernel():
            for _ in range(1000):
                p = random_in_unit_sphere()
                ti.atomic_max(max_len_sq[None], length_squared(p))

        test_kernel()
        assert max_len_sq[None] < 1.0

    def test_random_unit_vector_length(self):
        """Test random_unit_vector returns unit length vectors."""
        from src.pathtracer.core.ray import random_unit_vector

        min_len = ti.field(dtype=ti.f32, shape=())
        max_len = ti.field(dtype=ti.f32, shape=())
        min_len[None] = 10.0
        max_len[None] = 0.0

        @ti.kernel
        def test_kernel():
            for _ in range(1000):
                vec_len = ti.math.length(random_unit_vector())
                ti.atomic_min(min_len[None], vec_len)
                ti.atomic_max(max_len[None], vec_len)

        test_kernel()
        assert abs(min_len[None] - 1.0) < 1e-4
        assert abs(max_len[None] - 1.0) < 1e-4

    def test_random_in_unit_disk_bounds(self):
        """Test random_in_unit_disk stays in the unit disk of the xy-plane."""
        from src.pathtracer.core.ray import random_in_unit_disk

        max_r_sq = ti.field(dtype=ti.f32, shape=())
        max_abs_z = ti.field(dtype=ti.f32, shape=())
        max_r_sq[None] = 0.0
        max_abs_z[None] = 0.0

        @ti.kernel
        def test_kernel():
            for _ in range(1000):
                p = random_in_unit_disk()
                ti.atomic_max(max_r_sq[None], p.x * p.x + p.y * p.y)
                ti.atomic_max(max_abs_z[None], ti.abs(p.z))

        test_kernel()
        assert max_r_sq[None] < 1.0
        assert max_abs_z[None] == 0.0
