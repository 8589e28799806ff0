"""Unit tests for the Lambertian material module.

Tests cover:
- Scatter function (direction, attenuation, did_scatter)
- Cosine-weighted distribution of scattered directions
- Near-zero fallback and finite directions
- Material registry operations
"""

import pytest
import taichi as ti


class TestScatterLambertian:
    """Tests for the scatter function."""

    def test_scatter_direction_in_hemisphere(self):
        """Test that normal + unit vector never points below the surface."""
        from src.pathtracer.materials.lambertian import scatter_lambertian

        min_dot = ti.field(dtype=ti.f32, shape=())
        min_dot[None] = 10.0

        @ti.kernel
        def test_kernel():
            albedo = ti.math.vec3(0.5, 0.5, 0.5)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for _i in range(1000):
                direction, _, _ = scatter_lambertian(albedo, normal)
                ti.atomic_min(min_dot[None], ti.math.dot(direction, normal))

        test_kernel()
        assert min_dot[None] >= -1e-6

    def test_scatter_direction_length_at_most_two(self):
        """Directions are unnormalized: |normal + unit| lies in [0, 2]."""
        from src.pathtracer.materials.lambertian import scatter_lambertian

        max_len = ti.field(dtype=ti.f32, shape=())
        max_len[None] = 0.0

        @ti.kernel
        def test_kernel():
            albedo = ti.math.vec3(0.5, 0.5, 0.5)
            normal = ti.math.vec3(0.0, 0.0, 1.0)
            for _i in range(1000):
                direction, _, _ = scatter_lambertian(albedo, normal)
                ti.atomic_max(max_len[None], ti.math.length(direction))

        test_kernel()
        assert max_len[None] <= 2.0 + 1e-5
        assert max_len[None] > 1.0

    def test_scatter_attenuation_equals_albedo(self):
        """Test that attenuation equals albedo and the surface always scatters."""
        from src.pathtracer.materials.lambertian import scatter_lambertian

        result_attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _i in range(1):
                albedo = ti.math.vec3(0.7, 0.3, 0.5)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                _, attenuation, did_scatter = scatter_lambertian(albedo, normal)
                result_attenuation[None] = attenuation
                result_scatter[None] = did_scatter

        test_kernel()
        a = result_attenuation[None]
        assert abs(a[0] - 0.7) < 1e-6
        assert abs(a[1] - 0.3) < 1e-6
        assert abs(a[2] - 0.5) < 1e-6
        assert result_scatter[None] == 1

    def test_cosine_weighted_mean(self):
        """The mean cosine of cosine-weighted samples is 2/3."""
        from src.pathtracer.materials.lambertian import scatter_lambertian

        n_samples = 20000
        cos_sum = ti.field(dtype=ti.f32, shape=())
        cos_sum[None] = 0.0

        @ti.kernel
        def test_kernel():
            albedo = ti.math.vec3(0.5, 0.5, 0.5)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for _i in range(n_samples):
                direction, _, _ = scatter_lambertian(albedo, normal)
                cos_sum[None] += ti.math.normalize(direction).y

        test_kernel()
        mean_cos = cos_sum[None] / n_samples
        assert abs(mean_cos - 2.0 / 3.0) < 0.02


class TestDegenerateDirection:
    """Tests for the near-zero fallback of the scatter direction."""

    def test_cancelling_sample_returns_normal(self):
        from src.pathtracer.materials.lambertian import lambertian_direction, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel(n: vec3):
            for _i in range(1):
                result[0] = lambertian_direction(n, -n)
                result[1] = lambertian_direction(n, vec3(1.0, 0.0, 0.0))

        test_kernel(vec3(0.0, 0.6, 0.8))
        values = result.to_numpy()
        assert values[0].tolist() == pytest.approx([0.0, 0.6, 0.8])
        assert values[1].tolist() == pytest.approx([1.0, 0.6, 0.8])

    def test_scatter_is_finite_for_random_normals(self):
        """Thousands of samples over random normals never produce NaN, inf or zero."""
        from src.pathtracer.core.ray import random_unit_vector
        from src.pathtracer.materials.lambertian import scatter_lambertian

        n_samples = 50000
        bad = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            albedo = ti.math.vec3(0.5, 0.5, 0.5)
            for _i in range(n_samples):
                normal = random_unit_vector()
                direction, attenuation, _ = scatter_lambertian(albedo, normal)
                for c in ti.static(range(3)):
                    if ti.math.isnan(direction[c]) or ti.math.isinf(direction[c]):
                        bad[None] += 1
                    if ti.math.isnan(attenuation[c]) or ti.math.isinf(attenuation[c]):
                        bad[None] += 1
                if direction.norm() == 0.0:
                    bad[None] += 1

        test_kernel()
        assert bad[None] == 0


class TestLambertianRegistry:
    """Tests for Lambertian material storage."""

    def test_add_and_count(self):
        from src.pathtracer.materials.lambertian import (
            add_lambertian_material,
            clear_lambertian_materials,
            get_lambertian_material_count,
        )

        assert get_lambertian_material_count() == 0
        assert add_lambertian_material(3) == 0
        assert add_lambertian_material(5) == 1
        assert get_lambertian_material_count() == 2

        clear_lambertian_materials()
        assert get_lambertian_material_count() == 0

    def test_texture_lookup(self):
        from src.pathtracer.materials.lambertian import (
            add_lambertian_material,
            get_lambertian_texture,
        )

        add_lambertian_material(3)
        add_lambertian_material(7)

        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = get_lambertian_texture(0)
            result[1] = get_lambertian_texture(1)

        test_kernel()
        assert result[0] == 3
        assert result[1] == 7

    def test_capacity(self):
        from src.pathtracer.materials import lambertian

        lambertian.num_lambertian_materials[None] = lambertian.MAX_LAMBERTIAN_MATERIALS
        with pytest.raises(RuntimeError):
            lambertian.add_lambertian_material(0)
