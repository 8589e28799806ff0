"""Unit tests for the Dielectric material module.

Tests cover:
- Refraction ratio for entering and leaving rays
- Total internal reflection
- Schlick reflection probability at normal incidence
- Invisible boundaries (ratio of exactly 1), including grazing rays
- Finite directions over many samples
- White attenuation and unconditional scattering
- Material registry operations
"""

import math

import pytest
import taichi as ti


class TestRefractionRatio:
    def test_entering_and_leaving(self):
        from src.pathtracer.materials.dielectric import refraction_ratio

        entering = ti.field(dtype=ti.f32, shape=())
        leaving = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            entering[None] = refraction_ratio(1.5, 1)
            leaving[None] = refraction_ratio(1.5, 0)

        test_kernel()
        assert abs(entering[None] - 1.0 / 1.5) < 1e-6
        assert abs(leaving[None] - 1.5) < 1e-6


class TestTotalInternalReflection:
    def test_tir_when_leaving_at_steep_angle(self):
        """Leaving glass at 60 degrees: 1.5 * sin(60) > 1."""
        from src.pathtracer.materials.dielectric import will_reflect

        result = ti.field(dtype=ti.i32, shape=())
        s = math.sin(math.radians(60.0))
        c = math.cos(math.radians(60.0))

        @ti.kernel
        def test_kernel():
            incident = ti.math.vec3(s, -c, 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            result[None] = will_reflect(1.5, incident, normal, 0)

        test_kernel()
        assert result[None] == 1

    def test_no_tir_when_entering(self):
        from src.pathtracer.materials.dielectric import will_reflect

        result = ti.field(dtype=ti.i32, shape=())
        s = math.sin(math.radians(60.0))
        c = math.cos(math.radians(60.0))

        @ti.kernel
        def test_kernel():
            incident = ti.math.vec3(s, -c, 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            result[None] = will_reflect(1.5, incident, normal, 1)

        test_kernel()
        assert result[None] == 0

    def test_tir_scatter_reflects(self):
        """Under total internal reflection every sample is a mirror reflection."""
        from src.pathtracer.materials.dielectric import scatter_dielectric

        min_y = ti.field(dtype=ti.f32, shape=())
        min_y[None] = 10.0
        s = math.sin(math.radians(60.0))
        c = math.cos(math.radians(60.0))

        @ti.kernel
        def test_kernel():
            incident = ti.math.vec3(s, -c, 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for _i in range(500):
                direction, _, _ = scatter_dielectric(1.5, incident, normal, 0)
                ti.atomic_min(min_y[None], direction.y)

        test_kernel()
        assert abs(min_y[None] - c) < 1e-4


class TestFresnelProbability:
    def test_reflection_fraction_at_normal_incidence(self):
        """About 4% of head-on rays reflect off glass."""
        from src.pathtracer.materials.dielectric import scatter_dielectric

        n_samples = 50000
        reflected = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.vec3(0.0, -1.0, 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for _i in range(n_samples):
                direction, _, _ = scatter_dielectric(1.5, incident, normal, 1)
                if direction.y > 0.0:
                    reflected[None] += 1

        test_kernel()
        fraction = reflected[None] / n_samples
        assert 0.03 < fraction < 0.05

    def test_ratio_one_always_transmits(self):
        """An index of 1 is an invisible boundary: rays pass unchanged."""
        from src.pathtracer.materials.dielectric import scatter_dielectric

        max_deviation = ti.field(dtype=ti.f32, shape=())
        max_deviation[None] = 0.0

        @ti.kernel
        def test_kernel():
            incident = ti.math.vec3(0.6, -0.8, 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for _i in range(1000):
                direction, _, _ = scatter_dielectric(1.0, incident, normal, 1)
                ti.atomic_max(max_deviation[None], ti.math.length(direction - incident))

        test_kernel()
        assert max_deviation[None] < 1e-5

    def test_ratio_one_transmits_at_grazing_incidence(self):
        """Schlick alone would reflect most grazing rays even with matched indices."""
        from src.pathtracer.materials.dielectric import scatter_dielectric

        max_deviation = ti.field(dtype=ti.f32, shape=())
        max_deviation[None] = 0.0

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(ti.math.vec3(1.0, -0.01, 0.0))
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for _i in range(2000):
                direction, _, _ = scatter_dielectric(1.0, incident, normal, 0)
                ti.atomic_max(max_deviation[None], ti.math.length(direction - incident))

        test_kernel()
        assert max_deviation[None] < 1e-4


class TestScatterProperties:
    def test_white_attenuation_and_always_scatters(self):
        from src.pathtracer.materials.dielectric import scatter_dielectric

        min_att = ti.field(dtype=ti.f32, shape=())
        max_att = ti.field(dtype=ti.f32, shape=())
        min_scatter = ti.field(dtype=ti.i32, shape=())
        min_att[None] = 10.0
        max_att[None] = -10.0
        min_scatter[None] = 1

        @ti.kernel
        def test_kernel():
            incident = ti.math.vec3(0.3, -1.0, 0.2)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for _i in range(1000):
                _, attenuation, did_scatter = scatter_dielectric(1.5, incident, normal, 1)
                ti.atomic_min(min_att[None], attenuation.min())
                ti.atomic_max(max_att[None], attenuation.max())
                ti.atomic_min(min_scatter[None], did_scatter)

        test_kernel()
        assert min_att[None] == 1.0
        assert max_att[None] == 1.0
        assert min_scatter[None] == 1


class TestDielectricRegistry:
    def test_add_and_get_material(self):
        from src.pathtracer.materials.dielectric import (
            add_dielectric_material,
            get_dielectric_ior,
            get_dielectric_material_count,
        )

        add_dielectric_material()
        idx = add_dielectric_material(2.4)
        assert idx == 1
        assert get_dielectric_material_count() == 2

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = get_dielectric_ior(0)
            result[1] = get_dielectric_ior(1)

        test_kernel()
        assert abs(result[0] - 1.5) < 1e-6
        assert abs(result[1] - 2.4) < 1e-6

    def test_ior_validation(self):
        from src.pathtracer.materials.dielectric import add_dielectric_material

        with pytest.raises(ValueError):
            add_dielectric_material(0.0)
        with pytest.raises(ValueError):
            add_dielectric_material(-1.5)


class TestFiniteScatter:
    """Scattered directions stay finite across many random samples."""

    @pytest.mark.parametrize("ior", [1.5, 2.4, 1.0 / 1.33])
    def test_no_nan_or_inf(self, ior):
        from src.pathtracer.core.ray import random_unit_vector
        from src.pathtracer.materials.dielectric import scatter_dielectric

        n_samples = 20000
        bad = ti.field(dtype=ti.i32, shape=())
        min_length = ti.field(dtype=ti.f32, shape=())
        min_length[None] = 10.0

        @ti.kernel
        def test_kernel(ior: ti.f32):
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for i in range(n_samples):
                # Head-on, grazing and random incidence on both faces
                incident = ti.math.vec3(0.0, -1.0, 0.0)
                if i % 3 == 1:
                    incident = ti.math.vec3(1.0, -1e-4, 0.0)
                elif i % 3 == 2:
                    incident = random_unit_vector()
                    incident.y = -ti.abs(incident.y)
                direction, attenuation, _ = scatter_dielectric(ior, incident, normal, i % 2)
                for c in ti.static(range(3)):
                    if ti.math.isnan(direction[c]) or ti.math.isinf(direction[c]):
                        bad[None] += 1
                    if ti.math.isnan(attenuation[c]) or ti.math.isinf(attenuation[c]):
                        bad[None] += 1
                ti.atomic_min(min_length[None], direction.norm())

        test_kernel(ior)
        assert bad[None] == 0
        assert min_length[None] > 0.99

    def test_total_internal_reflection_is_finite(self):
        from src.pathtracer.materials.dielectric import scatter_dielectric

        n_samples = 5000
        bad = ti.field(dtype=ti.i32, shape=())
        min_y = ti.field(dtype=ti.f32, shape=())
        min_y[None] = 10.0

        @ti.kernel
        def test_kernel():
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            for i in range(n_samples):
                # Leaving glass between the critical angle and grazing
                x = 0.7 + 0.3 * (i + 0.5) / n_samples
                incident = ti.math.vec3(x, -ti.sqrt(1.0 - x * x), 0.0)
                direction, _, _ = scatter_dielectric(1.5, incident, normal, 0)
                for c in ti.static(range(3)):
                    if ti.math.isnan(direction[c]) or ti.math.isinf(direction[c]):
                        bad[None] += 1
                ti.atomic_min(min_y[None], direction.y)

        test_kernel()
        assert bad[None] == 0
        assert min_y[None] >= 0.0
