"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Reflection about a normal
- near_zero detection of degenerate vectors
"""

import taichi as ti

from minipath.core.ray import Ray, make_ray, near_zero, ray_at, reflect, vec3


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_unnormalized_direction(self):
        """Test ray_at scales by the raw direction length."""
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(-2.0, 1.0, -1.0))
            result[None] = ray_at(ray, 0.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] + 1.0) < 1e-6
        assert abs(r[1] - 0.5) < 1e-6
        assert abs(r[2] + 0.5) < 1e-6


class TestReflect:
    """Tests for reflect."""

    def test_reflect_45_degrees(self):
        """Test reflection of a diagonal ray off a floor."""
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_reflect_preserves_length(self):
        """Test that reflecting about a unit normal keeps the vector length."""
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(0.3, -0.4, 1.2), vec3(0.0, 0.0, -1.0))

        test_kernel()
        r = result[None]
        assert abs((r[0] ** 2 + r[1] ** 2 + r[2] ** 2) - (0.09 + 0.16 + 1.44)) < 1e-5


class TestNearZero:
    """Tests for near_zero."""

    def test_zero_vector(self):
        """Test that the zero vector is near zero."""
        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = near_zero(vec3(0.0, 0.0, 0.0))

        test_kernel()
        assert result[None] == 1

    def test_tiny_negative_components(self):
        """Test that tiny negative components also count as zero."""
        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = near_zero(vec3(-1e-9, 1e-9, -1e-9))

        test_kernel()
        assert result[None] == 1

    def test_one_large_component(self):
        """Test that a single non-negligible component is not near zero."""
        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = near_zero(vec3(0.0, -0.01, 0.0))

        test_kernel()
        assert result[None] == 0
