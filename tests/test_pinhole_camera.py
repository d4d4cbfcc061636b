"""Unit tests for the pinhole camera.

Tests cover:
- Viewport geometry for a given resolution
- Rays through the viewport center and corners
- Resolution validation
"""

import pytest
import taichi as ti


class TestMakeCamera:
    """Tests for make_camera."""

    def test_two_to_one_viewport(self):
        """Test the viewport vectors for a 400x200 image."""
        from minipath.camera.pinhole import make_camera

        camera = make_camera((400, 200))
        assert camera.origin == (0.0, 0.0, 0.0)
        assert camera.horizontal == pytest.approx((4.0, 0.0, 0.0))
        assert camera.vertical == pytest.approx((0.0, 2.0, 0.0))
        assert camera.lower_left_corner == pytest.approx((-2.0, -1.0, -1.0))
        assert camera.aspect_ratio == pytest.approx(2.0)

    def test_square_viewport(self):
        """Test that a square image gives a 2x2 viewport."""
        from minipath.camera.pinhole import make_camera

        camera = make_camera((256, 256))
        assert camera.horizontal == pytest.approx((2.0, 0.0, 0.0))
        assert camera.lower_left_corner == pytest.approx((-1.0, -1.0, -1.0))

    @pytest.mark.parametrize("resolution", [(0, 200), (400, 0), (-1, 10)])
    def test_invalid_resolution(self, resolution):
        """Test that non-positive resolutions raise ValueError."""
        from minipath.camera.pinhole import make_camera

        with pytest.raises(ValueError, match="Resolution"):
            make_camera(resolution)


class TestGetRay:
    """Tests for get_ray."""

    def _ray(self, u, v):
        from minipath.camera.pinhole import get_ray

        origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(uu: ti.f32, vv: ti.f32):
            ray = get_ray(uu, vv)
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel(u, v)
        return origin[None], direction[None]

    def test_center_ray(self):
        """Test that (0.5, 0.5) looks straight down -z."""
        from minipath.camera.pinhole import make_camera, setup_camera

        setup_camera(make_camera((400, 200)))
        origin, d = self._ray(0.5, 0.5)
        assert abs(origin[0]) < 1e-6 and abs(origin[1]) < 1e-6 and abs(origin[2]) < 1e-6
        assert abs(d[0]) < 1e-6
        assert abs(d[1]) < 1e-6
        assert abs(d[2] + 1.0) < 1e-6

    def test_lower_left_corner_ray(self):
        """Test that (0, 0) points at the lower-left corner, unnormalized."""
        from minipath.camera.pinhole import make_camera, setup_camera

        setup_camera(make_camera((400, 200)))
        _, d = self._ray(0.0, 0.0)
        assert abs(d[0] + 2.0) < 1e-6
        assert abs(d[1] + 1.0) < 1e-6
        assert abs(d[2] + 1.0) < 1e-6

    def test_upper_right_corner_ray(self):
        """Test that (1, 1) points at the upper-right corner."""
        from minipath.camera.pinhole import make_camera, setup_camera

        setup_camera(make_camera((400, 200)))
        _, d = self._ray(1.0, 1.0)
        assert abs(d[0] - 2.0) < 1e-6
        assert abs(d[1] - 1.0) < 1e-6
        assert abs(d[2] + 1.0) < 1e-6

    def test_camera_info_round_trip(self):
        """Test that the stored camera state matches what was set."""
        from minipath.camera.pinhole import get_camera_info, make_camera, setup_camera

        setup_camera(make_camera((300, 150)))
        info = get_camera_info()
        assert info["horizontal"] == pytest.approx((4.0, 0.0, 0.0))
        assert info["lower_left"] == pytest.approx((-2.0, -1.0, -1.0))
        assert info["origin"] == pytest.approx((0.0, 0.0, 0.0))
