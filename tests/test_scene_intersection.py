"""Unit tests for scene storage and nearest-hit queries.

Tests cover:
- Loading and clearing scenes
- Sphere count limit
- Closest-hit selection regardless of scan order
- First sphere in scan order on exact ties
- Miss against an empty scene
"""

import pytest
import taichi as ti

from minipath.scene.description import Scene, SphereInfo, create_default_scene


def _intersect(origin, direction, t_min=0.001, t_max=10000.0):
    """Run intersect_scene for one ray and return (hit, t, material, normal)."""
    from minipath.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    material = ti.field(dtype=ti.i32, shape=())
    normal = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(o: ti.math.vec3, d: ti.math.vec3, lo: ti.f32, hi: ti.f32):
        rec = intersect_scene(o, d, lo, hi)
        hit[None] = rec.hit
        t_val[None] = rec.t
        material[None] = rec.material
        normal[None] = rec.normal

    test_kernel(ti.math.vec3(*origin), ti.math.vec3(*direction), t_min, t_max)
    return hit[None], t_val[None], material[None], normal[None]


class TestSceneStorage:
    """Tests for load_scene and clear_scene."""

    def test_load_default_scene(self):
        """Test that loading the default scene stores four spheres."""
        from minipath.scene.intersection import get_sphere_count, load_scene

        assert load_scene(create_default_scene()) == 4
        assert get_sphere_count() == 4

    def test_load_replaces_previous_scene(self):
        """Test that a second load replaces rather than appends."""
        from minipath.scene.intersection import get_sphere_count, load_scene

        load_scene(create_default_scene())
        load_scene(Scene(spheres=(SphereInfo(center=(0.0, 0.0, -1.0), radius=0.5),)))
        assert get_sphere_count() == 1

    def test_clear_scene(self):
        """Test that clearing leaves an empty scene."""
        from minipath.scene.intersection import clear_scene, get_sphere_count, load_scene

        load_scene(create_default_scene())
        clear_scene()
        assert get_sphere_count() == 0

    def test_too_many_spheres(self):
        """Test that exceeding MAX_SPHERES raises RuntimeError."""
        from minipath.scene.intersection import MAX_SPHERES, get_sphere_count, load_scene

        spheres = tuple(
            SphereInfo(center=(float(i), 0.0, -5.0), radius=0.1) for i in range(MAX_SPHERES + 1)
        )
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            load_scene(Scene(spheres=spheres))
        assert get_sphere_count() == 0


class TestIntersectScene:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        """Test that every ray misses an empty scene."""
        from minipath.scene.intersection import load_scene

        load_scene(Scene())
        hit, _, _, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_nearest_sphere_wins_when_listed_last(self):
        """Test that a nearer sphere later in the list replaces a farther hit."""
        from minipath.scene.intersection import load_scene

        far = SphereInfo(center=(0.0, 0.0, -5.0), radius=0.5, material="lambertian")
        near = SphereInfo(center=(0.0, 0.0, -2.0), radius=0.5, material="metal")
        load_scene(Scene(spheres=(far, near)))

        hit, t, material, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 1.5) < 1e-5
        assert material == 2

    def test_nearest_sphere_wins_when_listed_first(self):
        """Test that a farther sphere later in the list does not replace the nearer hit."""
        from minipath.scene.intersection import load_scene

        near = SphereInfo(center=(0.0, 0.0, -2.0), radius=0.5, material="metal")
        far = SphereInfo(center=(0.0, 0.0, -5.0), radius=0.5, material="lambertian")
        load_scene(Scene(spheres=(near, far)))

        hit, t, material, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 1.5) < 1e-5
        assert material == 2

    def test_first_sphere_wins_exact_tie(self):
        """Test that coincident spheres resolve to the one listed first."""
        from minipath.scene.intersection import load_scene

        first = SphereInfo(center=(0.0, 0.0, -2.0), radius=0.5, material="lambertian")
        second = SphereInfo(center=(0.0, 0.0, -2.0), radius=0.5, material="metal")
        load_scene(Scene(spheres=(first, second)))

        hit, t, material, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 1.5) < 1e-5
        assert material == 1

        load_scene(Scene(spheres=(second, first)))
        hit, _, material, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert material == 2

    def test_hit_exactly_at_t_max_is_kept(self):
        """Test that the first hit is accepted when its t equals t_max."""
        from minipath.scene.intersection import load_scene

        sphere = SphereInfo(center=(0.0, 0.0, -2.0), radius=0.5, material="metal")
        load_scene(Scene(spheres=(sphere,)))

        hit, t, _, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=1.5)
        assert hit == 1
        assert abs(t - 1.5) < 1e-5

    def test_default_scene_center_ray(self, default_scene):
        """Test that the camera's center ray hits the center sphere."""
        hit, t, material, normal = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 0.5) < 1e-5
        assert material == 1
        assert abs(normal[2] - 1.0) < 1e-5

    def test_default_scene_ground(self, default_scene):
        """Test that a downward ray hits the ground sphere."""
        hit, t, material, normal = _intersect((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert material == 1
        assert normal[1] > 0.99

    def test_default_scene_sky(self, default_scene):
        """Test that an upward ray escapes the default scene."""
        hit, _, _, _ = _intersect((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 0

    def test_t_max_limits_hits(self, default_scene):
        """Test that hits beyond t_max are ignored."""
        hit, _, _, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=0.4)
        assert hit == 0
