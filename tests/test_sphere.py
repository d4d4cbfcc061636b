"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Root selection against t_min and t_max
- Material parameters carried into the hit record
"""

import taichi as ti

from minipath.core.ray import vec3
from minipath.geometry.sphere import Sphere, hit_sphere


def _run_hit(origin, direction, center, radius, t_min=0.001, t_max=1000.0):
    """Intersect one ray with one sphere and return the record as plain values."""
    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.Vector.field(3, dtype=ti.f32, shape=())
    normal = ti.Vector.field(3, dtype=ti.f32, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        o: ti.math.vec3, d: ti.math.vec3, c: ti.math.vec3, r: ti.f32, lo: ti.f32, hi: ti.f32
    ):
        sphere = Sphere(center=c, radius=r)
        record = hit_sphere(o, d, sphere, lo, hi)
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal
        front_face[None] = record.front_face

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius, t_min, t_max)
    return {
        "hit": hit[None],
        "t": t_val[None],
        "point": point[None],
        "normal": normal[None],
        "front_face": front_face[None],
    }


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit_from_outside(self):
        """Test a ray along -z hitting the front of a sphere."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)

        assert rec["hit"] == 1
        # z0 - r from the origin
        assert abs(rec["t"] - 4.0) < 1e-5
        p = rec["point"]
        assert abs(p[0]) < 1e-5
        assert abs(p[1]) < 1e-5
        assert abs(p[2] + 4.0) < 1e-5
        n = rec["normal"]
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5
        assert rec["front_face"] == 1

    def test_miss(self):
        """Test a ray passing beside the sphere."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (3.0, 0.0, -5.0), 1.0)
        assert rec["hit"] == 0

    def test_sphere_behind_ray(self):
        """Test that a sphere behind the origin is not hit."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0)
        assert rec["hit"] == 0

    def test_unnormalized_direction(self):
        """Test that t scales with the direction length."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -2.0), (0.0, 0.0, -5.0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5

    def test_inside_sphere_back_face(self):
        """Test that a ray starting inside hits the far side as a back face."""
        rec = _run_hit((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2.0)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        assert rec["front_face"] == 0
        # Normal is flipped to face the ray
        n = rec["normal"]
        assert abs(n[0] + 1.0) < 1e-5

    def test_normal_opposes_ray(self):
        """Test that the normal is unit length and faces against the ray."""
        directions = [(0.2, -0.2, -1.0), (-0.1, 0.25, -1.0), (0.0, 0.0, -1.0)]
        for direction in directions:
            rec = _run_hit((0.0, 0.0, 0.0), direction, (0.0, 0.0, -3.0), 1.0)
            assert rec["hit"] == 1
            n = rec["normal"]
            length = (n[0] ** 2 + n[1] ** 2 + n[2] ** 2) ** 0.5
            assert abs(length - 1.0) < 1e-5
            assert n[0] * direction[0] + n[1] * direction[1] + n[2] * direction[2] <= 0.0

    def test_far_root_when_near_root_below_t_min(self):
        """Test that the far root is used when the near one is below t_min."""
        # Near root at t=2, far root at t=4
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 1.0, t_min=2.5)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        assert rec["front_face"] == 0

    def test_both_roots_outside_range(self):
        """Test that no hit is reported when both roots are beyond t_max."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 1.0, t_max=1.5)
        assert rec["hit"] == 0

    def test_t_within_bounds(self):
        """Test that an accepted t always lies in [t_min, t_max]."""
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 1.0, t_max=3.0)
        assert rec["hit"] == 1
        assert 0.001 <= rec["t"] <= 3.0

    def test_material_copied_to_record(self):
        """Test that the record carries the sphere's material parameters."""
        material = ti.field(dtype=ti.i32, shape=())
        albedo = ti.Vector.field(3, dtype=ti.f32, shape=())
        fuzz = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(
                center=vec3(0.0, 0.0, -2.0),
                radius=0.5,
                material=2,
                albedo=vec3(0.8, 0.6, 0.2),
                fuzz=0.3,
            )
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 100.0)
            material[None] = record.material
            albedo[None] = record.albedo
            fuzz[None] = record.fuzz

        test_kernel()
        assert material[None] == 2
        a = albedo[None]
        assert abs(a[0] - 0.8) < 1e-6
        assert abs(a[1] - 0.6) < 1e-6
        assert abs(a[2] - 0.2) < 1e-6
        assert abs(fuzz[None] - 0.3) < 1e-6
