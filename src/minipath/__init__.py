"""Taichi-based Monte Carlo path tracer for a small fixed sphere scene.

This package renders spheres with diffuse (Lambertian) and fuzzy metal
materials, averaging many jittered camera rays per pixel:
- Per-pixel hash-based random stream perturbed by a frame time value
- Iterative path tracing with a fixed depth bound
- Square-root gamma correction of the averaged color

Subpackages:
    core: Rays, the random stream, the integrator and the frame renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Lambertian and metal scattering with material dispatch
    scene: Scene description and GPU-side nearest-hit queries
    camera: Axis-aligned pinhole camera
    preview: PNG export, Matplotlib display and the live GGUI window
"""

__version__ = "0.1.0"
