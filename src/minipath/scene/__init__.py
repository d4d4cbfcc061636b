"""Scene module for scene description and ray-scene queries.

Components:
    description: Immutable Scene / SphereInfo dataclasses and the default scene
    intersection: Taichi field storage for the loaded scene and nearest-hit queries

The scene is built once in Python, validated, and uploaded in one call:
    - Structure-of-Arrays layout for sphere data
    - Material parameters stored per sphere
    - Linear nearest-hit scan over at most MAX_SPHERES spheres
"""

from .description import Scene, SphereInfo, create_default_scene, make_scene

# Note: intersection is NOT imported here because it declares Taichi fields.
# Import it directly from minipath.scene.intersection after ti.init().

__all__ = [
    "Scene",
    "SphereInfo",
    "create_default_scene",
    "make_scene",
]
