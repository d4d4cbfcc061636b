"""Immutable scene description.

A Scene is an ordered tuple of spheres, each carrying its own material
parameters. It is plain Python data: building one validates every sphere but
touches no Taichi storage. Use minipath.scene.intersection.load_scene to
upload a Scene before rendering.

Example:
    >>> from minipath.scene.description import create_default_scene
    >>> scene = create_default_scene()
    >>> len(scene)
    4
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from minipath.materials.material import (
    MaterialType,
    parse_material_type,
    validate_albedo,
    validate_fuzz,
)


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the scene with its material.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (positive).
        material: The material type.
        albedo: The reflectance color, each channel in [0, 1].
        fuzz: Reflection perturbation for metal (non-negative).
        name: Optional label for debugging and serialization.
    """

    center: tuple[float, float, float]
    radius: float
    material: MaterialType = MaterialType.LAMBERTIAN
    albedo: tuple[float, float, float] = (0.5, 0.5, 0.5)
    fuzz: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Center must have 3 components, got {len(self.center)}")
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        object.__setattr__(self, "center", tuple(float(c) for c in self.center))
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "material", parse_material_type(self.material))
        object.__setattr__(self, "albedo", validate_albedo(self.albedo))
        object.__setattr__(self, "fuzz", validate_fuzz(self.fuzz))

    def to_dict(self) -> dict[str, Any]:
        """Convert the sphere to a JSON-friendly dictionary."""
        return {
            "name": self.name,
            "center": list(self.center),
            "radius": self.radius,
            "material": self.material.name.lower(),
            "albedo": list(self.albedo),
            "fuzz": self.fuzz,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SphereInfo":
        """Build a sphere from a dictionary produced by to_dict().

        Raises:
            ValueError: If any parameter is invalid.
            KeyError: If center or radius is missing.
        """
        return cls(
            center=tuple(data["center"]),
            radius=data["radius"],
            material=data.get("material", MaterialType.LAMBERTIAN),
            albedo=tuple(data.get("albedo", (0.5, 0.5, 0.5))),
            fuzz=data.get("fuzz", 0.0),
            name=data.get("name", ""),
        )


@dataclass(frozen=True)
class Scene:
    """An immutable, ordered collection of spheres.

    Attributes:
        spheres: The spheres in scan order.
    """

    spheres: tuple[SphereInfo, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "spheres", tuple(self.spheres))

    def __len__(self) -> int:
        return len(self.spheres)

    def __iter__(self):
        return iter(self.spheres)

    def to_dict(self) -> dict[str, Any]:
        """Convert the scene to a JSON-friendly dictionary."""
        return {"spheres": [sphere.to_dict() for sphere in self.spheres]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from a dictionary produced by to_dict()."""
        return cls(spheres=tuple(SphereInfo.from_dict(s) for s in data.get("spheres", [])))


def make_scene(spheres: Sequence[SphereInfo]) -> Scene:
    """Create a scene from any sequence of spheres."""
    return Scene(spheres=tuple(spheres))


def create_default_scene() -> Scene:
    """Create the four-sphere demo scene.

    Layout (camera at the origin looking down -z):
        - ground: large grey Lambertian sphere below everything
        - center: reddish Lambertian sphere
        - left: slightly fuzzy silver metal sphere
        - right: very fuzzy gold metal sphere

    Returns:
        The default Scene.
    """
    return Scene(
        spheres=(
            SphereInfo(
                center=(0.0, -100.5, -1.0),
                radius=100.0,
                material=MaterialType.LAMBERTIAN,
                albedo=(0.5, 0.5, 0.5),
                name="ground",
            ),
            SphereInfo(
                center=(0.0, 0.0, -1.0),
                radius=0.5,
                material=MaterialType.LAMBERTIAN,
                albedo=(0.7, 0.3, 0.3),
                name="center",
            ),
            SphereInfo(
                center=(-1.0, 0.0, -1.0),
                radius=0.5,
                material=MaterialType.METAL,
                albedo=(0.8, 0.8, 0.8),
                fuzz=0.3,
                name="left",
            ),
            SphereInfo(
                center=(1.0, 0.0, -1.0),
                radius=0.5,
                material=MaterialType.METAL,
                albedo=(0.8, 0.6, 0.2),
                fuzz=1.0,
                name="right",
            ),
        )
    )
