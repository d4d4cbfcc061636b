"""Material tags and parameter validation.

The material set is closed: every sphere is either Lambertian or Metal, and
the tag is stored on the sphere as a plain integer so Taichi kernels can
branch on it. Tags start at 1; 0 marks "no material" in a miss record.
"""

from collections.abc import Sequence
from enum import IntEnum


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 1
    METAL = 2


def parse_material_type(value: str | int | MaterialType) -> MaterialType:
    """Convert a material name or tag into a MaterialType.

    Args:
        value: A MaterialType, its integer tag, or its case-insensitive name
            ("lambertian" or "metal").

    Returns:
        The matching MaterialType.

    Raises:
        ValueError: If the value names no known material.
    """
    if isinstance(value, str):
        try:
            return MaterialType[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown material type: {value!r}") from None
    try:
        return MaterialType(value)
    except ValueError:
        raise ValueError(f"Unknown material type: {value!r}") from None


def validate_albedo(albedo: Sequence[float]) -> tuple[float, float, float]:
    """Check that an albedo is an RGB triple with channels in [0, 1].

    Returns:
        The albedo as a tuple of floats.

    Raises:
        ValueError: If the albedo does not have three channels or any channel
            is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))


def validate_fuzz(fuzz: float) -> float:
    """Check that a metal fuzz value is non-negative.

    Raises:
        ValueError: If fuzz is negative.
    """
    if fuzz < 0.0:
        raise ValueError(f"Fuzz = {fuzz} must be non-negative.")
    return float(fuzz)
