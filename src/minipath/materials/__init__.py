"""Materials module for the two scattering models.

Components:
    material: MaterialType tags and parameter validation
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection perturbed by a fuzz factor
    scatter: Dispatch from a hit record's material tag

Every scatter function takes the pixel's random state and returns the
advanced state along with its result, so randomness never lives in a
global.
"""

from .lambertian import fallback_to_normal, scatter_lambertian
from .material import (
    MaterialType,
    parse_material_type,
    validate_albedo,
    validate_fuzz,
)
from .metal import scatter_metal
from .scatter import scatter

__all__ = [
    "MaterialType",
    "parse_material_type",
    "validate_albedo",
    "validate_fuzz",
    "fallback_to_normal",
    "scatter_lambertian",
    "scatter_metal",
    "scatter",
]
