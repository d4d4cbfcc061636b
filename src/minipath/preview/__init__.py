"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export utilities
    interactive: Taichi GGUI live preview window

Example:
    >>> from minipath.preview import save_png_from_array, show_preview
    >>> image = renderer.render(time=0.0)
    >>> show_preview(image)
    >>> save_png_from_array(image, "output.png")

For the live window:
    >>> from minipath.preview import LivePreview
    >>> LivePreview(renderer).run()
"""

from minipath.preview.display import clamp_image, show_comparison, show_preview
from minipath.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)
from minipath.preview.interactive import LivePreview, is_display_available

__all__ = [
    # Live preview
    "LivePreview",
    "is_display_available",
    # Display functions
    "show_preview",
    "show_comparison",
    "clamp_image",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
