"""Image export utilities for rendered frames.

Rendered frames come out of the integrator already gamma corrected and in
[0, 1], so export is a clamp, a quantization to 8 bits and a Pillow write.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from minipath.preview.export import save_png
    >>> from minipath.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer()
    >>> renderer.load_scene()
    >>> renderer.render(time=0.0)
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from minipath.core.renderer import FrameRenderer

logger = logging.getLogger(__name__)


def _check_image_shape(image: npt.NDArray[np.floating[npt.NBitBase]]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def image_to_uint8(image: npt.NDArray[np.floating[npt.NBitBase]]) -> npt.NDArray[np.uint8]:
    """Convert a display-ready float image to uint8.

    Values are clamped to [0, 1] and rounded to the nearest 8-bit level. No
    gamma is applied; the integrator has already encoded the frame.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the image is not of shape (H, W, 3).
    """
    _check_image_shape(image)
    clamped = np.clip(image.astype(np.float64), 0.0, 1.0)
    return np.round(clamped * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating[npt.NBitBase]],
    filepath: str | Path,
) -> None:
    """Save a float image array as an 8-bit RGB PNG file.

    Args:
        image: Image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the image is not of shape (H, W, 3).
    """
    pil_image = PILImage.fromarray(image_to_uint8(image), mode="RGB")
    pil_image.save(filepath)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def save_png(renderer: FrameRenderer, filepath: str | Path) -> None:
    """Save the renderer's most recent frame as a PNG file.

    Args:
        renderer: The FrameRenderer whose buffer should be written.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_image_numpy(), filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
