"""Matplotlib-based preview display for rendered frames.

Frames are shown as they come out of the integrator: gamma corrected and
clamped, so no tone mapping is involved.

Example:
    >>> from minipath.preview.display import show_preview
    >>> image = renderer.render(time=0.0)
    >>> show_preview(image, title="t = 0.0")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def clamp_image(image: npt.NDArray[np.floating[npt.NBitBase]]) -> npt.NDArray[np.float32]:
    """Clamp an image to [0, 1] as float32, replacing NaNs with black.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        A new float32 array in [0, 1].
    """
    result = np.nan_to_num(image.astype(np.float32), nan=0.0, posinf=1.0, neginf=0.0)
    return np.clip(result, 0.0, 1.0)


def show_preview(
    image: npt.NDArray[np.floating[npt.NBitBase]],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display a rendered frame as a Matplotlib figure.

    Args:
        image: Frame of shape (H, W, 3), row 0 at the top.
        title: Custom title (default shows the frame size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = clamp_image(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 4),
    block: bool = True,
) -> float:
    """Display two frames side by side with an amplified difference view.

    Handy for looking at how the noise of two frame times differs.

    Args:
        image_a: First frame (H, W, 3).
        image_b: Second frame (H, W, 3).
        labels: Labels for the two frames.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two frames.

    Raises:
        ValueError: If the frame shapes don't match.
    """
    import matplotlib.pyplot as plt

    from minipath.preview.export import compute_rmse

    display_a = clamp_image(image_a)
    display_b = clamp_image(image_b)
    rmse = compute_rmse(display_a, display_b)

    diff_amplified = np.clip(np.abs(display_a - display_b) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
