"""Frame renderer wrapping the integrator's render target.

This module provides a convenient wrapper around the core integrator that
supports:
- Validated render settings (size, samples per pixel, bounce limit)
- Single frames at a chosen time value
- Frame sequences, one independent frame per time value, with a progress
  callback or as a generator the caller can stop at any frame boundary
- NumPy, uint8 and PNG output

Frames never accumulate into each other: every call to render() overwrites
the buffer. The time value only perturbs the random stream, so a sequence of
frames of the static scene shows fresh noise in every frame.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from minipath.core.renderer import FrameRenderer, RenderSettings
    >>> from minipath.scene.description import create_default_scene
    >>>
    >>> renderer = FrameRenderer(RenderSettings(width=400, height=200))
    >>> renderer.load_scene(create_default_scene())
    >>> image = renderer.render(time=0.0)
"""

import logging
import time as _time
from collections.abc import Callable, Generator, Iterable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from minipath.camera.pinhole import Camera, make_camera, setup_camera
from minipath.core.integrator import (
    MAX_DEPTH,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    SAMPLES_PER_PIXEL,
    get_image_numpy,
    render_frame,
    render_pixel,
    setup_render_target,
)
from minipath.scene.description import Scene, create_default_scene
from minipath.scene.intersection import load_scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (frames_done, total_frames)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for a render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of bounces per sample.
    """

    width: int = 400
    height: int = 225
    samples_per_pixel: int = SAMPLES_PER_PIXEL
    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    @property
    def resolution(self) -> tuple[int, int]:
        """The output size as (width, height)."""
        return (self.width, self.height)

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


class FrameRenderer:
    """Renders independent frames of a loaded scene.

    Owns the render target size and the camera that goes with it, and
    delegates the pixel work to the global integrator buffers (which are
    Taichi fields).

    Attributes:
        settings: The active render settings.
        camera: The camera built for the settings' resolution.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        """Initialize the renderer.

        Sets up the render target and camera for the settings' resolution.
        Call load_scene() before rendering.

        Args:
            settings: Render settings. Defaults to RenderSettings().
        """
        self._settings = settings if settings is not None else RenderSettings()
        self._camera = make_camera(self._settings.resolution)
        self._scene: Scene | None = None
        self._last_time: float | None = None
        self._apply_settings()

    def _apply_settings(self) -> None:
        setup_render_target(self._settings.width, self._settings.height)
        setup_camera(self._camera)

    @property
    def settings(self) -> RenderSettings:
        """Get the render settings."""
        return self._settings

    @property
    def camera(self) -> Camera:
        """Get the camera."""
        return self._camera

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._settings.height

    @property
    def scene(self) -> Scene | None:
        """Get the loaded scene, or None if none has been loaded."""
        return self._scene

    @property
    def last_time(self) -> float | None:
        """Time value of the most recently rendered frame."""
        return self._last_time

    def load_scene(self, scene: Scene | None = None) -> None:
        """Upload a scene for rendering.

        Args:
            scene: The scene to render. Defaults to the four-sphere scene.

        Raises:
            RuntimeError: If the scene has too many spheres.
        """
        if scene is None:
            scene = create_default_scene()
        load_scene(scene)
        self._scene = scene

    def resize(self, width: int, height: int) -> None:
        """Change the output size, rebuilding the render target and camera.

        Raises:
            ValueError: If the new dimensions are invalid.
        """
        self._settings = RenderSettings(
            width=width,
            height=height,
            samples_per_pixel=self._settings.samples_per_pixel,
            max_depth=self._settings.max_depth,
        )
        self._camera = make_camera(self._settings.resolution)
        self._apply_settings()

    def _check_scene_loaded(self) -> None:
        if self._scene is None:
            raise RuntimeError("No scene loaded. Call load_scene() first.")

    def render(self, time: float = 0.0) -> npt.NDArray[np.float32]:
        """Render one frame.

        Args:
            time: Frame time in seconds, used only to perturb the random stream.

        Returns:
            NumPy array of shape (height, width, 3), gamma corrected, in [0, 1].

        Raises:
            RuntimeError: If no scene has been loaded.
        """
        self._check_scene_loaded()

        start = _time.perf_counter()
        render_frame(
            time=time,
            samples_per_pixel=self._settings.samples_per_pixel,
            max_depth=self._settings.max_depth,
        )
        image = get_image_numpy()
        self._last_time = time

        logger.debug(
            "Rendered %dx%d frame at t=%.3f in %.3fs",
            self.width,
            self.height,
            time,
            _time.perf_counter() - start,
        )
        return image

    def render_pixel(self, pixel_i: int, pixel_j: int, time: float = 0.0) -> tuple[float, float, float]:
        """Render one pixel with the current settings.

        Args:
            pixel_i: Pixel x-coordinate (0 = left).
            pixel_j: Pixel y-coordinate (0 = bottom row).
            time: Frame time in seconds.

        Returns:
            Tuple of (R, G, B) after gamma correction.
        """
        self._check_scene_loaded()
        return render_pixel(
            pixel_i,
            pixel_j,
            time=time,
            samples_per_pixel=self._settings.samples_per_pixel,
            max_depth=self._settings.max_depth,
        )

    def render_frames(
        self,
        times: Iterable[float],
    ) -> Generator[tuple[float, npt.NDArray[np.float32]], None, None]:
        """Render one independent frame per time value, yielding each one.

        Stopping iteration abandons the remaining frames; a frame in progress
        always completes first.

        Args:
            times: Time values of the frames, in render order.

        Yields:
            Tuple of (time, image) for each frame.

        Example:
            >>> for t, image in renderer.render_frames([0.0, 0.1, 0.2]):
            ...     save_png_from_array(image, f"frame_{t:.1f}.png")
        """
        for t in times:
            yield t, self.render(time=t)

    def render_sequence(
        self,
        times: Iterable[float],
        callback: ProgressCallback | None = None,
    ) -> list[npt.NDArray[np.float32]]:
        """Render a list of frames with an optional progress callback.

        Args:
            times: Time values of the frames, in render order.
            callback: Called after each frame with (frames_done, total_frames).

        Returns:
            The rendered frames in order.
        """
        times = list(times)
        frames = []
        for index, (_, image) in enumerate(self.render_frames(times), start=1):
            frames.append(image)
            if callback is not None:
                callback(index, len(times))
        return frames

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the most recently rendered frame as a NumPy array."""
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the most recently rendered frame as an 8-bit array.

        The buffer is already gamma corrected, so no further correction is
        applied.
        """
        from minipath.preview.export import image_to_uint8

        return image_to_uint8(self.get_image_numpy())

    def save_image(self, filepath: str) -> None:
        """Save the most recently rendered frame as a PNG file."""
        from minipath.preview.export import save_png_from_array

        save_png_from_array(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"samples_per_pixel={self._settings.samples_per_pixel}, "
            f"max_depth={self._settings.max_depth})"
        )
