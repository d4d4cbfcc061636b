"""Live preview window using Taichi GGUI.

Re-renders the scene once per displayed frame with the frame time set to the
wall-clock seconds elapsed since the window opened. The scene never moves;
only the random stream changes, so the window shows the noise pattern
shimmering from frame to frame.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from minipath.core.renderer import FrameRenderer, RenderSettings
    >>> from minipath.preview.interactive import LivePreview
    >>>
    >>> renderer = FrameRenderer(RenderSettings(width=400, height=200))
    >>> renderer.load_scene()
    >>> LivePreview(renderer).run()  # Blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    import numpy.typing as npt

    from minipath.core.renderer import FrameRenderer

logger = logging.getLogger(__name__)


def is_display_available() -> bool:
    """Check if a display is available for GUI rendering.

    Returns:
        True if a display is available, False for headless environments.
    """
    display = os.environ.get("DISPLAY")
    wayland = os.environ.get("WAYLAND_DISPLAY")

    if os.name == "nt":
        return True

    # On macOS, display is always available if not in SSH without forwarding
    if os.uname().sysname == "Darwin":
        return not (os.environ.get("SSH_CONNECTION") and not display)

    return bool(display or wayland)


class LivePreview:
    """Continuously re-rendering preview window.

    The window and its display field are created lazily so the object can be
    built (and its image handling used) without a display.

    Attributes:
        renderer: The FrameRenderer producing frames.
        width: Window width in pixels (the renderer's width).
        height: Window height in pixels (the renderer's height).
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        *,
        title: str = "minipath - Live Preview",
        export_prefix: str = "minipath",
    ) -> None:
        self.renderer = renderer
        self.width = renderer.width
        self.height = renderer.height
        self._title = title
        self._export_prefix = export_prefix

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._display_image: ti.MatrixField | None = None

        self._start_time: float | None = None
        self._frame_time = 0.0
        self._frame_count = 0
        self._paused = False

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    @property
    def display_image(self) -> ti.MatrixField:
        """Field holding the image shown on the canvas, indexed [x, y]."""
        if self._display_image is None:
            self._display_image = ti.Vector.field(
                3, dtype=ti.f32, shape=(self.width, self.height)
            )
        return self._display_image

    @property
    def frame_count(self) -> int:
        """Number of frames rendered since the window opened."""
        return self._frame_count

    @property
    def frame_time(self) -> float:
        """Time value of the frame currently displayed."""
        return self._frame_time

    def to_display_layout(self, image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
        """Convert a (height, width, 3) image to the canvas field's layout.

        Canvas fields are indexed [x, y] with y = 0 at the bottom, so the
        image is flipped vertically and transposed.

        Raises:
            ValueError: If image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(
                f"Image shape {image.shape} doesn't match expected {expected_shape}"
            )
        return np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)), dtype=np.float32
        )

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Copy a rendered frame into the display field.

        Args:
            image: NumPy array of shape (height, width, 3), values in [0, 1].
        """
        self.display_image.from_numpy(self.to_display_layout(image))

    def elapsed(self) -> float:
        """Seconds since the first frame was rendered."""
        if self._start_time is None:
            return 0.0
        return time.perf_counter() - self._start_time

    def render_next_frame(self) -> npt.NDArray[np.float32]:
        """Render one frame at the current elapsed time and display it."""
        if self._start_time is None:
            self._start_time = time.perf_counter()

        self._frame_time = self.elapsed()
        image = self.renderer.render(time=self._frame_time)
        self.update_image(image)
        self._frame_count += 1
        return image

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the display field on the canvas."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Run the render loop until the window is closed.

        Each iteration renders a fresh frame (unless paused), draws the
        control panel and presents the result.
        """
        self._initialize_window()
        logger.info("Live preview started at %dx%d", self.width, self.height)

        while self.is_running():
            if not self._paused or self._frame_count == 0:
                self.render_next_frame()
            self._draw_gui_panel()
            self.show_frame()

        logger.info("Live preview closed after %d frames", self._frame_count)

    def close(self) -> None:
        """Stop the render loop."""
        if self._window is not None:
            self._window.running = False

    def _draw_gui_panel(self) -> None:
        with self.window.GUI.sub_window("Controls", 0.02, 0.02, 0.3, 0.2) as gui:
            gui.text(f"t = {self._frame_time:.2f}s")
            gui.text(f"frames: {self._frame_count}")
            self._paused = gui.checkbox("Pause", self._paused)
            if gui.button("Export PNG"):
                self.export_png()

    def export_png(self, filepath: str | None = None) -> str:
        """Save the displayed frame to a PNG file.

        Args:
            filepath: Output path. Defaults to a timestamped name in the
                working directory.

        Returns:
            The path written.
        """
        from minipath.preview.export import save_png

        if filepath is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filepath = f"{self._export_prefix}_{timestamp}.png"

        save_png(self.renderer, filepath)
        print(f"Exported: {filepath} (t = {self._frame_time:.2f}s)")
        return filepath
