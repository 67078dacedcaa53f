"""Spectrogram plot handle for host applications.

SpectrogramPlot is what a preview host (file manager plugin, thumbnailer,
web handler) talks to: create one per file, adjust layout and appearance
through properties, then draw into a pixel buffer the host owns.

Usage::

    plot = SpectrogramPlot.create('g001_433.92M_250k.cu8')
    if plot:
        with plot:
            plot.dark_theme = False
            pixels = np.zeros((480, 800, 4), dtype=np.uint8)
            plot.draw(pixels, 800, 480)
"""

from __future__ import annotations

import enum
import os

import numpy as np
from PIL import Image

from config import (
    DECORATIONS_MIN_WIDTH,
    DEFAULT_CMAP,
    DEFAULT_DARK_THEME,
    DEFAULT_DB_GAIN,
    DEFAULT_DECI_HEIGHT,
    DEFAULT_FFT_SIZE,
    DEFAULT_HISTO_WIDTH,
    DEFAULT_WINDOW,
)

from .canvas import Canvas
from .errors import SpectrogramError
from .formats import detect_sample_format
from .logging import plot_logger as logger
from .palettes import get_colormap
from .renderer import PlotGeometry, RenderOptions, RenderResult, SpectrogramRenderer
from .windows import WindowKind


DEFAULT_PLOT_WIDTH = 800


class LayoutDirection(enum.IntEnum):
    """Direction in which time advances across the image."""
    HORIZONTAL = 0   # Time runs left to right
    VERTICAL = 1     # Time runs top to bottom


class SpectrogramPlot:
    """Spectrogram of one sample file with adjustable layout and appearance.

    The FFT size and the layout height are coupled: the plot body is
    exactly fft_size rows tall, so changing one recomputes the other.
    """

    def __init__(self, path: str | os.PathLike):
        self._path = os.fspath(path)
        self._closed = False

        self._dark_theme = DEFAULT_DARK_THEME
        self._origin = 0
        self._zoom = 1
        self._db_gain = DEFAULT_DB_GAIN
        self._db_range: float | None = None
        self._cmap = get_colormap(DEFAULT_CMAP)
        self._fft_window = WindowKind.from_name(DEFAULT_WINDOW)
        self._direction = LayoutDirection.HORIZONTAL
        self._plot_across = 1
        self._histo_width = DEFAULT_HISTO_WIDTH
        self._deci_height = DEFAULT_DECI_HEIGHT

        self._layout_width = 0
        self._layout_height = 0
        self._set_render_size(*PlotGeometry.layout_size(
            DEFAULT_PLOT_WIDTH, DEFAULT_FFT_SIZE, True, 1, self._histo_width, self._deci_height))

        self.last_result: RenderResult | None = None

    @classmethod
    def create(cls, path: str | os.PathLike | None) -> SpectrogramPlot | None:
        """Open a plot for path, or return None if it is not a readable file."""
        if not path or not os.path.isfile(path):
            logger.warning(f"Not a sample file: {path!r}")
            return None
        return cls(path)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def layout_width(self) -> int:
        return self._layout_width

    @property
    def layout_height(self) -> int:
        return self._layout_height

    def set_layout_size(self, width: int, height: int) -> None:
        """Set the full image size; the FFT size follows from the height."""
        if width < 1 or height < 1:
            raise ValueError(f"Invalid layout size {width}x{height}")
        self._layout_width = width
        self._layout_height = height

    @property
    def layout_direction(self) -> LayoutDirection:
        return self._direction

    @layout_direction.setter
    def layout_direction(self, direction: int) -> None:
        direction = LayoutDirection(direction)
        if direction != self._direction:
            # Keep the plot body: swap the image axes along with the direction
            render_size = self._render_size()
            self._direction = direction
            self._set_render_size(*render_size)

    @property
    def plot_across(self) -> int:
        return self._plot_across

    @plot_across.setter
    def plot_across(self, count: int) -> None:
        if count < 1:
            raise ValueError(f"plot_across must be at least 1, got {count}")
        self._plot_across = int(count)

    @property
    def histo_width(self) -> int:
        return self._histo_width

    @histo_width.setter
    def histo_width(self, width: int) -> None:
        if width < 0:
            raise ValueError(f"histo_width must not be negative, got {width}")
        self._histo_width = int(width)

    @property
    def deci_height(self) -> int:
        return self._deci_height

    @deci_height.setter
    def deci_height(self, height: int) -> None:
        if height < 0:
            raise ValueError(f"deci_height must not be negative, got {height}")
        self._deci_height = int(height)

    @property
    def fft_size(self) -> int:
        return self._geometry()[0].height

    @fft_size.setter
    def fft_size(self, size: int) -> None:
        if size < 2:
            raise ValueError(f"FFT size must be at least 2, got {size}")
        # The layout width is kept, only the height follows the new size
        width = self._render_size()[0]
        _, height = PlotGeometry.layout_size(
            self._geometry()[0].width, int(size), self._decorations(),
            self._plot_across, self._histo_width, self._deci_height)
        self._set_render_size(width, height)

    # ------------------------------------------------------------------
    # Appearance
    # ------------------------------------------------------------------

    @property
    def dark_theme(self) -> bool:
        return self._dark_theme

    @dark_theme.setter
    def dark_theme(self, dark: bool) -> None:
        self._dark_theme = bool(dark)

    @property
    def origin(self) -> int:
        return self._origin

    @origin.setter
    def origin(self, origin: int) -> None:
        if origin < 0:
            raise ValueError(f"origin must not be negative, got {origin}")
        self._origin = int(origin)

    @property
    def zoom(self) -> int:
        return self._zoom

    @zoom.setter
    def zoom(self, zoom: int) -> None:
        if zoom < 1:
            raise ValueError(f"zoom must be at least 1, got {zoom}")
        self._zoom = int(zoom)

    @property
    def db_gain(self) -> float:
        return self._db_gain

    @db_gain.setter
    def db_gain(self, gain: float) -> None:
        self._db_gain = float(gain)

    @property
    def db_range(self) -> float:
        """Visible dynamic range; defaults by sample format until set."""
        if self._db_range is None:
            return detect_sample_format(self._path).db_range
        return self._db_range

    @db_range.setter
    def db_range(self, db_range: float) -> None:
        if db_range <= 0:
            raise ValueError(f"dB range must be positive, got {db_range}")
        self._db_range = float(db_range)

    @property
    def cmap(self) -> int:
        return self._cmap.ident

    @cmap.setter
    def cmap(self, cmap: int | str) -> None:
        self._cmap = get_colormap(cmap)

    @property
    def fft_window(self) -> int:
        return self._fft_window.ident

    @fft_window.setter
    def fft_window(self, window: WindowKind | int | str) -> None:
        if isinstance(window, WindowKind):
            self._fft_window = window
        elif isinstance(window, str):
            self._fft_window = WindowKind.from_name(window)
        else:
            self._fft_window = WindowKind.from_id(int(window))

    @property
    def fft_window_name(self) -> str:
        return self._fft_window.value

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def options(self) -> RenderOptions:
        return RenderOptions(
            window=self._fft_window,
            gain=self._db_gain,
            db_range=self._db_range,
            colormap=self._cmap,
            decorations=self._decorations(),
            origin=self._origin,
            zoom=self._zoom,
            strips=self._plot_across,
            histo_width=self._histo_width,
            deci_height=self._deci_height,
        )

    def render(self) -> Canvas:
        """Render at the current layout size.

        Raises:
            SpectrogramError: If the render fails.
        """
        if self._closed:
            raise SpectrogramError(f"Plot for {self._path} is closed")
        width, height = self._render_size()
        canvas = Canvas(width, height, dark=self._dark_theme)
        renderer = SpectrogramRenderer(self._path, self.options())
        self.last_result = renderer.render(canvas, self._geometry(), self._decorations())
        logger.info(f"Rendered {self._path} at {self._layout_width}x{self._layout_height}, "
                    f"window = {self.fft_window_name}")

        if self._direction == LayoutDirection.VERTICAL:
            rotated = Canvas(self._layout_width, self._layout_height, dark=self._dark_theme)
            rotated.pixels[...] = np.rot90(canvas.pixels, k=-1)
            return rotated
        return canvas

    def render_image(self) -> Image.Image:
        """Render to an in-memory Pillow image."""
        return self.render().to_image()

    def draw(self, pixels, width: int, height: int) -> bool:
        """Render into a caller-owned pixel buffer.

        Args:
            pixels: (height, width, 3) or (height, width, 4) uint8 array
                (RGB / RGBA), or width * height uint32 values receiving
                packed 0xAARRGGBB pixels. Writable buffers of the same
                layouts are accepted too.
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            True if the buffer was filled. On failure a diagnostic is
            logged and the buffer is left untouched.
        """
        try:
            target = _pixel_view(pixels, width, height)
        except ValueError as e:
            logger.error(f"Cannot draw {self._path}: {e}")
            return False

        try:
            self.set_layout_size(width, height)
            canvas = self.render()
        except (SpectrogramError, ValueError) as e:
            logger.error(f"Cannot draw {self._path}: {e}")
            return False

        rgb = canvas.pixels
        if target.dtype == np.uint32:
            packed = (np.uint32(0xFF000000)
                      | rgb[..., 0].astype(np.uint32) << 16
                      | rgb[..., 1].astype(np.uint32) << 8
                      | rgb[..., 2].astype(np.uint32))
            target[...] = packed
        else:
            target[..., :3] = rgb
            if target.shape[2] == 4:
                target[..., 3] = 255
        return True

    def close(self) -> None:
        """Release the plot. Later draws fail."""
        self._closed = True
        self.last_result = None

    def __enter__(self) -> SpectrogramPlot:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _render_size(self) -> tuple[int, int]:
        """Image size before rotation for the layout direction."""
        if self._direction == LayoutDirection.VERTICAL:
            return self._layout_height, self._layout_width
        return self._layout_width, self._layout_height

    def _set_render_size(self, width: int, height: int) -> None:
        if self._direction == LayoutDirection.VERTICAL:
            width, height = height, width
        self.set_layout_size(width, height)

    def _decorations(self) -> bool:
        return self._render_size()[0] > DECORATIONS_MIN_WIDTH

    def _geometry(self) -> list[PlotGeometry]:
        width, height = self._render_size()
        return PlotGeometry.for_layout(width, height, self._decorations(),
                                       self._plot_across, self._histo_width,
                                       self._deci_height)


def _pixel_view(pixels, width: int, height: int) -> np.ndarray:
    """Writable (height, width, 3|4) uint8 or (height, width) uint32 view."""
    if not isinstance(pixels, np.ndarray):
        pixels = np.frombuffer(pixels, dtype=np.uint8)
        if pixels.size == width * height * 4:
            pixels = pixels.reshape(height, width, 4)
        elif pixels.size == width * height * 3:
            pixels = pixels.reshape(height, width, 3)
        else:
            raise ValueError(f"Buffer of {pixels.size} bytes does not fit {width}x{height}")

    if not pixels.flags.writeable:
        raise ValueError("Pixel buffer is read-only")
    if pixels.dtype == np.uint32:
        # A reshape of a strided array would be a copy, not the caller's pixels
        if not pixels.flags.c_contiguous:
            raise ValueError("Packed pixel buffer must be C-contiguous")
        if pixels.size != width * height:
            raise ValueError(f"{pixels.size} pixels do not fit {width}x{height}")
        return pixels.reshape(height, width)
    if pixels.dtype == np.uint8 and pixels.shape in ((height, width, 3), (height, width, 4)):
        return pixels
    raise ValueError(
        f"Unsupported pixel buffer {pixels.shape} {pixels.dtype} for {width}x{height}")
