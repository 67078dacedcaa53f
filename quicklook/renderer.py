"""Spectrogram renderer.

Composes the pipeline for one capture file:
file -> format + metadata -> per column: decode, window, FFT, dB,
palette index -> pixels. Once every column is done the histograms,
legend, axes and title are drawn around the plot body.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import numpy as np

from config import (
    DECORATIONS_MIN_WIDTH,
    DEFAULT_DB_GAIN,
    DEFAULT_DECI_HEIGHT,
    DEFAULT_HISTO_WIDTH,
    DEFAULT_WINDOW,
)

from .axes import db_ticks, freq_ticks, time_ticks, title_text
from .canvas import Canvas
from .colorize import Colorizer, Histograms
from .constants import (
    BOX_GRAY,
    COLOR_MAX,
    DB_LABEL_OFFSET,
    DB_MARKER_SPACING,
    FREQ_MINOR_TICK_SPACING,
    FREQ_TICK_MIN_SPACING,
    HISTOGRAM_OFFSET,
    LABEL_GRAY,
    MINOR_TICK_GRAY,
    RAMP_OFFSET,
    RAMP_WIDTH,
    TICK_GRAY,
    TIME_MARKER_SPACING,
    TITLE_GRAY,
)
from .decoder import SampleBuffer, column_stride, decode_column
from .errors import GeometryError
from .font import GLYPH_ADVANCE, GLYPH_HEIGHT, text_width
from .formats import SampleFormat, detect_sample_format
from .logging import render_logger as logger
from .metadata import CaptureInfo, parse_freq_rate
from .palettes import DEFAULT_COLORMAP, Colormap, get_colormap
from .spectrum import SpectralAnalyzer
from .windows import WindowKind, make_window


# Histogram bars fade in over their last few pixels
_BAR_FADE = 10
_BAR_BASE = 63

_RED = 0
_GREEN = 1


@dataclass
class RenderOptions:
    """Appearance and sample-selection knobs for one render."""
    window: WindowKind | str = DEFAULT_WINDOW
    gain: float = DEFAULT_DB_GAIN
    db_range: float | None = None          # None: pick from the sample format
    colormap: Colormap | int | str = DEFAULT_COLORMAP
    decorations: bool | None = None        # None: on for wide plots
    decimation: int = 1
    origin: int = 0                        # First sample shown
    zoom: int = 1                          # Visible span = remaining samples / zoom
    strips: int = 1                        # Stacked strips splitting the span
    histo_width: int = DEFAULT_HISTO_WIDTH
    deci_height: int = DEFAULT_DECI_HEIGHT


@dataclass(frozen=True)
class PlotGeometry:
    """Placement of one plot body (a strip) on the canvas.

    height is also the FFT size: one display row per frequency bin.
    """
    width: int
    height: int
    top: int
    left: int
    histo_width: int = DEFAULT_HISTO_WIDTH
    deci_height: int = DEFAULT_DECI_HEIGHT

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def ramp_left(self) -> int:
        return self.right + RAMP_OFFSET

    @property
    def db_label_left(self) -> int:
        return self.right + DB_LABEL_OFFSET

    @property
    def histogram_left(self) -> int:
        return self.right + HISTOGRAM_OFFSET

    @property
    def gauge_top(self) -> int:
        return self.bottom + GLYPH_HEIGHT + 2

    def validate(self) -> None:
        if self.width < 2:
            raise GeometryError(f"Plot width must be at least 2, got {self.width}")
        if self.height < 2:
            raise GeometryError(f"FFT size must be at least 2, got {self.height}")

    @staticmethod
    def margins(decorations: bool, histo_width: int = DEFAULT_HISTO_WIDTH,
                deci_height: int = DEFAULT_DECI_HEIGHT) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) space around a strip for decorations."""
        if not decorations:
            return 0, 0, 0, 0
        left = 8 * GLYPH_ADVANCE + 6
        top = GLYPH_HEIGHT + 4
        right = HISTOGRAM_OFFSET + histo_width + 1
        bottom = GLYPH_HEIGHT + 2 + deci_height + 2
        return left, top, right, bottom

    @classmethod
    def for_layout(cls, layout_width: int, layout_height: int, decorations: bool,
                   strips: int = 1, histo_width: int = DEFAULT_HISTO_WIDTH,
                   deci_height: int = DEFAULT_DECI_HEIGHT) -> list[PlotGeometry]:
        """Split a full image into strip geometries, top to bottom."""
        left, top, right, bottom = cls.margins(decorations, histo_width, deci_height)
        strips = max(1, strips)
        width = layout_width - left - right
        height = (layout_height - top) // strips - bottom
        pitch = height + bottom
        return [cls(width, height, top + s * pitch, left, histo_width, deci_height)
                for s in range(strips)]

    @classmethod
    def layout_size(cls, width: int, fft_size: int, decorations: bool, strips: int = 1,
                    histo_width: int = DEFAULT_HISTO_WIDTH,
                    deci_height: int = DEFAULT_DECI_HEIGHT) -> tuple[int, int]:
        """Full image size needed for a plot body of width x fft_size."""
        left, top, right, bottom = cls.margins(decorations, histo_width, deci_height)
        return (left + width + right,
                top + max(1, strips) * (fft_size + bottom))


@dataclass
class RenderResult:
    """Summary of a finished render."""
    sample_format: SampleFormat
    capture: CaptureInfo
    samples: int
    fft_size: int
    width: int
    stride: float
    db_range: float
    gain: float
    db_min: float
    db_max: float
    histograms: Histograms = field(repr=False)

    def to_dict(self) -> dict:
        return {
            'sample_format': self.sample_format.value,
            'center_freq': self.capture.center_freq,
            'sample_rate': self.capture.sample_rate,
            'samples': self.samples,
            'fft_size': self.fft_size,
            'width': self.width,
            'stride': round(self.stride, 3),
            'db_range': self.db_range,
            'gain': self.gain,
            'db_min': round(self.db_min, 1),
            'db_max': round(self.db_max, 1),
            'histograms': self.histograms.to_dict(),
        }


class SpectrogramRenderer:
    """Render one capture file onto a canvas.

    Usage::

        renderer = SpectrogramRenderer(path, RenderOptions())
        result = renderer.render(canvas, PlotGeometry(800, 256, 12, 54))

    Each render maps the file, allocates its own FFT scratch space and
    histograms, and releases the mapping before returning.
    """

    def __init__(self, path: str | os.PathLike, options: RenderOptions | None = None):
        self.path = os.fspath(path)
        self.options = options or RenderOptions()
        self.sample_format = detect_sample_format(self.path)
        self.capture = parse_freq_rate(self.path)
        self.window_kind = (self.options.window
                            if isinstance(self.options.window, WindowKind)
                            else WindowKind.from_name(self.options.window))
        self.colormap = get_colormap(self.options.colormap)
        self.db_range = (self.options.db_range if self.options.db_range
                         else self.sample_format.db_range)
        logger.debug(f"{self.path}: format = {self.sample_format.value}, "
                     f"center = {self.capture.center_freq}, rate = {self.capture.sample_rate}")

    def render(self, canvas: Canvas, geometry: PlotGeometry | list[PlotGeometry],
               decorations: bool | None = None) -> RenderResult:
        """Draw the spectrogram and, if enabled, its decorations.

        Args:
            canvas: Target canvas.
            geometry: One plot body, or one per strip (all the same size).
            decorations: Overrides options.decorations; None means on when
                the plot is wider than DECORATIONS_MIN_WIDTH.

        Raises:
            SampleFileError: The file could not be opened or mapped.
            GeometryError: The plot is too small or the capture too short.
            SampleRangeError: A column would read outside the file.
        """
        strips = geometry if isinstance(geometry, list) else [geometry]
        first = strips[0]
        for g in strips:
            g.validate()
        if decorations is None:
            decorations = self.options.decorations
        if decorations is None:
            decorations = first.width > DECORATIONS_MIN_WIDTH

        fft_size = first.height
        window = make_window(self.window_kind, fft_size)
        analyzer = SpectralAnalyzer(window, self.options.gain)
        colorizer = Colorizer(self.db_range, self.options.gain)

        with SampleBuffer.open(self.path, self.sample_format) as buf:
            start, span = self._visible_span(buf.samples)
            strip_span = span // len(strips)
            if strip_span < fft_size:
                raise GeometryError(
                    f"{strip_span} samples per strip is less than the FFT size {fft_size}")
            stride = column_stride(strip_span, fft_size, first.width)
            logger.debug(f"samples = {buf.samples}, span = {span}, stride = {stride:f}")

            for index, g in enumerate(strips):
                self._draw_body(canvas, g, buf, start + index * strip_span, stride,
                                analyzer, colorizer, decorations)
            samples = buf.samples

        histograms = colorizer.histograms
        logger.debug(f"range {analyzer.db_min:f} to {analyzer.db_max:f}, "
                     f"db_hist mean = {histograms.db_mean:f}")

        if decorations:
            rate = self.capture.sample_rate
            self.draw_color_histogram(canvas, first, histograms)
            self.draw_db_histogram(canvas, first, histograms)
            for index, g in enumerate(strips):
                self.draw_box(canvas, g)
                self.draw_ramp(canvas, g)
                self.draw_db_labels(canvas, g)
                self.draw_freq_axis(canvas, g)
                self.draw_time_axis(canvas, g, strip_span / rate,
                                    (start + index * strip_span) / rate)
            self.draw_title(canvas, first)

        result = RenderResult(
            sample_format=self.sample_format,
            capture=self.capture,
            samples=samples,
            fft_size=fft_size,
            width=first.width,
            stride=stride,
            db_range=self.db_range,
            gain=self.options.gain,
            db_min=analyzer.db_min,
            db_max=analyzer.db_max,
            histograms=histograms,
        )
        logger.debug(f"Render summary: {result.to_dict()}")
        return result

    def _visible_span(self, samples: int) -> tuple[int, int]:
        """First sample and number of samples selected by origin and zoom."""
        origin = self.options.origin
        zoom = max(1, self.options.zoom)
        if not 0 <= origin < samples:
            raise GeometryError(f"Origin {origin} outside capture of {samples} samples")
        return origin, (samples - origin) // zoom

    def _draw_body(self, canvas: Canvas, g: PlotGeometry, buf: SampleBuffer,
                   first_sample: int, stride: float, analyzer: SpectralAnalyzer,
                   colorizer: Colorizer, decorations: bool) -> None:
        palette = self.colormap.table
        window = analyzer.window
        dtype = np.complex128 if self.sample_format == SampleFormat.CF64 else np.complex64
        scratch = np.empty(len(window), dtype=dtype)

        for x in range(g.width):
            column = decode_column(buf, first_sample + int(x * stride), window, out=scratch)
            db = analyzer.analyze(column)
            indices = colorizer.colorize(db)
            canvas.put_column(g.left + x, g.top, palette[indices])

            if decorations:
                self._draw_gauge(canvas, g, x, analyzer.column_min, analyzer.column_max)

    def _draw_gauge(self, canvas: Canvas, g: PlotGeometry, x: int,
                    db_min: float, db_max: float) -> None:
        """Amplitude gauge: one bar per column spanning its dB range."""
        def level(db: float) -> int:
            return int(np.clip((self.db_range + db) * 256 / self.db_range, 0, 255))

        lo = level(db_min) * g.deci_height // 256
        hi_level = level(db_max)
        hi = hi_level * g.deci_height // 256
        canvas.fill_rect(g.left + x, g.gauge_top + lo, 1, hi - lo, hi_level)

    def draw_color_histogram(self, canvas: Canvas, g: PlotGeometry,
                             histograms: Histograms) -> None:
        """Red bars, one per row, quietest palette index at the bottom."""
        self._draw_histogram(canvas, g, histograms.color, _RED, flip=True)

    def draw_db_histogram(self, canvas: Canvas, g: PlotGeometry,
                          histograms: Histograms) -> None:
        """Green bars, one per row, loudest 0.1 dB bucket at the top."""
        self._draw_histogram(canvas, g, histograms.db, _GREEN, flip=False)

    def _draw_histogram(self, canvas: Canvas, g: PlotGeometry, counts: np.ndarray,
                        channel: int, flip: bool) -> None:
        peak = int(counts.max())
        if peak == 0:
            return
        last = len(counts) - 1
        for y in range(g.height):
            bucket = y * last // (g.height - 1)
            bar = int(g.histo_width * counts[bucket] / peak)
            row = g.top + (g.height - y if flip else y)
            for x in range(bar):
                shade = 55 + 20 * (_BAR_FADE - bar + x) if x > bar - _BAR_FADE else _BAR_BASE
                canvas.tint(g.histogram_left + x, row, channel, shade)

    def draw_box(self, canvas: Canvas, g: PlotGeometry) -> None:
        canvas.fill_rect(g.left - 1, g.top - 1, g.width + 2, 1, BOX_GRAY)
        canvas.fill_rect(g.left - 1, g.bottom, g.width + 2, 1, BOX_GRAY)
        canvas.fill_rect(g.left - 1, g.top - 1, 1, g.height + 2, BOX_GRAY)
        canvas.fill_rect(g.right, g.top - 1, 1, g.height + 2, BOX_GRAY)

    def draw_ramp(self, canvas: Canvas, g: PlotGeometry) -> None:
        """Palette legend, brightest at the top."""
        indices = COLOR_MAX - np.arange(g.height) * COLOR_MAX // (g.height - 1)
        colors = self.colormap.table[indices]
        for x in range(g.ramp_left, g.ramp_left + RAMP_WIDTH):
            canvas.put_column(x, g.top, colors)

    def draw_db_labels(self, canvas: Canvas, g: PlotGeometry) -> None:
        for tick in db_ticks(g.height, self.options.gain, self.db_range, DB_MARKER_SPACING):
            y = g.top + tick.pos
            if tick.pos == 0:
                y += GLYPH_HEIGHT // 2      # Push the first label down
            elif tick.end:
                y -= GLYPH_HEIGHT             # Pull the last label up
            else:
                y -= GLYPH_HEIGHT // 2
            canvas.draw_text(g.db_label_left, y, tick.label, LABEL_GRAY)

    def draw_freq_axis(self, canvas: Canvas, g: PlotGeometry) -> None:
        axis = freq_ticks(g.height, self.capture.sample_rate, self.capture.center_freq,
                          FREQ_TICK_MIN_SPACING, FREQ_MINOR_TICK_SPACING)
        canvas.draw_text(16, g.top - 4, axis.title, TITLE_GRAY)
        for pos in axis.minor:
            canvas.fill_rect(g.left - 3, g.top + pos, 3, 1, MINOR_TICK_GRAY)
        for tick in axis.ticks:
            y = g.top + tick.pos
            canvas.fill_rect(g.left - 4, y, 4, 1, TICK_GRAY)
            canvas.draw_text(0, y - GLYPH_HEIGHT // 2, tick.label, LABEL_GRAY)

    def draw_time_axis(self, canvas: Canvas, g: PlotGeometry, total_time: float,
                       start_time: float = 0.0) -> None:
        axis = time_ticks(g.width, total_time, TIME_MARKER_SPACING, start_time)
        canvas.draw_text(16, g.bottom + 1, axis.title, TITLE_GRAY)
        for tick in axis.ticks:
            x = g.left + tick.pos
            if not tick.major:
                canvas.fill_rect(x, g.bottom, 1, 4, MINOR_TICK_GRAY)
                continue
            canvas.fill_rect(x, g.bottom, 1, 6, TICK_GRAY)
            text_x = x - text_width(tick.label) if tick.end else x + 3
            canvas.draw_text(text_x, g.bottom + 2, tick.label, LABEL_GRAY)

    def draw_title(self, canvas: Canvas, g: PlotGeometry) -> None:
        text = title_text(self.capture.center_freq, self.capture.sample_rate,
                          self.db_range, self.options.gain, self.options.decimation,
                          g.height)
        canvas.draw_text(g.left + (g.width - text_width(text)) // 2, 1, text, TITLE_GRAY)


def render_spectrogram(path: str | os.PathLike, canvas: Canvas, width: int, height: int,
                       top: int = 0, left: int = 0,
                       options: RenderOptions | None = None) -> RenderResult:
    """Render a capture with its plot body at (left, top).

    The plot body is width columns by height rows; height is the FFT
    size. Decorations are placed around the body and clipped to the
    canvas.
    """
    options = options or RenderOptions()
    geometry = PlotGeometry(width, height, top, left,
                            options.histo_width, options.deci_height)
    renderer = SpectrogramRenderer(path, options)
    return renderer.render(canvas, geometry)

