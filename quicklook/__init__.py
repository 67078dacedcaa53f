"""Quick-look spectrogram renderer for raw I/Q sample files."""

from config import VERSION

from .canvas import Canvas
from .errors import (
    GeometryError,
    SampleFileError,
    SampleRangeError,
    SpectrogramError,
    UnknownWindowError,
)
from .formats import SampleFormat, detect_sample_format
from .metadata import CaptureInfo, parse_freq_rate
from .palettes import Colormap
from .plot import LayoutDirection, SpectrogramPlot
from .renderer import (
    PlotGeometry,
    RenderOptions,
    RenderResult,
    SpectrogramRenderer,
    render_spectrogram,
)
from .windows import WindowKind, make_window

__version__ = VERSION

__all__ = [
    'Canvas',
    'CaptureInfo',
    'Colormap',
    'GeometryError',
    'LayoutDirection',
    'PlotGeometry',
    'RenderOptions',
    'RenderResult',
    'SampleFileError',
    'SampleFormat',
    'SampleRangeError',
    'SpectrogramError',
    'SpectrogramPlot',
    'SpectrogramRenderer',
    'UnknownWindowError',
    'WindowKind',
    'detect_sample_format',
    'make_window',
    'parse_freq_rate',
    'render_spectrogram',
]
