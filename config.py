"""Configuration settings for the quicklook spectrogram renderer."""

from __future__ import annotations

import logging
import os

# Application version
VERSION = "1.3.0"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with default."""
    return os.environ.get(f'QUICKLOOK_{key}', default)


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer with default."""
    try:
        return int(os.environ.get(f'QUICKLOOK_{key}', str(default)))
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float with default."""
    try:
        return float(os.environ.get(f'QUICKLOOK_{key}', str(default)))
    except ValueError:
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean with default."""
    val = os.environ.get(f'QUICKLOOK_{key}', '').lower()
    if val in ('true', '1', 'yes', 'on'):
        return True
    if val in ('false', '0', 'no', 'off'):
        return False
    return default


# Logging configuration
_log_level_str = _get_env('LOG_LEVEL', 'WARNING').upper()
LOG_LEVEL = getattr(logging, _log_level_str, logging.WARNING)
LOG_FORMAT = _get_env('LOG_FORMAT', '%(asctime)s - %(levelname)s - %(message)s')

# Rendering defaults
DEFAULT_WINDOW = _get_env('WINDOW', 'blackman-harris')
DEFAULT_DB_GAIN = _get_env_float('DB_GAIN', 6.0)
DEFAULT_SAMPLE_RATE = _get_env_int('SAMPLE_RATE', 250000)
DEFAULT_FFT_SIZE = _get_env_int('FFT_SIZE', 512)
DEFAULT_CMAP = _get_env_int('CMAP', 0)
DEFAULT_DARK_THEME = _get_env_bool('DARK_THEME', True)

# Decorations (axes, legend, histograms) appear above this layout width
DECORATIONS_MIN_WIDTH = _get_env_int('DECORATIONS_MIN_WIDTH', 256)

# Decoration sizes in pixels
DEFAULT_HISTO_WIDTH = _get_env_int('HISTO_WIDTH', 100)
DEFAULT_DECI_HEIGHT = _get_env_int('DECI_HEIGHT', 16)

