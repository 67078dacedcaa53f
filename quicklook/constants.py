"""Numeric constants shared by the spectrogram pipeline."""

from __future__ import annotations

# Stand-in for -inf on the dBFS scale
DBFS_SILENCE = -99.9

# Linear power below this is treated as silence (10 ** (DBFS_SILENCE / 5))
POWER_CUTOFF = 1e-20

# Number of 0.1 dB histogram buckets spanning 0 to DBFS_SILENCE
DB_HIST_SIZE = int(-10.0 * DBFS_SILENCE + 1)

# Highest palette index
COLOR_MAX = 255

# Default visible dynamic range per sample width (dB)
DB_RANGE_NARROW = 30.0
DB_RANGE_32BIT = 40.0
DB_RANGE_64BIT = 60.0

# Separators recognised between file name tokens
NAME_SEPARATORS = '_- .'

# Decoration layout offsets, relative to the right edge of the plot body
RAMP_OFFSET = 8
RAMP_WIDTH = 16
DB_LABEL_OFFSET = 24
HISTOGRAM_OFFSET = 40

# Axis tick spacing targets (pixels)
FREQ_TICK_MIN_SPACING = 16
FREQ_MINOR_TICK_SPACING = 8
DB_MARKER_SPACING = 50
TIME_MARKER_SPACING = 85

# Gray levels used by decorations
BOX_GRAY = 127
MINOR_TICK_GRAY = 95
TICK_GRAY = 127
LABEL_GRAY = 191
TITLE_GRAY = 255
