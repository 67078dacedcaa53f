"""Per-column power spectrum in dBFS.

Each column is one forward FFT of the windowed samples. Power is scaled
by the window sum (block normalization) and a user gain, clamped to a
silence floor, and reordered so that zero frequency sits on the middle
row with positive frequencies above it.
"""

from __future__ import annotations

import math

import numpy as np

from .constants import DBFS_SILENCE, POWER_CUTOFF
from .errors import GeometryError
from .windows import Window


def bin_to_row(k: int, n: int) -> int:
    """Display row of FFT bin k for an n-point transform."""
    half = n // 2
    return half - k if k <= half else half + n - k


def row_order(n: int) -> np.ndarray:
    """Row index for every FFT bin, vectorized bin_to_row."""
    k = np.arange(n)
    half = n // 2
    return np.where(k <= half, half - k, half + n - k)


def block_norm_db(window_sum: float) -> float:
    """dB offset normalizing power by the window sum."""
    return 10.0 * math.log10(1.0 / window_sum)


def power_to_db(power, norm_db: float = 0.0, gain: float = 0.0) -> np.ndarray:
    """Convert linear power (|X|^2) to dBFS with the silence floor.

    The amplitude scale is 5*log10(power), i.e. 10*log10(|X|). Values
    below POWER_CUTOFF, or that end up under the floor, become exactly
    DBFS_SILENCE. NaN power is silence; overflowed (infinite) power is
    held at the largest finite double so the result stays finite.
    """
    power = np.nan_to_num(np.asarray(power, dtype=np.float64),
                          nan=0.0, posinf=np.finfo(np.float64).max)
    with np.errstate(divide='ignore', invalid='ignore'):
        db = 5.0 * np.log10(power) + norm_db + gain
    silent = (power < POWER_CUTOFF) | ~(db >= DBFS_SILENCE)
    return np.where(silent, DBFS_SILENCE, db)


class SpectralAnalyzer:
    """Windowed FFT of one column at a time.

    Scratch buffers are sized once from the window and reused for every
    column of a render. Not safe to share between concurrent renders.
    """

    def __init__(self, window: Window, gain: float = 6.0):
        if window.total <= 0:
            raise GeometryError(
                f"{window.kind.value} window of length {len(window)} has no energy")
        self.window = window
        self.gain = gain
        self.fft_size = len(window)
        self.norm_db = block_norm_db(window.total)

        self._rows = row_order(self.fft_size)
        self._db = np.empty(self.fft_size, dtype=np.float64)

        # Running range over all columns
        self.db_min = 0.0
        self.db_max = DBFS_SILENCE
        # Range of the most recent column
        self.column_min = 0.0
        self.column_max = DBFS_SILENCE

    def power(self, column: np.ndarray) -> np.ndarray:
        """Linear power |X_k|^2 of each FFT bin, in bin order."""
        with np.errstate(over='ignore', invalid='ignore'):
            spectrum = np.fft.fft(column)
            return spectrum.real * spectrum.real + spectrum.imag * spectrum.imag

    def analyze(self, column: np.ndarray) -> np.ndarray:
        """dBFS value of each display row for one windowed column.

        The returned array is reused by the next call.
        """
        db = power_to_db(self.power(column), self.norm_db, self.gain)
        self._db[self._rows] = db

        self.column_min = min(0.0, float(db.min()))
        self.column_max = max(-200.0, float(db.max()))
        self.db_min = min(self.db_min, self.column_min)
        self.db_max = max(self.db_max, self.column_max)
        return self._db
