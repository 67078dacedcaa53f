"""FFT window functions.

All windows are symmetric (denominator N-1) and computed in single
precision so repeated renders produce identical pixels.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np

from .errors import UnknownWindowError


class WindowKind(enum.Enum):
    """Supported taper shapes."""
    RECTANGULAR = 'rectangular'
    BARTLETT = 'bartlett'
    HAMMING = 'hamming'
    HANN = 'hann'
    BLACKMAN = 'blackman'
    BLACKMAN_HARRIS = 'blackman-harris'

    @classmethod
    def from_name(cls, name: str) -> WindowKind:
        """Look up a window by name, ignoring case."""
        key = (name or '').strip().lower()
        for kind in cls:
            if kind.value == key:
                return kind
        raise UnknownWindowError(f"Unknown FFT window: {name!r}")

    @classmethod
    def from_id(cls, ident: int) -> WindowKind:
        """Look up a window by its position in the table."""
        kinds = list(cls)
        if not 0 <= ident < len(kinds):
            raise UnknownWindowError(f"Unknown FFT window id: {ident}")
        return kinds[ident]

    @property
    def ident(self) -> int:
        return list(WindowKind).index(self)


@dataclass(frozen=True)
class Window:
    """Window coefficients and their sum (used for block normalization)."""
    kind: WindowKind
    values: np.ndarray
    total: float

    def __len__(self) -> int:
        return len(self.values)


def _cosine_sum(n: int, coeffs: tuple[float, ...]) -> np.ndarray:
    """Generalized cosine window: a0 - a1 cos(x) + a2 cos(2x) - ..."""
    phase = np.float32(2.0 * np.pi) * np.arange(n, dtype=np.float32) / np.float32(n - 1)
    out = np.zeros(n, dtype=np.float32)
    sign = 1.0
    for order, coeff in enumerate(coeffs):
        out += np.float32(sign * coeff) * np.cos(np.float32(order) * phase)
        sign = -sign
    return out


def rectangular_window(n: int) -> np.ndarray:
    return np.ones(n, dtype=np.float32)


def bartlett_window(n: int) -> np.ndarray:
    half = np.float32(0.5 * (n - 1))
    i = np.arange(n, dtype=np.float32)
    return np.float32(1.0) - np.abs((i - half) / half)


def hamming_window(n: int) -> np.ndarray:
    return _cosine_sum(n, (0.54, 0.46))


def hann_window(n: int) -> np.ndarray:
    return _cosine_sum(n, (0.5, 0.5))


def blackman_window(n: int) -> np.ndarray:
    return _cosine_sum(n, (0.42, 0.5, 0.08))


def blackman_harris_window(n: int) -> np.ndarray:
    return _cosine_sum(n, (0.35875, 0.48829, 0.14128, 0.01168))


_GENERATORS = {
    WindowKind.RECTANGULAR: rectangular_window,
    WindowKind.BARTLETT: bartlett_window,
    WindowKind.HAMMING: hamming_window,
    WindowKind.HANN: hann_window,
    WindowKind.BLACKMAN: blackman_window,
    WindowKind.BLACKMAN_HARRIS: blackman_harris_window,
}


def make_window(kind: WindowKind | str, n: int) -> Window:
    """Build an n-point window.

    Args:
        kind: Window kind or its (case-insensitive) name.
        n: Number of points, the FFT size. Must be at least 2.

    Returns:
        Read-only Window with float32 coefficients and their sum.

    Raises:
        UnknownWindowError: If the name is not a known window.
        ValueError: If n < 2.
    """
    if not isinstance(kind, WindowKind):
        kind = WindowKind.from_name(kind)
    if n < 2:
        raise ValueError(f"Window length must be at least 2, got {n}")

    values = _GENERATORS[kind](n).astype(np.float32)
    values.setflags(write=False)
    return Window(kind, values, float(values.sum(dtype=np.float32)))
