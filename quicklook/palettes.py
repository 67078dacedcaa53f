"""Colormaps: 256 RGB entries, index 0 is the quietest level."""

from __future__ import annotations

import enum

import numpy as np

from .constants import COLOR_MAX

# Control points of the cube1 perceptual rainbow (position, R, G, B)
_CUBE1_POINTS = (
    (0.000, 120, 0, 133),
    (0.125, 83, 38, 235),
    (0.250, 42, 116, 250),
    (0.375, 32, 175, 203),
    (0.500, 46, 210, 136),
    (0.625, 80, 232, 60),
    (0.750, 169, 236, 47),
    (0.875, 233, 205, 52),
    (1.000, 249, 150, 32),
)


class Colormap(enum.Enum):
    """Selectable palettes, identified by their table position."""
    CUBE1 = 'cube1'
    CUBEHELIX = 'cubehelix'
    GRAY = 'gray'

    @classmethod
    def from_id(cls, ident: int) -> Colormap:
        kinds = list(cls)
        if not 0 <= ident < len(kinds):
            raise ValueError(f"Unknown colormap id: {ident}")
        return kinds[ident]

    @property
    def ident(self) -> int:
        return list(Colormap).index(self)

    @property
    def table(self) -> np.ndarray:
        return _TABLES[self]


def _freeze(rgb: np.ndarray) -> np.ndarray:
    table = np.clip(np.round(rgb), 0, 255).astype(np.uint8)
    table.setflags(write=False)
    return table


def _cube1() -> np.ndarray:
    points = np.array(_CUBE1_POINTS, dtype=np.float64)
    pos = np.linspace(0.0, 1.0, COLOR_MAX + 1)
    return _freeze(np.stack(
        [np.interp(pos, points[:, 0], points[:, ch]) for ch in (1, 2, 3)], axis=1))


def _cubehelix(start: float = 0.5, rotations: float = -1.5,
               hue: float = 1.0, gamma: float = 1.0) -> np.ndarray:
    """D. A. Green's cubehelix scheme (monotonic in perceived brightness)."""
    lam = np.linspace(0.0, 1.0, COLOR_MAX + 1) ** gamma
    angle = 2.0 * np.pi * (start / 3.0 + 1.0 + rotations * lam)
    amp = hue * lam * (1.0 - lam) / 2.0
    cos, sin = np.cos(angle), np.sin(angle)
    rgb = np.stack([
        lam + amp * (-0.14861 * cos + 1.78277 * sin),
        lam + amp * (-0.29227 * cos - 0.90649 * sin),
        lam + amp * (1.97294 * cos),
    ], axis=1)
    return _freeze(np.clip(rgb, 0.0, 1.0) * 255.0)


def _gray() -> np.ndarray:
    ramp = np.arange(COLOR_MAX + 1, dtype=np.float64) * 255.0 / COLOR_MAX
    return _freeze(np.stack([ramp, ramp, ramp], axis=1))


_TABLES = {
    Colormap.CUBE1: _cube1(),
    Colormap.CUBEHELIX: _cubehelix(),
    Colormap.GRAY: _gray(),
}

DEFAULT_COLORMAP = Colormap.CUBE1


def get_colormap(cmap: Colormap | int | str) -> Colormap:
    """Resolve a colormap from its enum, id or name."""
    if isinstance(cmap, Colormap):
        return cmap
    if isinstance(cmap, str):
        return Colormap(cmap.lower())
    return Colormap.from_id(int(cmap))
