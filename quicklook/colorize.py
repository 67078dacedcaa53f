"""dBFS to palette index mapping with histogram accumulation."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .constants import COLOR_MAX, DB_HIST_SIZE, DBFS_SILENCE


@dataclass
class Histograms:
    """Cell counts per palette index and per 0.1 dB step."""
    color_max: int = COLOR_MAX
    color: np.ndarray = field(init=False)
    db: np.ndarray = field(init=False)

    def __post_init__(self):
        self.color = np.zeros(self.color_max + 1, dtype=np.int64)
        self.db = np.zeros(DB_HIST_SIZE, dtype=np.int64)

    @property
    def total(self) -> int:
        return int(self.color.sum())

    @property
    def color_peak(self) -> int:
        return int(self.color.max())

    @property
    def db_peak(self) -> int:
        return int(self.db.max())

    @property
    def db_mean(self) -> float:
        """Mean count per dB bucket."""
        return float(self.db.sum()) / len(self.db)

    def db_percentile(self, fraction: float) -> float:
        """Level (dB below the gain) under which fraction of cells fall.

        Buckets run from loud (0) to quiet, so this walks from the
        quiet end.
        """
        total = self.db.sum()
        if total == 0:
            return 0.0
        cumulative = np.cumsum(self.db[::-1])
        bucket = len(self.db) - 1 - int(np.searchsorted(cumulative, fraction * total))
        return -bucket / 10.0

    def to_dict(self) -> dict:
        return {
            'total': self.total,
            'color_peak': self.color_peak,
            'db_peak': self.db_peak,
            'db_mean': round(self.db_mean, 3),
            'db_median': self.db_percentile(0.5),
        }


class Colorizer:
    """Map dBFS values onto palette indices.

    0 dB maps to index color_max (brightest), -db_range dB and below to 0.
    """

    def __init__(self, db_range: float, gain: float = 6.0,
                 color_max: int = COLOR_MAX):
        if db_range <= 0:
            raise ValueError(f"dB range must be positive, got {db_range}")
        self.db_range = db_range
        self.gain = gain
        self.color_max = color_max
        self.color_norm = color_max / -db_range
        self.histograms = Histograms(color_max)

    def color_index(self, db) -> np.ndarray:
        """Palette index for each dB value, always within [0, color_max]."""
        db = np.nan_to_num(np.asarray(db, dtype=np.float64), nan=DBFS_SILENCE)
        with np.errstate(invalid='ignore', over='ignore'):
            level = np.floor(0.5 + db * self.color_norm)
        level = np.clip(level, 0, self.color_max)
        return (self.color_max - level).astype(np.int64)

    def db_bucket(self, db) -> np.ndarray:
        """0.1 dB histogram bucket of each value, relative to the gain."""
        db = np.nan_to_num(np.asarray(db, dtype=np.float64), nan=DBFS_SILENCE)
        with np.errstate(invalid='ignore', over='ignore'):
            bucket = np.floor(0.5 + (db - self.gain) * -10.0)
        return np.clip(bucket, 0, DB_HIST_SIZE - 1).astype(np.int64)

    def colorize(self, db: np.ndarray) -> np.ndarray:
        """Palette indices for one column, counting every cell."""
        indices = self.color_index(db)
        self.histograms.color += np.bincount(indices, minlength=self.color_max + 1)
        self.histograms.db += np.bincount(self.db_bucket(db), minlength=DB_HIST_SIZE)
        return indices
