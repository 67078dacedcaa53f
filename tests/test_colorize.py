"""Tests for dBFS colorization and histograms."""

import numpy as np
import pytest

from quicklook.colorize import Colorizer, Histograms
from quicklook.constants import COLOR_MAX, DB_HIST_SIZE, DBFS_SILENCE


class TestColorIndex:
    """Tests for Colorizer.color_index."""

    def test_zero_db_is_brightest(self):
        colorizer = Colorizer(30.0)
        assert colorizer.color_index([0.0])[0] == COLOR_MAX

    def test_bottom_of_range_is_darkest(self):
        colorizer = Colorizer(30.0)
        assert colorizer.color_index([-30.0])[0] == 0

    def test_midpoint(self):
        colorizer = Colorizer(30.0)
        assert colorizer.color_index([-15.0])[0] == 127

    def test_out_of_range_is_clamped(self):
        colorizer = Colorizer(30.0)
        indices = colorizer.color_index([12.0, -45.0, DBFS_SILENCE])
        assert indices.tolist() == [COLOR_MAX, 0, 0]

    def test_non_finite_values_stay_in_range(self):
        colorizer = Colorizer(40.0)
        indices = colorizer.color_index([np.inf, -np.inf, np.nan])
        assert indices.tolist() == [COLOR_MAX, 0, 0]

    def test_random_values_stay_in_range(self):
        colorizer = Colorizer(60.0)
        rng = np.random.default_rng(1)
        indices = colorizer.color_index(rng.uniform(-500.0, 500.0, 1000))
        assert indices.min() >= 0
        assert indices.max() <= COLOR_MAX

    def test_non_positive_range_raises(self):
        with pytest.raises(ValueError):
            Colorizer(0.0)


class TestDbBucket:
    """Tests for Colorizer.db_bucket."""

    def test_gain_is_bucket_zero(self):
        colorizer = Colorizer(30.0, gain=6.0)
        assert colorizer.db_bucket([6.0])[0] == 0

    def test_tenth_db_steps(self):
        colorizer = Colorizer(30.0, gain=6.0)
        assert colorizer.db_bucket([5.9, 0.0, -4.0]).tolist() == [1, 60, 100]

    def test_clamped_at_both_ends(self):
        colorizer = Colorizer(30.0, gain=6.0)
        buckets = colorizer.db_bucket([20.0, DBFS_SILENCE, -np.inf])
        assert buckets.tolist() == [0, DB_HIST_SIZE - 1, DB_HIST_SIZE - 1]


class TestHistograms:
    """Tests for histogram accumulation."""

    def test_counts_every_cell(self):
        colorizer = Colorizer(30.0)
        rng = np.random.default_rng(7)
        for _ in range(10):
            colorizer.colorize(rng.uniform(-60.0, 10.0, 64))
        histograms = colorizer.histograms
        assert histograms.color.sum() == 640
        assert histograms.db.sum() == 640
        assert histograms.total == 640

    def test_sizes(self):
        histograms = Histograms()
        assert len(histograms.color) == COLOR_MAX + 1
        assert len(histograms.db) == DB_HIST_SIZE

    def test_peaks(self):
        colorizer = Colorizer(30.0, gain=0.0)
        colorizer.colorize(np.array([0.0, 0.0, -30.0]))
        assert colorizer.histograms.color_peak == 2
        assert colorizer.histograms.color[COLOR_MAX] == 2
        assert colorizer.histograms.db[0] == 2
        assert colorizer.histograms.db[300] == 1

    def test_percentile(self):
        colorizer = Colorizer(30.0, gain=0.0)
        colorizer.colorize(np.array([-10.0] * 9 + [0.0]))
        assert colorizer.histograms.db_percentile(0.5) == pytest.approx(-10.0)

    def test_empty_percentile(self):
        assert Histograms().db_percentile(0.5) == 0.0

    def test_to_dict(self):
        colorizer = Colorizer(30.0)
        colorizer.colorize(np.zeros(4))
        summary = colorizer.histograms.to_dict()
        assert summary['total'] == 4
        assert summary['color_peak'] == 4
