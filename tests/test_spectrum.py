"""Tests for the per-column power spectrum."""

import math

import numpy as np
import pytest

from quicklook.constants import DBFS_SILENCE
from quicklook.errors import GeometryError
from quicklook.spectrum import (
    SpectralAnalyzer,
    bin_to_row,
    block_norm_db,
    power_to_db,
    row_order,
)
from quicklook.windows import WindowKind, make_window


def tone(n, k, amplitude=1.0):
    """Complex tone landing exactly on FFT bin k."""
    return (amplitude * np.exp(2j * np.pi * k * np.arange(n) / n)).astype(np.complex64)


class TestRowMapping:
    """Tests for FFT bin to display row mapping."""

    def test_dc_is_centered(self):
        assert bin_to_row(0, 8) == 4

    def test_positive_frequencies_above_center(self):
        assert bin_to_row(1, 8) == 3
        assert bin_to_row(4, 8) == 0

    def test_negative_frequencies_below_center(self):
        assert bin_to_row(5, 8) == 7
        assert bin_to_row(7, 8) == 5

    @pytest.mark.parametrize('n', [2, 7, 8, 256])
    def test_row_order_is_a_permutation(self, n):
        rows = row_order(n)
        assert sorted(rows.tolist()) == list(range(n))
        assert rows.tolist() == [bin_to_row(k, n) for k in range(n)]


class TestPowerToDb:
    """Tests for power_to_db."""

    def test_below_cutoff_is_silence(self):
        assert power_to_db(np.array([1e-21]))[0] == DBFS_SILENCE

    def test_zero_is_silence(self):
        assert power_to_db(np.array([0.0]))[0] == DBFS_SILENCE

    def test_amplitude_scale(self):
        # 5*log10(power) == 20*log10(amplitude)
        assert power_to_db(np.array([100.0]))[0] == pytest.approx(10.0)

    def test_norm_and_gain(self):
        db = power_to_db(np.array([1.0]), norm_db=-3.0, gain=6.0)
        assert db[0] == pytest.approx(3.0)

    def test_never_below_floor(self):
        db = power_to_db(np.array([1e-19, 1.0]), norm_db=-200.0)
        assert np.all(db == DBFS_SILENCE)

    def test_non_finite_power(self):
        db = power_to_db(np.array([np.inf, np.nan]))
        assert np.all(np.isfinite(db))
        assert db[0] > 1500.0
        assert db[1] == DBFS_SILENCE

    def test_block_norm_db(self):
        assert block_norm_db(100.0) == pytest.approx(-20.0)


class TestSpectralAnalyzer:
    """Tests for SpectralAnalyzer."""

    def test_full_scale_tone_reads_gain(self):
        n = 64
        analyzer = SpectralAnalyzer(make_window(WindowKind.RECTANGULAR, n), gain=0.0)
        db = analyzer.analyze(tone(n, 8))
        assert db.max() == pytest.approx(0.0, abs=1e-3)

    @pytest.mark.parametrize('kind', list(WindowKind))
    def test_tone_lands_on_expected_row(self, kind):
        n = 128
        window = make_window(kind, n)
        analyzer = SpectralAnalyzer(window)
        db = analyzer.analyze(tone(n, 16) * window.values)
        assert abs(int(np.argmax(db)) - bin_to_row(16, n)) <= 1

    def test_negative_tone_below_center(self):
        n = 64
        analyzer = SpectralAnalyzer(make_window(WindowKind.RECTANGULAR, n))
        db = analyzer.analyze(tone(n, -8))
        assert int(np.argmax(db)) == n // 2 + 8

    def test_silence(self):
        n = 32
        analyzer = SpectralAnalyzer(make_window(WindowKind.HANN, n))
        db = analyzer.analyze(np.zeros(n, dtype=np.complex64))
        assert np.all(db == DBFS_SILENCE)
        assert analyzer.column_max == DBFS_SILENCE

    def test_tracks_range(self):
        n = 32
        analyzer = SpectralAnalyzer(make_window(WindowKind.RECTANGULAR, n), gain=0.0)
        analyzer.analyze(np.zeros(n, dtype=np.complex64))
        analyzer.analyze(tone(n, 4))
        assert analyzer.db_min == DBFS_SILENCE
        assert analyzer.db_max == pytest.approx(0.0, abs=1e-3)

    def test_norm_follows_window_sum(self):
        window = make_window(WindowKind.HAMMING, 256)
        analyzer = SpectralAnalyzer(window)
        assert analyzer.norm_db == pytest.approx(10 * math.log10(1 / window.total))

    def test_window_without_energy_raises(self):
        with pytest.raises(GeometryError):
            SpectralAnalyzer(make_window(WindowKind.HANN, 2))
