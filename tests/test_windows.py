"""Tests for FFT window functions."""

import numpy as np
import pytest

from quicklook.errors import UnknownWindowError
from quicklook.windows import WindowKind, make_window


class TestWindowKind:
    """Tests for window lookup."""

    def test_from_name_ignores_case(self):
        assert WindowKind.from_name('Hann') == WindowKind.HANN
        assert WindowKind.from_name('BLACKMAN-HARRIS') == WindowKind.BLACKMAN_HARRIS

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownWindowError):
            WindowKind.from_name('kaiser')

    def test_unknown_window_is_value_error(self):
        with pytest.raises(ValueError):
            WindowKind.from_name('')

    def test_ids_follow_table_order(self):
        assert WindowKind.RECTANGULAR.ident == 0
        assert WindowKind.from_id(5) == WindowKind.BLACKMAN_HARRIS

    def test_unknown_id_raises(self):
        with pytest.raises(UnknownWindowError):
            WindowKind.from_id(6)


class TestMakeWindow:
    """Tests for make_window."""

    @pytest.mark.parametrize('kind', list(WindowKind))
    @pytest.mark.parametrize('n', [3, 16, 512])
    def test_sum_is_positive(self, kind, n):
        window = make_window(kind, n)
        assert len(window) == n
        assert window.total > 0

    def test_rectangular_is_all_ones(self):
        window = make_window('rectangular', 64)
        assert np.all(window.values == 1.0)
        assert window.total == pytest.approx(64.0)

    @pytest.mark.parametrize('kind', list(WindowKind))
    def test_symmetric(self, kind):
        values = make_window(kind, 33).values
        np.testing.assert_allclose(values, values[::-1], atol=1e-6)

    def test_hann_endpoints_are_zero(self):
        values = make_window(WindowKind.HANN, 64).values
        assert values[0] == pytest.approx(0.0, abs=1e-6)
        assert values[-1] == pytest.approx(0.0, abs=1e-6)

    def test_bartlett_peaks_in_the_middle(self):
        values = make_window(WindowKind.BARTLETT, 33).values
        assert values[16] == pytest.approx(1.0)
        assert values[0] == pytest.approx(0.0)

    def test_values_are_float32_and_read_only(self):
        window = make_window(WindowKind.HAMMING, 16)
        assert window.values.dtype == np.float32
        assert not window.values.flags.writeable

    def test_too_short_raises(self):
        with pytest.raises(ValueError):
            make_window(WindowKind.HANN, 1)

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownWindowError):
            make_window('nope', 16)
