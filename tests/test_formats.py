"""Tests for sample format detection."""

import pytest

from quicklook.formats import SampleFormat, SampleKind, detect_sample_format


class TestDetectSampleFormat:
    """Tests for detect_sample_format."""

    @pytest.mark.parametrize('name,expected', [
        ('rec.cu4', SampleFormat.CU4),
        ('rec.cs4', SampleFormat.CS4),
        ('rec.cu8', SampleFormat.CU8),
        ('rec.data', SampleFormat.CU8),
        ('rec.complex16u', SampleFormat.CU8),
        ('rec.cs8', SampleFormat.CS8),
        ('rec.complex16s', SampleFormat.CS8),
        ('rec.cu12', SampleFormat.CU12),
        ('rec.cs12', SampleFormat.CS12),
        ('rec.cs16', SampleFormat.CS16),
        ('rec.cu32', SampleFormat.CU32),
        ('rec.cs64', SampleFormat.CS64),
        ('rec.cf32', SampleFormat.CF32),
        ('rec.cfile', SampleFormat.CF32),
        ('rec.complex', SampleFormat.CF32),
        ('rec.cf64', SampleFormat.CF64),
    ])
    def test_known_extensions(self, name, expected):
        assert detect_sample_format(name) == expected

    def test_unknown_extension_defaults_to_cu8(self):
        assert detect_sample_format('capture.bin') == SampleFormat.CU8

    def test_missing_extension_defaults_to_cu8(self):
        assert detect_sample_format('capture') == SampleFormat.CU8

    def test_only_last_extension_counts(self):
        assert detect_sample_format('/tmp/a.cs16/capture.cf32') == SampleFormat.CF32


class TestSampleFormat:
    """Tests for per-format properties."""

    @pytest.mark.parametrize('fmt,size', [
        (SampleFormat.CU4, 1),
        (SampleFormat.CS8, 2),
        (SampleFormat.CU12, 3),
        (SampleFormat.CS16, 4),
        (SampleFormat.CF32, 8),
        (SampleFormat.CS64, 16),
        (SampleFormat.CF64, 16),
    ])
    def test_bytes_per_sample(self, fmt, size):
        assert fmt.bytes_per_sample == size

    def test_db_range_grows_with_bit_depth(self):
        assert SampleFormat.CU8.db_range == 30
        assert SampleFormat.CS16.db_range == 30
        assert SampleFormat.CF32.db_range == 40
        assert SampleFormat.CS64.db_range == 60

    def test_kind(self):
        assert SampleFormat.CS12.kind == SampleKind.SIGNED
        assert SampleFormat.CU12.kind == SampleKind.UNSIGNED
        assert SampleFormat.CF64.is_float
        assert SampleFormat.CS8.is_signed
        assert not SampleFormat.CU8.is_signed
