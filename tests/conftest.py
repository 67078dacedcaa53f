"""Pytest configuration and fixtures."""

import numpy as np
import pytest


def tone_iq(samples, cycles=0.125, amplitude=0.9):
    """Complex tone at cycles per sample (0.125 -> fs/8)."""
    n = np.arange(samples)
    return amplitude * np.exp(2j * np.pi * cycles * n)


def to_cu8(z):
    """Interleave and quantize complex samples as unsigned 8-bit I/Q."""
    iq = np.empty(2 * len(z), dtype=np.float64)
    iq[0::2] = z.real
    iq[1::2] = z.imag
    return np.clip(np.round(iq * 127.5 + 127.5), 0, 255).astype(np.uint8).tobytes()


@pytest.fixture
def write_capture(tmp_path):
    """Write raw bytes to a named file under tmp_path, return its path."""
    def _write(name, data):
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    return _write


@pytest.fixture
def tone_capture(write_capture):
    """CU8 capture of a pure tone at fs/8."""
    def _make(name='capture_433.920M_250k.cu8', samples=4096, cycles=0.125):
        return write_capture(name, to_cu8(tone_iq(samples, cycles)))
    return _make
