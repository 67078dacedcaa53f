"""Memory-mapped sample files and complex sample decoding.

The whole capture is mapped read-only with numpy once per render. Each
FFT column is a view into the mapping, decoded straight into normalized
complex values (full scale = 1.0).
"""

from __future__ import annotations

import os

import numpy as np

from .errors import SampleFileError, SampleRangeError
from .formats import SampleFormat
from .logging import decoder_logger as logger
from .windows import Window


class SampleBuffer:
    """Read-only byte view over a sample file.

    Usage::

        with SampleBuffer.open(path, fmt) as buf:
            column = decode_column(buf, 0, window)
    """

    def __init__(self, data: np.ndarray, fmt: SampleFormat, path: str = ''):
        self._data = data
        self._size = int(data.size)
        self._format = fmt
        self._path = path
        self._closed = False

    @classmethod
    def open(cls, path: str | os.PathLike, fmt: SampleFormat) -> SampleBuffer:
        """Map a sample file into memory.

        Raises:
            SampleFileError: If the file cannot be opened, is empty, or
                cannot be mapped.
        """
        path = os.fspath(path)
        try:
            size = os.path.getsize(path)
            if size == 0:
                raise SampleFileError(f"Sample file is empty: {path}")
            data = np.memmap(path, dtype=np.uint8, mode='r')
        except OSError as e:
            raise SampleFileError(f"Cannot open sample file {path}: {e}") from e
        except ValueError as e:
            raise SampleFileError(f"Cannot map sample file {path}: {e}") from e

        logger.debug(f"Mapped {path}: size = {size}, format = {fmt.value}")
        return cls(data, fmt, path)

    @classmethod
    def from_bytes(cls, data: bytes, fmt: SampleFormat) -> SampleBuffer:
        """Wrap an in-memory capture (mostly useful for tests)."""
        return cls(np.frombuffer(bytes(data), dtype=np.uint8), fmt)

    @property
    def format(self) -> SampleFormat:
        return self._format

    @property
    def path(self) -> str:
        return self._path

    @property
    def size(self) -> int:
        """Size in bytes."""
        return self._size

    @property
    def samples(self) -> int:
        """Number of complete complex samples."""
        return self._size // self._format.bytes_per_sample

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, offset: int, count: int) -> np.ndarray:
        """Raw bytes of count samples starting at sample offset.

        Returns a uint8 view into the mapping, valid until close().

        Raises:
            SampleRangeError: If any requested sample lies outside the file.
        """
        if self._closed:
            raise SampleRangeError("Sample buffer is closed")
        if offset < 0 or count < 0 or offset + count > self.samples:
            raise SampleRangeError(
                f"Samples {offset}..{offset + count} outside file of {self.samples} samples")
        bps = self._format.bytes_per_sample
        return self._data[offset * bps:(offset + count) * bps]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # The mapping goes away with its last reference
        self._data = None
        if self._path:
            logger.debug(f"Unmapped {self._path}")

    def __enter__(self) -> SampleBuffer:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Per-format decoders: uint8 byte array -> (I, Q) float arrays
# ---------------------------------------------------------------------------

def _split(values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    return values[0::2], values[1::2]


def _decode_cu4(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    i = (b >> 4).astype(np.float32) / np.float32(7.5) - np.float32(1.0)
    q = (b & 0x0F).astype(np.float32) / np.float32(7.5) - np.float32(1.0)
    return i, q


def _decode_cs4(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    # Each nibble lands in the high half of an int8, keeping its sign
    i = (b & 0xF0).view(np.int8).astype(np.float32) / np.float32(128.0)
    q = ((b & 0x0F) << 4).astype(np.uint8).view(np.int8).astype(np.float32) / np.float32(128.0)
    return i, q


def _decode_cu8(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    iq = b.astype(np.float32)
    # Normalize: 0 -> -1.0, 127.5 -> 0.0, 255 -> +1.0
    iq = (iq - np.float32(127.5)) * np.float32(1.0 / 127.5)
    return _split(iq)


def _decode_cs8(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    iq = b.view(np.int8).astype(np.float32) / np.float32(128.0)
    return _split(iq)


def _unpack_12bit(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Unpack iiqIQQ byte triplets into MSB-aligned 16-bit words."""
    b = b.reshape(-1, 3).astype(np.uint16)
    b0, b1, b2 = b[:, 0], b[:, 1], b[:, 2]
    i = ((b1 << 12) | (b0 << 4)).astype(np.uint16)
    q = ((b2 << 8) | (b1 & 0xF0)).astype(np.uint16)
    return i, q


def _decode_cu12(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    i, q = _unpack_12bit(b)
    scale = np.float32(1.0 / 32768.0)
    return (i.astype(np.float32) * scale - np.float32(1.0),
            q.astype(np.float32) * scale - np.float32(1.0))


def _decode_cs12(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    i, q = _unpack_12bit(b)
    scale = np.float32(1.0 / 32768.0)
    return (i.view(np.int16).astype(np.float32) * scale,
            q.view(np.int16).astype(np.float32) * scale)


def _integer_decoder(dtype: str, bits: int, unsigned: bool):
    """Decoder for interleaved little-endian integer components."""
    scale = np.float32(2.0 ** -(bits - 1))

    def decode(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        iq = b.view(dtype).astype(np.float32) * scale
        if unsigned:
            iq -= np.float32(1.0)
        return _split(iq)

    return decode


def _float_decoder(dtype: str):
    def decode(b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        return _split(b.view(dtype))

    return decode


_DECODERS = {
    SampleFormat.CU4: _decode_cu4,
    SampleFormat.CS4: _decode_cs4,
    SampleFormat.CU8: _decode_cu8,
    SampleFormat.CS8: _decode_cs8,
    SampleFormat.CU12: _decode_cu12,
    SampleFormat.CS12: _decode_cs12,
    SampleFormat.CU16: _integer_decoder('<u2', 16, unsigned=True),
    SampleFormat.CS16: _integer_decoder('<i2', 16, unsigned=False),
    SampleFormat.CU32: _integer_decoder('<u4', 32, unsigned=True),
    SampleFormat.CS32: _integer_decoder('<i4', 32, unsigned=False),
    SampleFormat.CU64: _integer_decoder('<u8', 64, unsigned=True),
    SampleFormat.CS64: _integer_decoder('<i8', 64, unsigned=False),
    SampleFormat.CF32: _float_decoder('<f4'),
    SampleFormat.CF64: _float_decoder('<f8'),
}


def decode_bytes(raw: np.ndarray | bytes, fmt: SampleFormat) -> np.ndarray:
    """Decode raw bytes of whole complex samples.

    Args:
        raw: uint8 array (e.g. a view from SampleBuffer.read) or bytes.
        fmt: Sample format of raw.

    Returns:
        complex128 array for CF64, complex64 for every other format.
    """
    if not isinstance(raw, np.ndarray):
        raw = np.frombuffer(raw, dtype=np.uint8)
    if raw.size % fmt.bytes_per_sample:
        raise SampleRangeError(
            f"{raw.size} bytes is not a whole number of {fmt.value} samples")
    i, q = _DECODERS[fmt](raw)
    dtype = np.complex128 if fmt == SampleFormat.CF64 else np.complex64
    out = np.empty(len(i), dtype=dtype)
    out.real = i
    out.imag = q
    return out


def decode_samples(buffer: SampleBuffer, offset: int, count: int) -> np.ndarray:
    """Decode count normalized complex samples starting at sample offset."""
    return decode_bytes(buffer.read(offset, count), buffer.format)


def decode_column(buffer: SampleBuffer, offset: int, window: Window,
                  out: np.ndarray | None = None) -> np.ndarray:
    """Decode one FFT input column and apply the window.

    Args:
        buffer: Mapped sample file.
        offset: Index of the first sample of the column.
        window: Window whose length is the FFT size.
        out: Optional preallocated complex array of the window length,
            reused across columns.

    Returns:
        The windowed samples (out, if given).
    """
    samples = decode_samples(buffer, offset, len(window))
    if out is None:
        out = np.empty(len(window), dtype=samples.dtype)
    np.multiply(samples, window.values, out=out)
    return out


def column_stride(samples: int, fft_size: int, columns: int) -> float:
    """Fractional sample advance between adjacent output columns."""
    return (samples - fft_size) / (columns - 1)
