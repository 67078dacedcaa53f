"""Complex sample encodings and file-extension detection.

Raw I/Q captures carry no header, so the encoding is inferred from the
file extension alone. The extension table is shared with other SDR tools
(rtl_433, rtl_sdr, GNU Radio file sinks) and must stay in sync with them.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass

from .constants import DB_RANGE_32BIT, DB_RANGE_64BIT, DB_RANGE_NARROW


class SampleKind(enum.Enum):
    """Numeric interpretation of one I or Q component."""
    UNSIGNED = 'unsigned'
    SIGNED = 'signed'
    FLOAT = 'float'


@dataclass(frozen=True)
class FormatSpec:
    """Storage layout of one complex sample."""
    bits: int                 # Bits per I or Q component
    kind: SampleKind
    bytes_per_sample: int     # Bytes per complex (I+Q) sample
    db_range: float           # Default visible dynamic range


class SampleFormat(enum.Enum):
    """Supported complex sample encodings."""
    CU4 = 'cu4'
    CS4 = 'cs4'
    CU8 = 'cu8'
    CS8 = 'cs8'
    CU12 = 'cu12'
    CS12 = 'cs12'
    CU16 = 'cu16'
    CS16 = 'cs16'
    CU32 = 'cu32'
    CS32 = 'cs32'
    CU64 = 'cu64'
    CS64 = 'cs64'
    CF32 = 'cf32'
    CF64 = 'cf64'

    @property
    def spec(self) -> FormatSpec:
        return _FORMAT_SPECS[self]

    @property
    def bits(self) -> int:
        return self.spec.bits

    @property
    def kind(self) -> SampleKind:
        return self.spec.kind

    @property
    def bytes_per_sample(self) -> int:
        return self.spec.bytes_per_sample

    @property
    def db_range(self) -> float:
        return self.spec.db_range

    @property
    def is_signed(self) -> bool:
        return self.spec.kind == SampleKind.SIGNED

    @property
    def is_float(self) -> bool:
        return self.spec.kind == SampleKind.FLOAT


_U = SampleKind.UNSIGNED
_S = SampleKind.SIGNED
_F = SampleKind.FLOAT

_FORMAT_SPECS: dict[SampleFormat, FormatSpec] = {
    SampleFormat.CU4: FormatSpec(4, _U, 1, DB_RANGE_NARROW),
    SampleFormat.CS4: FormatSpec(4, _S, 1, DB_RANGE_NARROW),
    SampleFormat.CU8: FormatSpec(8, _U, 2, DB_RANGE_NARROW),
    SampleFormat.CS8: FormatSpec(8, _S, 2, DB_RANGE_NARROW),
    SampleFormat.CU12: FormatSpec(12, _U, 3, DB_RANGE_NARROW),
    SampleFormat.CS12: FormatSpec(12, _S, 3, DB_RANGE_NARROW),
    SampleFormat.CU16: FormatSpec(16, _U, 4, DB_RANGE_NARROW),
    SampleFormat.CS16: FormatSpec(16, _S, 4, DB_RANGE_NARROW),
    SampleFormat.CU32: FormatSpec(32, _U, 8, DB_RANGE_32BIT),
    SampleFormat.CS32: FormatSpec(32, _S, 8, DB_RANGE_32BIT),
    SampleFormat.CU64: FormatSpec(64, _U, 16, DB_RANGE_64BIT),
    SampleFormat.CS64: FormatSpec(64, _S, 16, DB_RANGE_64BIT),
    SampleFormat.CF32: FormatSpec(32, _F, 8, DB_RANGE_32BIT),
    SampleFormat.CF64: FormatSpec(64, _F, 16, DB_RANGE_64BIT),
}

# File extension -> sample format
EXTENSIONS: dict[str, SampleFormat] = {
    '.cu4': SampleFormat.CU4,
    '.cs4': SampleFormat.CS4,
    '.cu8': SampleFormat.CU8,
    '.data': SampleFormat.CU8,
    '.complex16u': SampleFormat.CU8,
    '.cs8': SampleFormat.CS8,
    '.complex16s': SampleFormat.CS8,
    '.cu12': SampleFormat.CU12,
    '.cs12': SampleFormat.CS12,
    '.cu16': SampleFormat.CU16,
    '.cs16': SampleFormat.CS16,
    '.cu32': SampleFormat.CU32,
    '.cs32': SampleFormat.CS32,
    '.cu64': SampleFormat.CU64,
    '.cs64': SampleFormat.CS64,
    '.cf32': SampleFormat.CF32,
    '.cfile': SampleFormat.CF32,
    '.complex': SampleFormat.CF32,
    '.cf64': SampleFormat.CF64,
}

DEFAULT_FORMAT = SampleFormat.CU8


def detect_sample_format(path: str | os.PathLike) -> SampleFormat:
    """Guess the sample format from a file name.

    Extensions are matched case-sensitively. Anything unrecognised
    falls back to CU8, the rtl_sdr native format.
    """
    ext = os.path.splitext(os.fspath(path))[1]
    return EXTENSIONS.get(ext, DEFAULT_FORMAT)
