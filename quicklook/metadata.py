"""Capture metadata embedded in sample file names.

Recording tools conventionally name captures like
``g001_433.92M_250k.cu8``: a number suffixed with ``M`` is the center
frequency in MHz, a number suffixed with ``k`` the sample rate in kHz.
"""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass

from config import DEFAULT_SAMPLE_RATE

from .constants import NAME_SEPARATORS

# Decimal number as accepted by strtod (without hex/inf/nan forms)
_NUMBER_RE = re.compile(r'\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


@dataclass(frozen=True)
class CaptureInfo:
    """Center frequency and sample rate of a capture, in Hz."""
    center_freq: int = 0
    sample_rate: int = DEFAULT_SAMPLE_RATE


def _suffix_at(name: str, pos: int, letters: str) -> bool:
    """Check for a unit letter at pos followed by a separator or the end."""
    if pos >= len(name) or name[pos] not in letters:
        return False
    return pos + 1 == len(name) or name[pos + 1] in NAME_SEPARATORS


def parse_freq_rate(path: str | os.PathLike) -> CaptureInfo:
    """Extract center frequency and sample rate from a file name.

    Every separator (``_ - . space``) is a candidate start of a number.
    Later matches override earlier ones. Tokens that do not parse are
    skipped; missing values fall back to 0 Hz and the default rate.
    """
    name = os.path.basename(os.fspath(path))

    center_freq = None
    sample_rate = None
    pos = 0
    while pos < len(name):
        match = None
        if name[pos] in NAME_SEPARATORS:
            match = _NUMBER_RE.match(name, pos + 1)
        if match and math.isfinite(float(match.group())):
            value = float(match.group())
            end = match.end()
            # A recognised token is consumed up to its unit letter
            if _suffix_at(name, end, 'Mm'):
                center_freq = value * 1e6
                pos = end
            elif _suffix_at(name, end, 'kK'):
                sample_rate = value * 1e3
                pos = end
        pos += 1

    info = CaptureInfo()
    if center_freq is not None:
        info = CaptureInfo(round(center_freq), info.sample_rate)
    if sample_rate is not None and round(sample_rate) > 0:
        info = CaptureInfo(info.center_freq, round(sample_rate))
    return info
