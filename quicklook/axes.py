"""Axis tick placement, SI prefixes and the plot title."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple


class AutoRange(NamedTuple):
    """Divisor and SI prefix for displaying a value."""
    scale: float
    prefix: str


AUTORANGES: tuple[AutoRange, ...] = (
    AutoRange(1e24, 'Y'),   # yotta
    AutoRange(1e21, 'Z'),   # zetta
    AutoRange(1e18, 'E'),   # exa
    AutoRange(1e15, 'P'),   # peta
    AutoRange(1e12, 'T'),   # tera
    AutoRange(1e9, 'G'),    # giga
    AutoRange(1e6, 'M'),    # mega
    AutoRange(1e3, 'k'),    # kilo
    AutoRange(1e0, ''),
    AutoRange(1e-3, 'm'),   # milli
    AutoRange(1e-6, 'u'),   # micro
    AutoRange(1e-9, 'n'),   # nano
    AutoRange(1e-12, 'p'),  # pico
    AutoRange(1e-15, 'f'),  # femto
    AutoRange(1e-18, 'a'),  # atto
    AutoRange(1e-21, 'z'),  # zepto
    AutoRange(1e-24, 'y'),  # yocto
)

UNSCALED = AUTORANGES[8]

AUTOSTEPS = (0.1, 0.2, 0.5, 1.0)


def autostep(value_range: float, max_ticks: int) -> float:
    """Smallest 1-2-5 step giving at most max_ticks + 1 ticks over the range."""
    magnitude = math.floor(math.log10(value_range))
    scale = 10.0 ** magnitude
    norm_range = value_range / scale
    for step in AUTOSTEPS:
        if (max_ticks + 1) * step > norm_range:
            return step * scale
    return scale


def autorange(value: float, min_int: float = 10.0) -> AutoRange:
    """Pick the SI prefix that keeps at least min_int in the integer part.

    Zero is shown unscaled; a min_int of zero means the default of 10.
    """
    if value == 0.0:
        return UNSCALED
    if min_int == 0.0:
        min_int = 10.0
    value = value / min_int
    for entry in AUTORANGES:
        if value >= entry.scale:
            return entry
    return AUTORANGES[-1]


@dataclass(frozen=True)
class Tick:
    """One axis tick: pixel position along the axis and optional label."""
    pos: int
    label: str = ''
    major: bool = True
    end: bool = False        # Snapped to the far end of the axis


def _snap_step(step: float, multiple: int) -> float:
    """Round a step to a multiple, never below 1."""
    step = math.floor(step / multiple + 0.5) * multiple
    return max(step, 1.0)


def db_ticks(height: int, gain: float, db_range: float,
             spacing: int = 50) -> list[Tick]:
    """dBFS legend labels, one about every 50 pixels.

    Positions are offsets from the plot top. Labels read -gain at the
    top down to -(gain + db_range) at the bottom.
    """
    markers = max(1, height // spacing)
    step = _snap_step((gain + db_range) / markers, 3)

    ticks = []
    d = gain
    end = gain + db_range
    while d < end:
        last = d >= end - step
        if last:
            d = end
        ticks.append(Tick(int(height * (d - gain) / db_range), f"{-d:.0f}", end=last))
        d += step
    return ticks


@dataclass(frozen=True)
class FreqAxis:
    """Frequency axis layout: unit prefix, minor tick rows and labeled ticks."""
    unit: AutoRange
    minor: tuple[int, ...]
    ticks: tuple[Tick, ...]

    @property
    def title(self) -> str:
        return f"f[{self.unit.prefix}Hz]"


def freq_ticks(height: int, sample_rate: int, center_freq: int,
               min_spacing: int = 16, minor_spacing: int = 8) -> FreqAxis:
    """Frequency ticks around the vertical center of the plot.

    Positions are offsets from the plot top; the center row is the
    center frequency and the top/bottom edges are +/- half the rate.
    """
    half_rate = sample_rate // 2
    unit = autorange(center_freq + sample_rate, 10.0)
    minor = tuple(range(minor_spacing, height, minor_spacing))
    if half_rate <= 0:
        return FreqAxis(unit, minor, ())

    max_ticks = height // 2 // min_spacing
    step = autostep(half_rate, max_ticks)
    step_count = int(0.5 + half_rate / step) - 1
    pixel_per_hz = (height // 2) / half_rate

    ticks = []
    for j in range(-step_count, step_count + 1):
        pos = int(height // 2 - j * step * pixel_per_hz)
        scaled = (center_freq + j * step) / unit.scale
        label = f"{scaled:8.3f}" if center_freq else f"{scaled:+8.2f}"
        ticks.append(Tick(pos, label))
    return FreqAxis(unit, minor, tuple(ticks))


@dataclass(frozen=True)
class TimeAxis:
    """Time axis layout: unit prefix and ticks (minor ticks unlabeled)."""
    unit: AutoRange
    total: float
    ticks: tuple[Tick, ...]

    @property
    def title(self) -> str:
        return f"t[{self.unit.prefix}s]"


def time_ticks(width: int, total_time: float, spacing: int = 85,
               start_time: float = 0.0) -> TimeAxis:
    """Time ticks along the bottom edge, a label about every 85 pixels.

    Positions are offsets from the plot left. Labels count from
    start_time (in the same unit as total_time).
    """
    unit = autorange(total_time, 10.0)
    scaled = total_time / unit.scale
    offset = start_time / unit.scale

    markers = max(1, width // spacing)
    step = _snap_step(scaled / markers, 5)
    if scaled <= 0:
        return TimeAxis(unit, scaled, ())
    per_unit = width / scaled

    ticks = []
    t = 0.0
    while t < scaled:
        last = t >= scaled - step
        if last:
            t = scaled
        ticks.append(Tick(int(t * per_unit), major=False, end=last))
        t += step / 5

    t = 0.0
    while t < scaled:
        last = t >= scaled - step
        if last:
            t = scaled
        ticks.append(Tick(int(t * per_unit), f"{t + offset:.0f}{unit.prefix}s", end=last))
        t += step
    return TimeAxis(unit, scaled, tuple(ticks))


def title_text(center_freq: int, sample_rate: int, db_range: float, gain: float,
               decimation: int, fft_size: int) -> str:
    """One-line summary shown above the plot."""
    base = autorange(center_freq, 10.0)
    rate = autorange(sample_rate, 10.0)
    return "%g%sHz @%.0f%sHz -%g+%gdBFS /%d :%d" % (
        center_freq / base.scale, base.prefix,
        sample_rate / rate.scale, rate.prefix,
        db_range, gain, decimation, fft_size)
