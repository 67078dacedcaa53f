"""Exceptions raised by the spectrogram pipeline."""

from __future__ import annotations


class SpectrogramError(Exception):
    """Base class for render failures."""


class SampleFileError(SpectrogramError):
    """The sample file could not be opened or mapped."""


class SampleRangeError(SpectrogramError):
    """A read would fall outside the mapped sample data."""


class GeometryError(SpectrogramError):
    """The requested plot geometry cannot be rendered."""


class UnknownWindowError(SpectrogramError, ValueError):
    """No window function is known by the given name."""
