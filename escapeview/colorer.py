"""
Sine-wave colorers for escape-time visualization.

Each channel of the output color is an independent sine wave of the
smoothed escape count:

    channel(i) = saturate(coef * sin(i * freq + phase) + offset)

A true RGB rainbow needs the three phases 120 degrees (2pi/3) apart.
Spacing them 60 degrees apart instead gives warm sunset tones, which is
why the default preset is not a true RGB conversion.

To add a new colorer:
1. Define a create_colorer_xxx() function that returns a SineRGB
2. Add it to the COLORERS dictionary at the bottom of this file
"""

import math
from dataclasses import dataclass

import numpy as np


def saturate_channel(level):
    """Clamp to [0, 255] and truncate to an 8-bit value."""
    if not level > 0.0:
        return 0
    if level > 255.0:
        return 255
    return int(level)


@dataclass
class SineChannel:
    """A single color channel driven by a sine wave."""

    coef: float
    freq: float
    phase: float
    offset: float

    def compute(self, i):
        if not math.isfinite(i):
            return 0
        return saturate_channel(self.coef * math.sin(i * self.freq + self.phase) + self.offset)

    def to_dict(self):
        return {"coef": self.coef, "freq": self.freq, "phase": self.phase, "offset": self.offset}

    @classmethod
    def from_dict(cls, data):
        return cls(
            coef=float(data["coef"]),
            freq=float(data["freq"]),
            phase=float(data["phase"]),
            offset=float(data["offset"]),
        )


class SineRGB:
    """
    Maps escape values to RGB triples with three SineChannels.

    Escapes of None (points that never escaped) are always black.
    """

    def __init__(self, channels=None):
        if channels is None:
            channels = _sunset_channels()
        if len(channels) != 3:
            raise ValueError(f"SineRGB needs exactly 3 channels, got {len(channels)}")
        self.channels = tuple(channels)

    def __eq__(self, other):
        if not isinstance(other, SineRGB):
            return NotImplemented
        return self.channels == other.channels

    def __repr__(self):
        return f"SineRGB(channels={self.channels!r})"

    def rgb(self, escape):
        if escape is None:
            return (0, 0, 0)
        red, green, blue = self.channels
        return (red.compute(escape), green.compute(escape), blue.compute(escape))

    def params(self):
        """Channel parameters as a (3, 4) array for compute.apply_sine_colorer."""
        return np.array(
            [[ch.coef, ch.freq, ch.phase, ch.offset] for ch in self.channels],
            dtype=np.float64,
        )

    def to_dict(self):
        return {"channels": [ch.to_dict() for ch in self.channels]}

    @classmethod
    def from_dict(cls, data):
        return cls([SineChannel.from_dict(ch) for ch in data["channels"]])


def _sunset_channels():
    coef, freq, offset = 140.0, 0.1, 112.0
    return (
        SineChannel(coef, freq, math.pi * 9.0 / 6.0, offset),
        SineChannel(coef, freq, math.pi * 10.0 / 6.0, offset),
        SineChannel(coef, freq, math.pi * 11.0 / 6.0, offset),
    )


def create_colorer_sunset():
    """Warm oranges and purples, phases 60 degrees apart."""
    return SineRGB(_sunset_channels())


def create_colorer_classic():
    """The first terminal palette: mid-range sines starting at phase 0."""
    coef, freq, offset = 127.0, 0.1, 127.0
    return SineRGB((
        SineChannel(coef, freq, 0.0, offset),
        SineChannel(coef, freq, math.pi / 3.0, offset),
        SineChannel(coef, freq, math.pi * 2.0 / 3.0, offset),
    ))


def create_colorer_rainbow():
    """True RGB cycling, phases 120 degrees apart."""
    coef, freq, offset = 127.0, 0.1, 128.0
    return SineRGB((
        SineChannel(coef, freq, 0.0, offset),
        SineChannel(coef, freq, math.pi * 2.0 / 3.0, offset),
        SineChannel(coef, freq, math.pi * 4.0 / 3.0, offset),
    ))


# Registry of all available colorers.
# Keys are display names, values are factory functions.
COLORERS = {
    'Sunset': create_colorer_sunset,
    'Classic': create_colorer_classic,
    'Rainbow': create_colorer_rainbow,
}


def get_colorer(name):
    """
    Get a colorer by name.

    Raises:
        KeyError if name not found
    """
    return COLORERS[name]()


def get_default_colorer():
    """Get the default colorer (Sunset)."""
    return create_colorer_sunset()


def list_colorer_names():
    """Get list of available colorer names."""
    return list(COLORERS.keys())
