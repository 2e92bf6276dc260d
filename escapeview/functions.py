"""
Power escape functions: the Mandelbrot and Julia families.

Both families iterate z -> z^exp + offset and share the same escape
contract. They differ only in where z starts and what the offset is:

    Mandelbrot:  z0 = 0,  offset = c         (the sampled point)
    Julia:       z0 = c,  offset = c_offset  (fixed for the whole image)

EscapeFunction is the tagged union of the two; code that needs to tell
them apart uses isinstance().
"""

import math
from dataclasses import dataclass

from .compute import escape_point


DEFAULT_EXPONENT = 2.0
# ln(exp) divides the smoothing term. Exponents within EXPONENT_BAND of 1
# are moved EXPONENT_CLEARANCE away from it, non-positive ones up to MIN_EXPONENT.
EXPONENT_BAND = 5e-4
EXPONENT_CLEARANCE = 1e-3
MIN_EXPONENT = 1e-3

DEFAULT_JULIA_OFFSET = complex(0.6, 0.4)


def clamp_exponent(exp, direction=0.0):
    """
    Keep an exponent usable by the smoothing formula.

    Args:
        exp: Requested exponent
        direction: Sign of the change that produced `exp`. An exponent
            landing next to 1 is moved to that side of it; with no
            direction the nearer side is used.
    """
    exp = float(exp)
    if not math.isfinite(exp):
        return DEFAULT_EXPONENT
    if exp < MIN_EXPONENT:
        return MIN_EXPONENT
    if abs(exp - 1.0) < EXPONENT_BAND:
        below = direction < 0 if direction else exp < 1.0
        return 1.0 - EXPONENT_CLEARANCE if below else 1.0 + EXPONENT_CLEARANCE
    return exp


def _to_escape(value):
    return None if math.isnan(value) else float(value)


@dataclass
class PowerFunction:
    """Shared exponent handling for the power families."""

    exp: float = DEFAULT_EXPONENT

    def __post_init__(self):
        self.exp = clamp_exponent(self.exp)

    def set_exponent(self, exp):
        self.exp = clamp_exponent(exp)

    def shift_exponent(self, delta):
        self.exp = clamp_exponent(self.exp + delta, direction=delta)


@dataclass
class Mandelbrot(PowerFunction):
    """z -> z^exp + c, starting from z = 0."""

    @classmethod
    def from_julia(cls, julia):
        return cls(exp=julia.exp)

    def kernel_args(self):
        """(julia, off_r, off_i) as expected by compute.compute_escapes."""
        return False, 0.0, 0.0

    def escape(self, c, limit):
        """
        Evaluate the escape status of a single point.

        Returns:
            None if the point did not escape within `limit` iterations,
            otherwise the smoothed escape count.
        """
        return _to_escape(escape_point(0.0, 0.0, c.real, c.imag, self.exp, int(limit)))


@dataclass
class Julia(PowerFunction):
    """z -> z^exp + c_offset, starting from the sampled point."""

    c_offset: complex = DEFAULT_JULIA_OFFSET

    def __post_init__(self):
        super().__post_init__()
        self.c_offset = complex(self.c_offset)

    @classmethod
    def from_mandelbrot(cls, mandelbrot, c_offset):
        return cls(exp=mandelbrot.exp, c_offset=c_offset)

    def kernel_args(self):
        return True, self.c_offset.real, self.c_offset.imag

    def escape(self, c, limit):
        return _to_escape(
            escape_point(c.real, c.imag, self.c_offset.real, self.c_offset.imag, self.exp, int(limit))
        )


EscapeFunction = (Mandelbrot, Julia)


def function_to_dict(function):
    """Serialize an escape function as {"<Family>": {...fields...}}."""
    if isinstance(function, Julia):
        return {"Julia": {"exp": function.exp, "c_offset": [function.c_offset.real, function.c_offset.imag]}}
    if isinstance(function, Mandelbrot):
        return {"Mandelbrot": {"exp": function.exp}}
    raise TypeError(f"Not an escape function: {function!r}")


def function_from_dict(data):
    """Inverse of function_to_dict. Raises KeyError/ValueError on bad input."""
    if len(data) != 1:
        raise ValueError(f"Expected exactly one function family, got {sorted(data)}")
    (family, fields), = data.items()
    if family == "Mandelbrot":
        return Mandelbrot(exp=fields["exp"])
    if family == "Julia":
        re, im = fields["c_offset"]
        return Julia(exp=fields["exp"], c_offset=complex(re, im))
    raise ValueError(f"Unknown function family: {family!r}")
