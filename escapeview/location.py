"""
A location and magnification within the complex plane.

A Location describes a window onto the complex plane independently of
any pixel resolution: an origin, a zoom scalar, aspect compensation for
non-square cells, and the iteration cap. Binding it to a Bounds gives the
pixel -> complex mapping used by every renderer.
"""

import copy
import enum
import math
import sys
from dataclasses import dataclass

import numpy as np


# Plane span fitted across the smaller pixel dimension by for_bounds()
REFERENCE_SPAN = 1.5

DEFAULT_SCALAR = 0.1
DEFAULT_MAX_ITER = 100
MIN_ITERATIONS = 1
MIN_SCALAR = sys.float_info.min

# Terminal cells are roughly twice as tall as they are wide
DEFAULT_ASPECT = (1.0, 2.0)


class ScaleMethod(enum.Enum):
    """How the width and height resize ratios are combined by Location.scale."""

    MIN = "min"  # Keep the full extent visible, may letterbox
    MAX = "max"  # Fill the new bounds, may crop
    AVG = "avg"

    def combine(self, width_ratio, height_ratio):
        if self is ScaleMethod.MIN:
            return min(width_ratio, height_ratio)
        if self is ScaleMethod.MAX:
            return max(width_ratio, height_ratio)
        return (width_ratio + height_ratio) / 2.0


def clamp_iterations(max_iter):
    return max(MIN_ITERATIONS, int(max_iter))


def clamp_scalar(scalar):
    scalar = float(scalar)
    if not math.isfinite(scalar):
        return DEFAULT_SCALAR
    return max(MIN_SCALAR, scalar)


@dataclass
class Location:
    """
    A window onto the complex plane.

    Attributes:
        im0: Imaginary axis origin
        re0: Real axis origin
        aspect: (x, y) scaling factors compensating for non-square cells
        scalar: Plane units per pixel (smaller is more zoomed in)
        max_iter: Iteration cap before a point is declared interior
    """

    im0: float = 0.0
    re0: float = 0.0
    aspect: tuple = DEFAULT_ASPECT
    scalar: float = DEFAULT_SCALAR
    max_iter: int = DEFAULT_MAX_ITER

    def __post_init__(self):
        self.im0 = float(self.im0)
        self.re0 = float(self.re0)
        self.aspect = (float(self.aspect[0]), float(self.aspect[1]))
        self.scalar = clamp_scalar(self.scalar)
        self.max_iter = clamp_iterations(self.max_iter)

    @classmethod
    def for_bounds(cls, bounds, aspect=None):
        """
        Create a location scaled so the initial view fits the given bounds.

        REFERENCE_SPAN plane units are fitted across whichever pixel
        dimension is smaller once aspect compensation is applied, so the
        whole view is visible regardless of the window shape.
        """
        aspect = DEFAULT_ASPECT if aspect is None else aspect
        ax, ay = aspect
        scalar = REFERENCE_SPAN / min(bounds.width * ax, bounds.height * ay)
        return cls(im0=0.0, re0=0.0, aspect=aspect, scalar=scalar, max_iter=DEFAULT_MAX_ITER)

    def _plane(self, dx, dy, aspect):
        ax, ay = self.aspect if aspect is None else aspect
        return ax * dx * self.scalar + self.re0, ay * dy * self.scalar + self.im0

    def complex_at(self, bounds, pos, aspect=None):
        """
        Determine the complex value at a pixel position within bounds.

        Args:
            bounds: Pixel bounds the location is rendered into
            pos: Pixel position
            aspect: Optional compensation overriding self.aspect

        Returns:
            complex
        """
        offset = pos - bounds.center()
        re, im = self._plane(offset.x, offset.y, aspect)
        return complex(re, im)

    def axes(self, bounds, aspect=None):
        """
        Vectorised complex_at over a whole grid.

        Returns:
            (re_axis, im_axis): float64 arrays with the real coordinate of
            every column and the imaginary coordinate of every row.
        """
        center = bounds.center()
        dx = np.arange(bounds.width, dtype=np.float64) - center.x
        dy = np.arange(bounds.height, dtype=np.float64) - center.y
        return self._plane(dx, dy, aspect)

    def scale(self, old, new, method=ScaleMethod.MIN):
        """
        Rescale this location from one pixel bounds to another.

        The returned location describes approximately the same region of
        the plane at the resolution of `new`. This location is unchanged.
        """
        width_ratio = new.width / old.width
        height_ratio = new.height / old.height
        scaled = self.copy()
        scaled.scalar = clamp_scalar(self.scalar / method.combine(width_ratio, height_ratio))
        return scaled

    def origin(self):
        return complex(self.re0, self.im0)

    def move_to(self, c):
        """Move the location to the position given by a complex number."""
        self.re0 = float(c.real)
        self.im0 = float(c.imag)

    def copy(self):
        return copy.copy(self)

    def to_dict(self):
        return {
            "im0": self.im0,
            "re0": self.re0,
            "aspect": list(self.aspect),
            "scalar": self.scalar,
            "max_iter": self.max_iter,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            im0=data["im0"],
            re0=data["re0"],
            aspect=tuple(data["aspect"]),
            scalar=data["scalar"],
            max_iter=data["max_iter"],
        )
