"""
The state needed to render an escape function to an image.

A RenderContext binds together a Location, the active escape function,
a colorer and the aspect compensation of the display. It is mutated by
discrete Transforms (pan, zoom, iteration and exponent changes, family
switch, reset) and bound to a pixel Bounds to produce EscapeMatrix
renders.

Usage:
    ctx = RenderContext()
    ctx.transform(Transform.SCALE_IN)
    matrix = ctx.bind(Bounds(160, 90)).to_ematrix()
    rgb = matrix.to_img(ctx.colorer)
"""

import copy
import enum

import numpy as np
from loguru import logger

from .colorer import SineRGB
from .compute import compute_escapes
from .ematrix import EscapeMatrix
from .functions import Julia, Mandelbrot, function_from_dict, function_to_dict
from .location import Location, clamp_iterations, clamp_scalar


class Transform(enum.Enum):
    """Named mutations of a RenderContext."""

    TRANSLATE_UP = "translate_up"          # decrement loc.im0
    TRANSLATE_DOWN = "translate_down"      # increment loc.im0
    TRANSLATE_LEFT = "translate_left"      # decrement loc.re0
    TRANSLATE_RIGHT = "translate_right"    # increment loc.re0
    SCALE_IN = "scale_in"
    SCALE_OUT = "scale_out"
    INC_ITERATIONS = "inc_iterations"
    DEC_ITERATIONS = "dec_iterations"
    INC_EXP = "inc_exp"
    DEC_EXP = "dec_exp"
    SWITCH_FN = "switch_fn"                # Mandelbrot <-> Julia
    RESET = "reset"                        # location only, keeps the family


class RenderContext:
    """
    Location + escape function + colorer + aspect compensation.

    Attributes:
        loc: The current Location
        function: The active escape function (Mandelbrot or Julia)
        colorer: SineRGB used to colorize renders
        aspect: (x, y) compensation for non-square display cells. It is
            used instead of loc.aspect when mapping pixels to the plane.
    """

    TRANSLATE_SCALAR = 10.0
    SCALE_SCALAR = 2.0
    ITERATIONS_SCALAR = 25
    EXP_SCALAR = 0.001

    TERMINAL_ASPECT = (1.0, 2.3)

    def __init__(self, loc=None, function=None, colorer=None, aspect=(1.0, 1.0)):
        self.loc = loc if loc is not None else Location()
        self.function = function if function is not None else Mandelbrot()
        self.colorer = colorer if colorer is not None else SineRGB()
        self.aspect = (float(aspect[0]), float(aspect[1]))

    @classmethod
    def with_loc(cls, loc):
        """Create a context with a pre-defined location."""
        return cls(loc=loc)

    @classmethod
    def for_terminal(cls, loc=None):
        """Create a context compensating for terminal cell proportions."""
        return cls(loc=loc, aspect=cls.TERMINAL_ASPECT)

    def __eq__(self, other):
        if not isinstance(other, RenderContext):
            return NotImplemented
        return (
            self.loc == other.loc
            and self.function == other.function
            and self.colorer == other.colorer
            and self.aspect == other.aspect
        )

    def __repr__(self):
        return (
            f"RenderContext(loc={self.loc!r}, function={self.function!r}, "
            f"colorer={self.colorer!r}, aspect={self.aspect!r})"
        )

    def copy(self):
        return copy.deepcopy(self)

    def complex_at(self, bounds, pos):
        return self.loc.complex_at(bounds, pos, aspect=self.aspect)

    def transform(self, transform):
        """Apply a Transform in place."""
        loc = self.loc
        step = loc.scalar * self.TRANSLATE_SCALAR

        if transform is Transform.TRANSLATE_UP:
            loc.im0 -= step
        elif transform is Transform.TRANSLATE_DOWN:
            loc.im0 += step
        elif transform is Transform.TRANSLATE_LEFT:
            loc.re0 -= step
        elif transform is Transform.TRANSLATE_RIGHT:
            loc.re0 += step

        elif transform is Transform.SCALE_IN:
            loc.scalar = clamp_scalar(loc.scalar / self.SCALE_SCALAR)
        elif transform is Transform.SCALE_OUT:
            loc.scalar = clamp_scalar(loc.scalar * self.SCALE_SCALAR)

        elif transform is Transform.INC_ITERATIONS:
            loc.max_iter = clamp_iterations(loc.max_iter + self.ITERATIONS_SCALAR)
        elif transform is Transform.DEC_ITERATIONS:
            loc.max_iter = clamp_iterations(loc.max_iter - self.ITERATIONS_SCALAR)

        elif transform is Transform.INC_EXP:
            self.function.shift_exponent(self.EXP_SCALAR)
        elif transform is Transform.DEC_EXP:
            self.function.shift_exponent(-self.EXP_SCALAR)

        elif transform is Transform.SWITCH_FN:
            self._switch_function()

        elif transform is Transform.RESET:
            self.loc = Location()

        else:
            raise ValueError(f"Unknown transform: {transform!r}")

        logger.debug(f"{transform.name}: {self.loc}, {self.function}")

    def _switch_function(self):
        if isinstance(self.function, Julia):
            # Re-center on the Julia offset so switching back and forth shows
            # how the Julia set changes with the position in the Mandelbrot set.
            julia = self.function
            self.function = Mandelbrot.from_julia(julia)
            self.loc.move_to(julia.c_offset)
        else:
            # The current position maps to a similar looking Julia set, keep it.
            self.function = Julia.from_mandelbrot(self.function, self.loc.origin())

    def bind(self, bounds):
        return BoundRenderContext(self, bounds)

    def to_dict(self):
        return {
            "loc": self.loc.to_dict(),
            "function": function_to_dict(self.function),
            "colorer": self.colorer.to_dict(),
            "aspect": list(self.aspect),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            loc=Location.from_dict(data["loc"]),
            function=function_from_dict(data["function"]),
            colorer=SineRGB.from_dict(data["colorer"]),
            aspect=tuple(data["aspect"]),
        )


class BoundRenderContext:
    """
    A RenderContext bound to a concrete pixel bounds.

    The context is copied on construction, so transforms applied to the
    original afterwards do not change what this job renders.

    Rendering is the most expensive operation in the package; the
    evaluation itself runs in parallel in compute.compute_escapes.
    """

    # Columns evaluated per progress update in to_ematrix_with_progress
    PROGRESS_CHUNK_COLS = 64

    def __init__(self, rctx, bounds):
        self.rctx = rctx.copy()
        self.bounds = bounds

    def _prepare(self):
        re_axis, im_axis = self.rctx.loc.axes(self.bounds, aspect=self.rctx.aspect)
        out = np.empty((self.bounds.height, self.bounds.width), dtype=np.float64)
        return re_axis, im_axis, out

    def _evaluate(self, re_axis, im_axis, out):
        function = self.rctx.function
        julia, off_r, off_i = function.kernel_args()
        compute_escapes(re_axis, im_axis, julia, off_r, off_i,
                        function.exp, self.rctx.loc.max_iter, out)

    def to_ematrix(self):
        """Evaluate every pixel of the bounds."""
        re_axis, im_axis, out = self._prepare()
        self._evaluate(re_axis, im_axis, out)
        return EscapeMatrix._wrap(out)

    def to_ematrix_with_progress(self, progress, chunk_cols=None):
        """
        Evaluate every pixel, reporting progress as columns complete.

        Args:
            progress: Sink with an update(n) method, e.g. a tqdm bar. It
                receives the number of pixels finished after each chunk.
            chunk_cols: Columns per chunk (default PROGRESS_CHUNK_COLS)
        """
        chunk_cols = chunk_cols or self.PROGRESS_CHUNK_COLS
        re_axis, im_axis, out = self._prepare()
        nrows = self.bounds.height

        for start in range(0, self.bounds.width, chunk_cols):
            stop = min(start + chunk_cols, self.bounds.width)
            self._evaluate(re_axis[start:stop], im_axis, out[:, start:stop])
            progress.update(nrows * (stop - start))

        return EscapeMatrix._wrap(out)

    def to_img(self, blur=False):
        """Render and colorize with the context's colorer."""
        matrix = self.to_ematrix()
        if blur:
            matrix = matrix.gaussian_blur()
        return matrix.to_img(self.rctx.colorer)
