"""
Escape-time computation functions using Numba JIT compilation.

This module contains all the performance-critical computation functions
that are JIT-compiled for speed. These functions handle:
- Power iteration z -> z^exp + offset for real exponents
- Smoothed (fractional) escape counts
- Parallel evaluation over a full sampling grid
- 3x3 gaussian blur of escape grids
- Sine-wave colorization of escape grids

Escape grids are float64 arrays of shape (nrows, ncols). A cell holding
NaN did not escape within the iteration limit; any other value is the
smoothed escape count.
"""

import math

import numpy as np
from numba import jit, prange


# |z|^2 above this value counts as escaped
ESCAPE_THRESHOLD = 8.0

# Weights for gaussian_blur_3x3, center-heavy
BLUR_KERNEL = np.array([
    [1.0, 2.0, 1.0],
    [2.0, 16.0, 2.0],
    [1.0, 2.0, 1.0],
], dtype=np.float64)


@jit(nopython=True, cache=True)
def complex_powf(zr, zi, exp):
    """Compute z^exp for a real exponent using the polar form."""
    if zr == 0.0 and zi == 0.0:
        return 0.0, 0.0
    r = math.hypot(zr, zi) ** exp
    theta = math.atan2(zi, zr) * exp
    return r * math.cos(theta), r * math.sin(theta)


@jit(nopython=True, cache=True)
def escape_point(zr, zi, off_r, off_i, exp, limit):
    """
    Iterate z -> z^exp + offset from a starting z until it escapes.

    Args:
        zr, zi: Starting value of z
        off_r, off_i: Constant added after every power step
        exp: Real exponent (must not be 1.0)
        limit: Maximum number of iterations

    Returns:
        The smoothed escape count, or NaN if the orbit stayed bounded
        for all `limit` iterations.
    """
    log_threshold = math.log(ESCAPE_THRESHOLD)
    log_exp = math.log(exp)

    for i in range(limit):
        zr, zi = complex_powf(zr, zi, exp)
        zr += off_r
        zi += off_i
        norm_sqr = zr * zr + zi * zi
        if not norm_sqr <= ESCAPE_THRESHOLD:
            # Overflowed to inf or NaN, no fractional part to recover
            if not math.isfinite(norm_sqr):
                return float(i)
            fract = math.log(math.log(norm_sqr) / log_threshold) / log_exp
            return i - fract

    return np.nan


@jit(nopython=True, parallel=True, cache=True)
def compute_escapes(re_axis, im_axis, julia, off_r, off_i, exp, limit, out):
    """
    Evaluate every point of a sampling grid in parallel.

    The grid is the cartesian product of `re_axis` (one value per column)
    and `im_axis` (one value per row). Columns are distributed across
    threads; every cell is written to its own slot so the result does not
    depend on scheduling order.

    Args:
        re_axis: Real coordinate of each column, shape (ncols,)
        im_axis: Imaginary coordinate of each row, shape (nrows,)
        julia: If True, z starts at the sampled point and the offset is
            fixed; otherwise z starts at 0 and the offset is the point
        off_r, off_i: Fixed offset (only used when julia is True)
        exp: Real exponent
        limit: Maximum iteration count
        out: Output array (nrows, ncols), modified in place
    """
    nrows = im_axis.shape[0]
    ncols = re_axis.shape[0]

    for col in prange(ncols):
        x = re_axis[col]
        for row in range(nrows):
            y = im_axis[row]
            if julia:
                out[row, col] = escape_point(x, y, off_r, off_i, exp, limit)
            else:
                out[row, col] = escape_point(0.0, 0.0, x, y, exp, limit)


@jit(nopython=True, parallel=True, cache=True)
def gaussian_blur_3x3(src, kernel, renormalize, out):
    """
    Blur an escape grid with a 3x3 kernel.

    Border cells and cells that did not escape are copied unchanged.
    Neighbours that did not escape are left out of the weighted sum.

    Args:
        src: Source escape grid (nrows, ncols)
        kernel: 3x3 weights
        renormalize: Divide by the weights of the neighbours actually
            present instead of the full kernel sum
        out: Destination grid (nrows, ncols), modified in place
    """
    nrows, ncols = src.shape
    total = 0.0
    for kr in range(3):
        for kc in range(3):
            total += kernel[kr, kc]

    for col in prange(ncols):
        for row in range(nrows):
            val = src[row, col]
            if row == 0 or col == 0 or row == nrows - 1 or col == ncols - 1 or math.isnan(val):
                out[row, col] = val
                continue

            acc = 0.0
            weight = 0.0
            for kr in range(3):
                for kc in range(3):
                    neighbour = src[row + kr - 1, col + kc - 1]
                    if not math.isnan(neighbour):
                        acc += neighbour * kernel[kr, kc]
                        weight += kernel[kr, kc]

            if renormalize:
                out[row, col] = acc / weight
            else:
                out[row, col] = acc / total


@jit(nopython=True, parallel=True, cache=True)
def apply_sine_colorer(data, channels, out):
    """
    Map an escape grid to RGB with three phase-shifted sine waves.

    Args:
        data: Escape grid (nrows, ncols)
        channels: (3, 4) array, one row of (coef, freq, phase, offset)
            per RGB channel
        out: Output RGB image (nrows, ncols, 3) uint8, modified in place
    """
    nrows, ncols = data.shape

    for col in prange(ncols):
        for row in range(nrows):
            val = data[row, col]
            if math.isnan(val):
                # Points that never escaped are black
                out[row, col, 0] = 0
                out[row, col, 1] = 0
                out[row, col, 2] = 0
            else:
                for ch in range(3):
                    level = channels[ch, 0] * math.sin(val * channels[ch, 1] + channels[ch, 2]) + channels[ch, 3]
                    # Saturate rather than wrap; NaN from overflowed counts goes to 0
                    if not level > 0.0:
                        level = 0.0
                    elif level > 255.0:
                        level = 255.0
                    out[row, col, ch] = np.uint8(level)


def warmup_jit():
    """
    Warm up JIT compilation with small dummy arrays.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on first actual use.
    """
    axis = np.linspace(-1.0, 1.0, 4)
    data = np.empty((4, 4), dtype=np.float64)
    compute_escapes(axis, axis, False, 0.0, 0.0, 2.0, 10, data)
    blurred = np.empty_like(data)
    gaussian_blur_3x3(data, BLUR_KERNEL, True, blurred)
    rgb = np.zeros((4, 4, 3), dtype=np.uint8)
    apply_sine_colorer(data, np.ones((3, 4), dtype=np.float64), rgb)
