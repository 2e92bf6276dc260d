"""
High-resolution still images.

A snapshot re-renders the live view at a much larger resolution than the
interactive display, writes it as a PNG and saves the (rescaled) render
context beside it so the same view can be rendered again later.
"""

import os
import time
from datetime import datetime

import pygame
from loguru import logger

from .geometry import Bounds
from .location import ScaleMethod
from .state import save_context


DEFAULT_SNAPSHOT_BOUNDS = Bounds(4000, 4000)


def save_png(rgb, path):
    """
    Save an RGB array as a PNG.

    Args:
        rgb: (height, width, 3) uint8 array
        path: Destination file
    """
    # pygame surfaces are indexed (x, y)
    surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
    pygame.image.save(surface, str(path))


def render_still(rctx, bounds, blur=False, progress=None):
    """
    Render a context to an RGB array at the given bounds.

    Args:
        rctx: RenderContext, already scaled for `bounds`
        bounds: Output resolution
        blur: Apply a gaussian blur before colorizing
        progress: Optional progress sink (see to_ematrix_with_progress)
    """
    start = time.perf_counter()
    bound = rctx.bind(bounds)
    if progress is not None:
        matrix = bound.to_ematrix_with_progress(progress)
    else:
        matrix = bound.to_ematrix()
    if blur:
        matrix = matrix.gaussian_blur()
    rgb = matrix.to_img(rctx.colorer)
    logger.debug(
        f"Rendered {bounds.width}x{bounds.height} in {time.perf_counter() - start:.2f}s "
        f"({matrix.interior_count()} interior cells)"
    )
    return rgb


def screenshot(rctx, live_bounds, img_dir, size=DEFAULT_SNAPSHOT_BOUNDS,
               method=ScaleMethod.MIN, blur=False, progress=None):
    """
    Save a high-resolution image and state file for the current view.

    The context is cloned and its location rescaled from `live_bounds` to
    `size`; `rctx` itself is left untouched.

    Returns:
        (json_path, png_path)
    """
    still = rctx.copy()
    still.loc = rctx.loc.scale(live_bounds, size, method)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    os.makedirs(img_dir, exist_ok=True)
    json_path = os.path.join(img_dir, f"escape_{timestamp}.json")
    png_path = os.path.join(img_dir, f"escape_{timestamp}.png")

    save_context(still, json_path)
    save_png(render_still(still, size, blur=blur, progress=progress), png_path)

    logger.info(f"High-resolution image saved to: {png_path}")
    return json_path, png_path
