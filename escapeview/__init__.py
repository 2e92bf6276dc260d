"""
escapeview - escape-time fractal explorer

Evaluates power-Mandelbrot and power-Julia functions over a window of
the complex plane with Numba-parallelized, smoothed escape counts, and
colorizes the results with sine-wave palettes. Views can be explored
interactively with pygame or rendered to high-resolution PNGs.

Quick Start:
    from escapeview import Bounds, RenderContext, Transform
    ctx = RenderContext()
    ctx.transform(Transform.SCALE_IN)
    rgb = ctx.bind(Bounds(400, 300)).to_ematrix().to_img(ctx.colorer)

Or from command line:
    escapeview run
    escapeview render view.json 1920 1080 view.png

Package Structure:
    - geometry.py: Bounds / Pos / Offset pixel value types
    - location.py: Location, the pixel -> complex plane mapping
    - compute.py: JIT-compiled escape, blur and colorize kernels
    - functions.py: Mandelbrot and Julia escape functions
    - ematrix.py: EscapeMatrix, the grid of escapes from one render
    - colorer.py: Sine-wave colorers and presets
    - render_context.py: RenderContext, transforms and binding
    - state.py: JSON save/load of render contexts
    - snapshot.py: High-resolution stills
    - app.py: Interactive pygame viewer
    - cli.py: Command line interface
"""

from .geometry import Bounds, Offset, Pos
from .location import Location, ScaleMethod
from .functions import EscapeFunction, Julia, Mandelbrot
from .ematrix import EscapeMatrix
from .colorer import COLORERS, SineChannel, SineRGB, get_colorer, list_colorer_names
from .render_context import BoundRenderContext, RenderContext, Transform
from .state import StateError, load_context, save_context

__version__ = "1.0.0"
__all__ = [
    "Bounds",
    "Offset",
    "Pos",
    "Location",
    "ScaleMethod",
    "EscapeFunction",
    "Julia",
    "Mandelbrot",
    "EscapeMatrix",
    "COLORERS",
    "SineChannel",
    "SineRGB",
    "get_colorer",
    "list_colorer_names",
    "BoundRenderContext",
    "RenderContext",
    "Transform",
    "StateError",
    "load_context",
    "save_context",
]
