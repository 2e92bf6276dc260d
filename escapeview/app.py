"""
Interactive viewer for escapeview.

Contains the EscapeViewApp class which handles:
- Window setup and main loop
- Keyboard input, mapped 1:1 onto RenderContext transforms
- Rendering the live view on a coarse grid of cells
- Saving high-resolution snapshots of the current view

Controls:
    +/=, -/_   Zoom in / out
    w a s d    Pan
    t / g      More / fewer iterations
    y / h      Raise / lower the exponent
    x          Switch between Mandelbrot and Julia
    m          Reset the location
    b          Toggle blur
    p          Save a snapshot (PNG + JSON state)
    q / ESC    Quit
"""

import time

import pygame
from loguru import logger

from .colorer import get_colorer
from .compute import warmup_jit
from .geometry import Bounds
from .location import Location
from .render_context import RenderContext, Transform
from .snapshot import screenshot


KEY_TRANSFORMS = {
    pygame.K_PLUS: Transform.SCALE_IN,
    pygame.K_EQUALS: Transform.SCALE_IN,
    pygame.K_KP_PLUS: Transform.SCALE_IN,
    pygame.K_MINUS: Transform.SCALE_OUT,
    pygame.K_UNDERSCORE: Transform.SCALE_OUT,
    pygame.K_KP_MINUS: Transform.SCALE_OUT,
    pygame.K_a: Transform.TRANSLATE_LEFT,
    pygame.K_d: Transform.TRANSLATE_RIGHT,
    pygame.K_w: Transform.TRANSLATE_UP,
    pygame.K_s: Transform.TRANSLATE_DOWN,
    pygame.K_t: Transform.INC_ITERATIONS,
    pygame.K_g: Transform.DEC_ITERATIONS,
    pygame.K_y: Transform.INC_EXP,
    pygame.K_h: Transform.DEC_EXP,
    pygame.K_x: Transform.SWITCH_FN,
    pygame.K_m: Transform.RESET,
}


class EscapeViewApp:
    """
    Main application class for the interactive viewer.

    Owns the live RenderContext; every key press either applies a
    transform to it, saves a snapshot, or quits. The view is re-rendered
    only after the context changes.
    """

    WINDOW_TITLE = "escapeview - wasd to pan, +/- to zoom, p to save, q to quit"

    def __init__(self, settings, rctx=None, img_dir=None):
        """
        Initialize the application.

        Args:
            settings: Settings dict (see config.load_settings)
            rctx: Initial RenderContext (default: fitted to the window)
            img_dir: Snapshot directory (default: settings["img_dir"])
        """
        self.settings = settings
        self.width = int(settings["window_width"])
        self.height = int(settings["window_height"])
        self.cell_size = max(1, int(settings["cell_size"]))
        self.img_dir = img_dir or settings["img_dir"]
        self.blur = bool(settings["blur"])
        self.snapshot_bounds = Bounds(int(settings["screenshot_width"]), int(settings["screenshot_height"]))

        if rctx is None:
            rctx = RenderContext(
                loc=Location.for_bounds(self.bounds, aspect=(1.0, 1.0)),
                colorer=get_colorer(settings["colorer"]),
            )
        self.rctx = rctx

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.font = None

        self.current_surface = None
        self.render_ms = 0.0
        self.dirty = True
        self.running = False

    @property
    def bounds(self):
        """Evaluation grid: one cell per cell_size x cell_size window pixels."""
        return Bounds(max(1, self.width // self.cell_size), max(1, self.height // self.cell_size))

    def run(self):
        """Run the application main loop."""
        self._init_pygame()

        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit()
        pygame.display.set_caption(self.WINDOW_TITLE)

        self.running = True
        while self.running:
            self._handle_events()
            if self.dirty:
                self._render()
                self.dirty = False
            self._draw()
            self.clock.tick(30)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.width, self.height = event.w, event.h
                self.dirty = True
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False
        elif event.key == pygame.K_p:
            self._save_snapshot()
        elif event.key == pygame.K_b:
            self.blur = not self.blur
            self.dirty = True
        elif event.key in KEY_TRANSFORMS:
            self.rctx.transform(KEY_TRANSFORMS[event.key])
            self.dirty = True

    def _save_snapshot(self):
        """Save a high-resolution image and state file of the current view."""
        pygame.display.set_caption("Saving snapshot... (this may take a moment)")
        try:
            _, png_path = screenshot(
                self.rctx, self.bounds, self.img_dir,
                size=self.snapshot_bounds, blur=self.blur,
            )
        except OSError as e:
            logger.error(f"Could not save snapshot: {e}")
            pygame.display.set_caption(f"Snapshot failed: {e}")
            return
        pygame.display.set_caption(f"Saved: {png_path}")

    def _render(self):
        """Evaluate the live view and scale it up to the window."""
        start = time.perf_counter()
        bound = self.rctx.bind(self.bounds)
        rgb = bound.to_img(blur=self.blur)
        self.render_ms = (time.perf_counter() - start) * 1000.0

        surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
        self.current_surface = pygame.transform.scale(surface, (self.width, self.height))

    def _labels(self):
        loc = self.rctx.loc
        return [
            f"fn     = {type(self.rctx.function).__name__}",
            f"exp    = {self.rctx.function.exp:.4e}",
            f"re     = {loc.re0:.4e}",
            f"im     = {loc.im0:.4e}",
            f"iter   = {loc.max_iter}",
            f"scalar = {loc.scalar:.4e}",
            f"render = {self.render_ms:.0f}ms",
        ]

    def _draw(self):
        """Draw the current frame and the status overlay."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))

        for offset, label in enumerate(self._labels()):
            text = self.font.render(label, True, (255, 255, 255), (0, 0, 0))
            self.screen.blit(text, (4, 4 + offset * 16))

        pygame.display.flip()


def run(settings, rctx=None, img_dir=None):
    """
    Run the interactive viewer.

    Args:
        settings: Settings dict (see config.load_settings)
        rctx: Initial RenderContext, e.g. loaded from a state file
        img_dir: Directory for snapshots
    """
    app = EscapeViewApp(settings, rctx=rctx, img_dir=img_dir)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
