"""Frame-to-grid render passes and the session that serialises them."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from poorlaroid.engine import Cancelled, CellGrid, DegenerateSampling, PixelBuffer, Shader
from poorlaroid.sampling import sample_colours, sampling_for
from poorlaroid.shaders import default_shaders, find_shader

logger = logging.getLogger(__name__)


def render_frame(
    frame: PixelBuffer,
    grid: CellGrid,
    shader: Shader,
    flip: bool = False,
    cancel: threading.Event | None = None,
) -> None:
    """Run one pass of `shader` over `grid` using colours sampled from `frame`.

    The cancellation flag is polled before every cell. When it is set the pass
    raises `Cancelled`, keeping the cells already written and skipping
    `end_frame`. `DegenerateSampling` is raised before anything is touched.
    """
    sampling = sampling_for(grid, frame)
    colours = sample_colours(frame, sampling).tolist()
    width = grid.width

    shader.begin_frame()
    for y, row in enumerate(colours):
        for x, (r, g, b) in enumerate(row):
            if cancel is not None and cancel.is_set():
                raise Cancelled(f"pass cancelled at cell ({x}, {y})")
            column = width - 1 - x if flip else x
            shader.render_cell((r, g, b), grid[column, y])
    shader.end_frame()


class RenderSession:
    """Owns a grid and the shader set; allows one pass in flight at a time.

    Frames that arrive while a pass is still running are dropped. Swapping the
    shader or suspending the session cancels the running pass.
    """

    def __init__(
        self,
        grid: CellGrid,
        shaders: Sequence[Shader] | None = None,
        shader: str | None = None,
        flip: bool = False,
    ):
        self.grid = grid
        self.shaders = list(shaders) if shaders is not None else default_shaders()
        if not self.shaders:
            raise ValueError("A render session needs at least one shader")
        self.shader = find_shader(self.shaders, shader) if shader else self.shaders[0]
        self.flip = flip
        self.suspended = False
        self._pass_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._cancel: threading.Event | None = None
        self._clear_pending = False

    @property
    def busy(self) -> bool:
        return self._pass_lock.locked()

    def submit(self, frame: PixelBuffer) -> bool:
        """Render `frame` into the grid. Returns True only for a completed pass."""
        if self.suspended:
            return False
        if not self._pass_lock.acquire(blocking=False):
            logger.debug("frame dropped, pass already running")
            return False
        try:
            with self._state_lock:
                if self.suspended:
                    return False
                cancel = self._cancel = threading.Event()
                shader, flip = self.shader, self.flip
            render_frame(frame, self.grid, shader, flip, cancel)
            return True
        except Cancelled as exc:
            logger.debug("%s", exc)
            return False
        except DegenerateSampling as exc:
            logger.warning("frame ignored: %s", exc, extra={"event": "degenerate_sampling"})
            return False
        finally:
            with self._state_lock:
                self._cancel = None
                if self._clear_pending:
                    self.grid.clear()
                    self._clear_pending = False
            self._pass_lock.release()

    def cancel(self) -> None:
        with self._state_lock:
            if self._cancel is not None:
                self._cancel.set()

    def select_shader(self, name: str) -> Shader:
        """Switch to the shader called `name` (case-insensitive)."""
        return self._swap(find_shader(self.shaders, name))

    def cycle_shader(self) -> Shader:
        index = self.shaders.index(self.shader)
        return self._swap(self.shaders[(index + 1) % len(self.shaders)])

    def _swap(self, shader: Shader) -> Shader:
        with self._state_lock:
            self.shader = shader
            if self._cancel is not None:
                # the running pass clears the grid on its way out
                self._cancel.set()
                self._clear_pending = True
            else:
                self.grid.clear()
        logger.info("shader set to %s", shader.name, extra={"event": "shader_swap"})
        return shader

    def toggle_flip(self) -> bool:
        with self._state_lock:
            self.flip = not self.flip
        return self.flip

    def suspend(self) -> None:
        """Stop live rendering, e.g. while a capture is being written."""
        with self._state_lock:
            self.suspended = True
            if self._cancel is not None:
                self._cancel.set()

    def resume(self) -> None:
        with self._state_lock:
            self.suspended = False
