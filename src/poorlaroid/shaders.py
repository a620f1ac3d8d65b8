"""Colour and symbol strategies applied to each sampled cell.

Every shader follows the same three-phase pass contract: `begin_frame` once
before the first cell, `render_cell` for each cell, `end_frame` only when the
pass ran to completion. The exposure-normalising shaders own a
`LumaCalibration` and feed it from `render_cell`, so their brightness ceiling
tracks the scene from one frame to the next.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Sequence

from poorlaroid.calibration import LumaCalibration
from poorlaroid.charsets import DIAMOND, POSTERIZE_SHADES, RAMP, SHADES, codes
from poorlaroid.colour import brighter, clerp, from_hsl, luma, quantize_channel
from poorlaroid.engine import BLACK, RGB, WHITE, Cell, Shader, UnknownShaderName

logger = logging.getLogger(__name__)

GREY: RGB = (128, 128, 128)


class BaseShader:
    name = ""

    def begin_frame(self) -> None:
        pass

    def render_cell(self, colour: RGB, cell: Cell) -> None:
        raise NotImplementedError

    def end_frame(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class CalibratedShader(BaseShader):
    """Base for shaders that normalise brightness against a running ceiling."""

    def __init__(self, keep_cancelled_samples: bool = True):
        self.calibration = LumaCalibration(keep_cancelled_samples)

    @property
    def max_luma(self) -> int:
        return self.calibration.max_luma

    def begin_frame(self) -> None:
        self.calibration.begin()

    def render_cell(self, colour: RGB, cell: Cell) -> None:
        value = luma(colour)
        self.shade(colour, value, cell)
        self.calibration.record(value)

    def shade(self, colour: RGB, value: int, cell: Cell) -> None:
        raise NotImplementedError

    def end_frame(self) -> None:
        previous = self.calibration.max_luma
        self.calibration.settle()
        if self.calibration.max_luma != previous:
            logger.debug("%s ceiling %d -> %d", self.name, previous, self.calibration.max_luma)


class SolidShader(BaseShader):
    name = "Retro"

    def render_cell(self, colour: RGB, cell: Cell) -> None:
        cell.background = colour


class RampShader(BaseShader):
    name = "Typewriter"

    def __init__(self, ramp: str = RAMP):
        self.symbols = codes(ramp)

    def render_cell(self, colour: RGB, cell: Cell) -> None:
        norm = luma(colour) / 255
        cell.foreground = brighter(colour)
        cell.symbol = self.symbols[math.floor(norm * (len(self.symbols) - 1))]


class HueCycleShader(CalibratedShader):
    name = "Microwaavee"
    period = 2.0

    def __init__(self, keep_cancelled_samples: bool = True, clock: Callable[[], float] = time.monotonic):
        super().__init__(keep_cancelled_samples)
        self.clock = clock
        self.started = clock()
        self.frame_phase = 0.0
        self.symbol = ord(DIAMOND)

    def phase(self) -> float:
        return (self.clock() - self.started) / self.period

    def begin_frame(self) -> None:
        super().begin_frame()
        # one timestamp per pass keeps a uniform frame a uniform hue
        self.frame_phase = self.phase()

    def shade(self, colour: RGB, value: int, cell: Cell) -> None:
        level = value / 255
        cell.foreground = from_hsl((level * 2 + self.frame_phase) % 1.0, level, level)
        cell.symbol = self.symbol


class PosterizeShader(CalibratedShader):
    name = "Camsole"
    steps = 3

    def __init__(self, keep_cancelled_samples: bool = True):
        super().__init__(keep_cancelled_samples)
        self.symbols = codes(POSTERIZE_SHADES)

    def shade(self, colour: RGB, value: int, cell: Cell) -> None:
        ceiling = self.calibration.max_luma
        cell.foreground = tuple(quantize_channel(c, self.steps, ceiling) for c in colour)  # type: ignore[assignment]
        index = int(clerp(0, len(self.symbols) - 1, self.calibration.norm(value)))
        cell.symbol = self.symbols[index]


class DuotoneShader(CalibratedShader):
    name = "Noire"
    palette: tuple[RGB, ...] = (BLACK, GREY, WHITE)

    def __init__(self, keep_cancelled_samples: bool = True):
        super().__init__(keep_cancelled_samples)
        self.symbols = codes(SHADES)

    def shade(self, colour: RGB, value: int, cell: Cell) -> None:
        shade_count = len(self.symbols)
        index = int(clerp(0, len(self.palette) * shade_count, self.calibration.norm(value)))
        front = min(index // shade_count, len(self.palette) - 1)
        cell.foreground = self.palette[front]
        cell.background = self.palette[max(front - 1, 0)]
        cell.symbol = self.symbols[index % shade_count]


class BlankShader(BaseShader):
    name = "Onio"

    def render_cell(self, colour: RGB, cell: Cell) -> None:
        pass


def default_shaders(keep_cancelled_samples: bool = True) -> list[Shader]:
    """One instance of every shader, in selection order."""
    return [
        SolidShader(),
        RampShader(),
        PosterizeShader(keep_cancelled_samples),
        HueCycleShader(keep_cancelled_samples),
        DuotoneShader(keep_cancelled_samples),
        BlankShader(),
    ]


def find_shader(shaders: Sequence[Shader], name: str) -> Shader:
    wanted = name.lower()
    for shader in shaders:
        if shader.name.lower() == wanted:
            return shader
    raise UnknownShaderName(f"No shader named {name!r}")
