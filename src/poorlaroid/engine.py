from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np
from PIL import Image

RGB = tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
WHITE: RGB = (255, 255, 255)
SPACE = 0x20


class DegenerateSampling(ValueError):
    """The output grid is larger than the source frame in at least one axis."""


class Cancelled(Exception):
    """A render pass was aborted through its cancellation flag."""


class UnknownShaderName(LookupError):
    pass


class PixelBuffer:
    """Read-only view over one frame's RGB samples."""

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Expected an (H, W, 3) array, got shape {pixels.shape}")
        pixels = np.array(pixels, dtype=np.uint8, copy=True)
        pixels.setflags(write=False)
        self.pixels = pixels

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def __getitem__(self, xy: tuple[int, int]) -> RGB:
        x, y = xy
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        if len(data) != width * height * 3:
            raise ValueError(f"Expected {width * height * 3} bytes for {width}x{height} RGB, got {len(data)}")
        return cls(np.frombuffer(data, dtype=np.uint8).reshape(height, width, 3))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        return cls(np.asarray(image.convert("RGB"), dtype=np.uint8))


@dataclass
class Cell:
    foreground: RGB = WHITE
    background: RGB = BLACK
    symbol: int = SPACE

    @property
    def char(self) -> str:
        return chr(self.symbol)


@dataclass
class CellGrid:
    width: int
    height: int
    cells: list[Cell] = field(default_factory=list)  # row-major

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        if not self.cells:
            self.cells = [Cell() for _ in range(self.width * self.height)]
        elif len(self.cells) != self.width * self.height:
            raise ValueError(f"Expected {self.width * self.height} cells, got {len(self.cells)}")

    def __getitem__(self, xy: tuple[int, int]) -> Cell:
        x, y = xy
        return self.cells[y * self.width + x]

    def clear(self) -> None:
        for cell in self.cells:
            cell.foreground, cell.background, cell.symbol = WHITE, BLACK, SPACE

    def copy(self) -> "CellGrid":
        return CellGrid(self.width, self.height, copy.deepcopy(self.cells))

    def rows(self) -> list[list[Cell]]:
        return [self.cells[y * self.width : (y + 1) * self.width] for y in range(self.height)]

    def chars(self) -> list[str]:
        """One string per row."""
        return ["".join(cell.char for cell in row) for row in self.rows()]

    def colours(self) -> np.ndarray:
        """(rows, cols, 2, 3) uint8, where [:,:,0,:] is bg and [:,:,1,:] is fg."""
        result = np.zeros((self.height, self.width, 2, 3), dtype=np.uint8)
        for y, row in enumerate(self.rows()):
            for x, cell in enumerate(row):
                result[y, x, 0] = cell.background
                result[y, x, 1] = cell.foreground
        return result


class Shader(Protocol):
    name: str

    def begin_frame(self) -> None: ...

    def render_cell(self, colour: RGB, cell: Cell) -> None:
        """Write the appearance for a sampled source colour into a cell."""
        ...

    def end_frame(self) -> None: ...
