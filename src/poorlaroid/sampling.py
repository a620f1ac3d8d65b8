from dataclasses import dataclass

import numpy as np

from poorlaroid.engine import CellGrid, DegenerateSampling, PixelBuffer


@dataclass(frozen=True)
class BlockSampling:
    """Nearest-block mapping from an output grid onto a source frame.

    Both block dimensions derive from the shorter source axis so sampled blocks
    stay square; the longer axis is centre-cropped.
    """

    block_width: int
    block_height: int
    offset_x: int
    offset_y: int
    columns: int
    rows: int

    def source_coordinate(self, x: int, y: int) -> tuple[int, int]:
        return x * self.block_width + self.offset_x, y * self.block_height + self.offset_y

    def coordinate_grid(self) -> tuple[np.ndarray, np.ndarray]:
        """Source (xs, ys) index arrays, each of shape (rows, columns)."""
        xs = np.arange(self.columns) * self.block_width + self.offset_x
        ys = np.arange(self.rows) * self.block_height + self.offset_y
        return np.meshgrid(xs, ys)


def block_sampling(columns: int, rows: int, width: int, height: int) -> BlockSampling:
    if width < columns or height < rows:
        raise DegenerateSampling(f"Source {width}x{height} is smaller than the {columns}x{rows} grid")
    side = min(width, height)
    block_height = side // rows
    block_width = side // columns
    if block_height <= 0 or block_width <= 0:
        raise DegenerateSampling(f"Source {width}x{height} yields empty blocks for a {columns}x{rows} grid")
    return BlockSampling(
        block_width=block_width,
        block_height=block_height,
        offset_x=(width - block_width * columns) // 2,
        offset_y=(height - block_height * rows) // 2,
        columns=columns,
        rows=rows,
    )


def sampling_for(grid: CellGrid, frame: PixelBuffer) -> BlockSampling:
    return block_sampling(grid.width, grid.height, frame.width, frame.height)


def sample_colours(frame: PixelBuffer, sampling: BlockSampling) -> np.ndarray:
    """Gather the representative colour of every block. Returns (rows, columns, 3) uint8."""
    xs, ys = sampling.coordinate_grid()
    return frame.pixels[ys, xs]
