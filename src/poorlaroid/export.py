"""Raster snapshots of a rendered grid, saved as 24-bit bitmaps."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from poorlaroid.engine import SPACE, CellGrid

logger = logging.getLogger(__name__)

FOLDER_NAME = "Poorlaroid"


def load_font(font_path: str | None, cell_height: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    if font_path:
        return ImageFont.truetype(font_path, cell_height)
    return ImageFont.load_default()


def rasterize(
    grid: CellGrid,
    cell_width: int = 8,
    cell_height: int = 16,
    font: ImageFont.ImageFont | ImageFont.FreeTypeFont | None = None,
) -> Image.Image:
    """Paint each cell's background and glyph into an RGB image."""
    background = grid.colours()[:, :, 0, :]
    pixels = background.repeat(cell_height, axis=0).repeat(cell_width, axis=1)
    image = Image.fromarray(np.ascontiguousarray(pixels), "RGB")

    if font is None:
        font = ImageFont.load_default()
    draw = ImageDraw.Draw(image)
    for y, row in enumerate(grid.rows()):
        for x, cell in enumerate(row):
            if cell.symbol == SPACE:
                continue
            draw.text((x * cell_width, y * cell_height), cell.char, fill=cell.foreground, font=font)
    return image


def pictures_dir() -> Path:
    base = os.environ.get("XDG_PICTURES_DIR")
    return Path(base) if base else Path.home() / "Pictures"


def capture_filename(now: datetime) -> str:
    return f"poorlaroid{now:%y%m%d_%H_%M_%S}.bmp"


def save_capture(image: Image.Image, folder: str | Path | None = None, now: datetime | None = None) -> Path:
    folder = Path(folder) if folder is not None else pictures_dir() / FOLDER_NAME
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / capture_filename(now or datetime.now())
    image.convert("RGB").save(path, format="BMP")
    logger.info("capture saved to %s", path, extra={"event": "capture_saved"})
    return path
