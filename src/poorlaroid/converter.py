from pathlib import Path

from PIL import Image

from poorlaroid.engine import CellGrid, PixelBuffer, Shader
from poorlaroid.render import render_frame


def _format_colour(grid: CellGrid) -> str:
    """Wrap each glyph in ANSI truecolor escape sequences."""
    out = []
    for row in grid.rows():
        parts = []
        for cell in row:
            fr, fg, fb = cell.foreground
            br, bg, bb = cell.background
            parts.append(f"\033[38;2;{fr};{fg};{fb}m\033[48;2;{br};{bg};{bb}m{cell.char}")
        parts.append("\033[0m")
        out.append("".join(parts))
    return "\n".join(out)


def grid_to_ansi(grid: CellGrid, colour: bool = True) -> str:
    if colour:
        return _format_colour(grid)
    return "\n".join(grid.chars())


def render_image(
    image: Image.Image | str | Path,
    shader: Shader,
    width: int,
    height: int,
    flip: bool = False,
) -> CellGrid:
    """Render a single still image into a fresh width x height grid."""
    if not isinstance(image, Image.Image):
        image = Image.open(image)
    grid = CellGrid(width, height)
    render_frame(PixelBuffer.from_image(image), grid, shader, flip)
    return grid
