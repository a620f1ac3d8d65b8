import numpy as np
import pytest

from poorlaroid.charsets import DIAMOND, POSTERIZE_SHADES, RAMP, SHADES
from poorlaroid.colour import brighter, from_hsl, luma, quantize_channel
from poorlaroid.engine import Cell, CellGrid, PixelBuffer, UnknownShaderName
from poorlaroid.render import render_frame
from poorlaroid.shaders import (
    BlankShader,
    DuotoneShader,
    GREY,
    HueCycleShader,
    PosterizeShader,
    RampShader,
    SolidShader,
    default_shaders,
    find_shader,
)


def shade(shader, colour):
    cell = Cell()
    shader.render_cell(colour, cell)
    return cell


def test_luma_spans_full_range():
    assert luma((0, 0, 0)) == 0
    assert luma((255, 255, 255)) == 255
    assert luma((0, 255, 0)) > luma((255, 0, 0)) > luma((0, 0, 255))


def test_quantize_channel_steps():
    assert [quantize_channel(v, 3, 255) for v in (0, 85, 86, 170, 171, 255)] == [0, 0, 85, 85, 170, 170]
    assert quantize_channel(200, 3, 150) == 255


def test_solid_sets_background_only():
    cell = shade(SolidShader(), (10, 20, 30))
    assert cell.background == (10, 20, 30)
    assert cell.foreground == Cell().foreground
    assert cell.symbol == Cell().symbol


def test_ramp_extremes():
    shader = RampShader()
    assert shade(shader, (0, 0, 0)).symbol == ord(RAMP[0])
    assert shade(shader, (255, 255, 255)).symbol == ord(RAMP[-1])


def test_ramp_is_monotonic():
    shader = RampShader()
    indices = [RAMP.index(shade(shader, (v, v, v)).char) for v in range(256)]
    assert indices == sorted(indices)
    assert indices[0] == 0
    assert indices[-1] == len(RAMP) - 1


def test_ramp_brightens_foreground_and_keeps_background():
    cell = shade(RampShader(), (0, 0, 0))
    assert cell.foreground == brighter((0, 0, 0)) == (64, 64, 64)
    assert cell.background == Cell().background


def test_hue_cycle_uses_fixed_glyph_and_luma_lightness():
    shader = HueCycleShader(clock=lambda: 0.0)
    black = shade(shader, (0, 0, 0))
    white = shade(shader, (255, 255, 255))
    assert black.symbol == white.symbol == ord(DIAMOND)
    assert black.foreground == (0, 0, 0)
    assert white.foreground == (255, 255, 255)


def test_hue_cycle_rotates_with_time():
    now = [0.0]
    shader = HueCycleShader(clock=lambda: now[0])
    shader.begin_frame()
    start = shade(shader, (128, 128, 128)).foreground
    now[0] = 1.0
    shader.begin_frame()
    half = shade(shader, (128, 128, 128)).foreground
    now[0] = 2.0
    shader.begin_frame()
    full = shade(shader, (128, 128, 128)).foreground
    assert half != start
    assert full == start


def test_hue_cycle_holds_phase_for_a_whole_pass():
    ticks = iter(range(100))
    shader = HueCycleShader(clock=lambda: next(ticks) * 0.1)
    grid = CellGrid(4, 3)
    frame = PixelBuffer(np.full((6, 8, 3), 128, dtype=np.uint8))
    render_frame(frame, grid, shader)
    assert len({cell.foreground for cell in grid.cells}) == 1


def test_hue_cycle_hue_depends_on_luma():
    shader = HueCycleShader(clock=lambda: 0.0)
    level = 64 / 255
    assert shade(shader, (64, 64, 64)).foreground == from_hsl(level * 2, level, level)


def test_posterize_quantizes_channels():
    cell = shade(PosterizeShader(), (0, 100, 255))
    assert cell.foreground == (0, 85, 170)
    assert cell.symbol == ord(POSTERIZE_SHADES[1])


def test_posterize_follows_ceiling():
    shader = PosterizeShader()
    shader.calibration.max_luma = 100
    cell = shade(shader, (255, 255, 255))
    assert cell.foreground == (255, 255, 255)
    assert cell.symbol == ord(POSTERIZE_SHADES[-1])


@pytest.mark.parametrize(
    "value, foreground, background, glyph",
    [
        (0, (0, 0, 0), (0, 0, 0), SHADES[0]),
        (128, GREY, (0, 0, 0), SHADES[2]),
        (255, (255, 255, 255), GREY, SHADES[0]),
    ],
)
def test_duotone_palette(value, foreground, background, glyph):
    cell = shade(DuotoneShader(), (value, value, value))
    assert cell.foreground == foreground
    assert cell.background == background
    assert cell.char == glyph


def test_blank_leaves_cell_alone():
    cell = Cell(foreground=(1, 2, 3), background=(4, 5, 6), symbol=ord("x"))
    BlankShader().render_cell((200, 100, 50), cell)
    assert cell == Cell(foreground=(1, 2, 3), background=(4, 5, 6), symbol=ord("x"))


@pytest.mark.parametrize("factory", [PosterizeShader, DuotoneShader, HueCycleShader])
def test_calibrated_shaders_record_and_settle(factory):
    shader = factory()
    shader.begin_frame()
    for _ in range(3):
        shade(shader, (128, 128, 128))
    assert shader.calibration.histogram[32] == 3
    shader.end_frame()
    assert shader.max_luma == (128 + 255) // 2
    assert shader.calibration.histogram.sum() == 0


def test_stateless_shaders_have_no_calibration():
    for shader in (SolidShader(), RampShader(), BlankShader()):
        assert not hasattr(shader, "calibration")


def test_default_shaders_have_unique_names():
    shaders = default_shaders()
    names = [s.name.lower() for s in shaders]
    assert len(shaders) == 6
    assert len(set(names)) == len(names)
    assert names == ["retro", "typewriter", "camsole", "microwaavee", "noire", "onio"]


def test_find_shader_is_case_insensitive():
    shaders = default_shaders()
    assert isinstance(find_shader(shaders, "typewriter"), RampShader)
    assert isinstance(find_shader(shaders, "NOIRE"), DuotoneShader)


@pytest.mark.parametrize("name", ["Typ", "", "retro "])
def test_find_shader_requires_exact_name(name):
    with pytest.raises(UnknownShaderName):
        find_shader(default_shaders(), name)
