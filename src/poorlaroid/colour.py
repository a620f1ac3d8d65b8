import colorsys

from poorlaroid.engine import RGB, WHITE


def luma(colour: RGB) -> int:
    """Perceptual brightness 0-255 using Rec. 601 weights."""
    r, g, b = colour
    return (299 * r + 587 * g + 114 * b + 500) // 1000


def clerp(a: float, b: float, p: float) -> float:
    """Linear interpolation from a to b, clamped to [a, b]."""
    return min(max(p * (b - a) + a, a), b)


def lerp_colour(start: RGB, end: RGB, amount: float) -> RGB:
    return tuple(round(s + (e - s) * amount) for s, e in zip(start, end))  # type: ignore[return-value]


def brighter(colour: RGB) -> RGB:
    return lerp_colour(colour, WHITE, 0.25)


def from_hsl(hue: float, saturation: float, lightness: float) -> RGB:
    r, g, b = colorsys.hls_to_rgb(hue % 1.0, lightness, saturation)
    return round(r * 255), round(g * 255), round(b * 255)


def quantize_channel(value: int, steps: int, max_luma: int) -> int:
    """Snap a channel to one of `steps` levels spread over [0, max_luma]."""
    for i in range(steps):
        if value <= max_luma * (i + 1) // steps:
            return 255 * i // steps
    return 255
