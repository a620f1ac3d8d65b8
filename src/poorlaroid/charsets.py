# Darkest to densest, one glyph per brightness step
RAMP = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"

# Light, medium and dark shade followed by a full block
SHADES = "░▒▓█"

# Left-anchored eighth blocks growing from one to six eighths
POSTERIZE_SHADES = "▏▎▍▌▋▊"

DIAMOND = "♦"


def codes(charset: str) -> tuple[int, ...]:
    """Symbol codes for each glyph of a charset."""
    return tuple(ord(c) for c in charset)
