import colorsys
import math
from functools import lru_cache

GOLDEN_RATIO_CONJUGATE = 0.618033988749895
HASH_SATURATION = 0.72
HASH_LIGHTNESS = 0.52

FIXED_COLORS = {
    "main": "#3B82F6",
    "master": "#3B82F6",
    "develop": "#22C55E",
    "dev": "#22C55E",
    "hotfix": "#EF4444",
    "release": "#8B5CF6",
    "feature": "#F59E0B",
}

# Checked in order; "dev" last so "develop-x" and "dev-x" both land on green.
PREFIX_COLORS = (
    ("feature", FIXED_COLORS["feature"]),
    ("hotfix", FIXED_COLORS["hotfix"]),
    ("release", FIXED_COLORS["release"]),
    ("dev", FIXED_COLORS["develop"]),
)


def hash_string(value: str) -> int:
    """djb2 with xor over UTF-16 code units, as an unsigned 32-bit int."""
    data = value.encode("utf-16-le")
    h = 5381
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h * 33) ^ unit) & 0xFFFFFFFF
    return h


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """hue in degrees, saturation and lightness in 0..1."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness, saturation)
    return "#" + "".join(f"{math.floor(255 * c + 0.5):02x}" for c in (r, g, b))


def hashed_hue(name: str) -> int:
    return math.floor(360 * ((hash_string(name) * GOLDEN_RATIO_CONJUGATE) % 1))


@lru_cache(maxsize=None)
def get_branch_color(branch_name: str) -> str:
    """Deterministic color for a branch name.

    Conventional names get a fixed color; anything else gets a hue spread
    by the golden angle. Results are cached for the life of the process.
    """
    name = (branch_name or "").strip()
    lower = name.lower()

    if lower in FIXED_COLORS:
        return FIXED_COLORS[lower]
    for prefix, color in PREFIX_COLORS:
        if lower.startswith(prefix):
            return color

    return hsl_to_hex(hashed_hue(name), HASH_SATURATION, HASH_LIGHTNESS)
