"""Color Matcher: hex normalization, perceptual distance and palette-role snapping.

Invariants:
    - hex_to_rgb / normalize_hex_color RAISE InvalidColorError on malformed input
    - hex_to_closest_palette_role NEVER raises: invalid input hex degrades to "primary"
    - Roles compared in PALETTE_ROLE_ORDER with strict <, so the first minimum wins
    - Distance is CIE76 Delta E in L*a*b* (D65); RGB Euclidean is the numeric fallback

Design Decisions:
    - Plain math over a color library: four comparisons per call
"""

import logging
import math
import re
from collections.abc import Mapping

from labelguard.core.domain_types import ColorRole, PALETTE_ROLE_ORDER
from labelguard.core.errors import InvalidColorError
from labelguard.schemas.label_dsl import Palette

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]
Lab = tuple[float, float, float]

_HEX6_RE = re.compile(r"[0-9A-Fa-f]{6}")
_HEX3_OR_6_RE = re.compile(r"[0-9A-F]{3}|[0-9A-F]{6}")

# sRGB -> XYZ matrix and D65 reference white (scaled to Y = 100)
_SRGB_TO_XYZ = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)
_D65_WHITE = (95.047, 100.0, 108.883)
_LAB_EPSILON = 0.008856
_LAB_KAPPA = 7.787


# ─── Hex parsing ─────────────────────────────────────────────────

def hex_to_rgb(hex_color: str) -> RGB:
    """Strict 6-digit hex (optional leading '#') to an (r, g, b) tuple."""
    clean = hex_color.removeprefix("#")
    if not _HEX6_RE.fullmatch(clean):
        raise InvalidColorError(hex_color)
    return int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16)


def is_valid_hex_color(hex_color: str) -> bool:
    return bool(_HEX6_RE.fullmatch(hex_color.removeprefix("#")))


def normalize_hex_color(hex_color: str) -> str:
    """Normalize 3- or 6-digit hex to '#RRGGBB' (uppercase).

    '#fff' -> '#FFFFFF', 'a1b2c3' -> '#A1B2C3'. Anything else raises
    InvalidColorError.
    """
    if not isinstance(hex_color, str):
        raise InvalidColorError(repr(hex_color))
    clean = hex_color.removeprefix("#").upper()
    if not _HEX3_OR_6_RE.fullmatch(clean):
        raise InvalidColorError(hex_color)
    if len(clean) == 3:
        clean = "".join(c * 2 for c in clean)
    return f"#{clean}"


# ─── Perceptual distance ─────────────────────────────────────────

def _linearize(channel: float) -> float:
    """Inverse sRGB companding for a channel in [0, 1]."""
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def _lab_f(t: float) -> float:
    if t > _LAB_EPSILON:
        return math.cbrt(t)
    return _LAB_KAPPA * t + 16 / 116


def rgb_to_lab(rgb: RGB) -> Lab:
    """sRGB -> linear RGB -> CIE XYZ (D65) -> CIE L*a*b*."""
    linear = [_linearize(c / 255) for c in rgb]
    x, y, z = (
        sum(coef * c for coef, c in zip(row, linear)) * 100
        for row in _SRGB_TO_XYZ
    )
    xn, yn, zn = _D65_WHITE
    fx, fy, fz = _lab_f(x / xn), _lab_f(y / yn), _lab_f(z / zn)
    return 116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)


def _euclidean(a: tuple[float, ...], b: tuple[float, ...]) -> float:
    return math.sqrt(sum((p - q) ** 2 for p, q in zip(a, b)))


def color_distance_delta_e(
    hex1: str, hex2: str, logger: logging.Logger = logger,
) -> float:
    """CIE76 Delta E between two hex colors (0 = identical, >3 noticeable).

    Both colors are normalized first, so malformed hex raises
    InvalidColorError. If the L*a*b* conversion fails numerically the
    plain RGB Euclidean distance is returned instead.
    """
    rgb1 = hex_to_rgb(normalize_hex_color(hex1))
    rgb2 = hex_to_rgb(normalize_hex_color(hex2))
    try:
        distance = _euclidean(rgb_to_lab(rgb1), rgb_to_lab(rgb2))
        if not math.isfinite(distance):
            raise ArithmeticError(f"non-finite Lab distance: {distance}")
        return distance
    except (ArithmeticError, ValueError) as e:
        logger.warning(
            "LAB color conversion failed, using RGB distance: %s", e,
        )
        return _euclidean(rgb1, rgb2)


# ─── Palette role resolution ─────────────────────────────────────

def _palette_color(palette: Palette | Mapping[str, str], role: ColorRole) -> str:
    if isinstance(palette, Mapping):
        return palette[role.value]
    return getattr(palette, role.value)


def hex_to_closest_palette_role(
    hex_color: str,
    palette: Palette | Mapping[str, str],
    logger: logging.Logger = logger,
) -> ColorRole:
    """Snap an arbitrary hex color to the perceptually nearest palette role.

    An exact palette match always wins (distance 0). Ties resolve to the
    earlier role in primary, secondary, accent, background order. Invalid
    input hex returns ColorRole.PRIMARY; a malformed palette entry is
    skipped for the comparison.
    """
    try:
        normalized = normalize_hex_color(hex_color)
    except InvalidColorError as e:
        logger.warning(
            "Invalid hex color, defaulting to primary: %s", e.message,
        )
        return ColorRole.PRIMARY

    closest = ColorRole.PRIMARY
    min_distance = math.inf
    for role in PALETTE_ROLE_ORDER:
        try:
            distance = color_distance_delta_e(
                normalized, _palette_color(palette, role), logger,
            )
        except InvalidColorError as e:
            logger.warning(
                "Palette role %s skipped: %s", role.value, e.message,
            )
            continue
        except KeyError:
            logger.warning("Palette role %s missing, skipped", role.value)
            continue
        if distance < min_distance:
            min_distance = distance
            closest = role

    logger.debug(
        "Color %s mapped to palette role %s (distance %.3f)",
        hex_color, closest.value, min_distance,
    )
    return closest
