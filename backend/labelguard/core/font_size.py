"""Font-Size Resolver: turns an AI font-size hint into a pixel size.

Invariants:
    - Every computed size is rounded half-up and clamped to [FONT_SIZE_MIN, FONT_SIZE_MAX]
    - Unrecognized hints return current_size unchanged (never raises)
    - Resolution order: number, pixel string, percentage, keyword, leading float

Design Decisions:
    - Multipliers are a frozen dataclass so the module default can be shared freely
"""

import logging
import math
import re
from dataclasses import dataclass

from labelguard.core.domain_types import FONT_SIZE_MIN, FONT_SIZE_MAX

logger = logging.getLogger(__name__)

_PIXEL_RE = re.compile(r"^(\d+(?:\.\d+)?)(?:px)?$")
_PERCENT_RE = re.compile(r"^(\d+(?:\.\d+)?)%$")
_LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?")


@dataclass(frozen=True)
class FontSizeMultipliers:
    """Relative-size multipliers, modelled on the CSS size keywords."""
    larger: float = 1.2
    smaller: float = 0.8
    normal: float = 1.0
    x_large: float = 1.5
    xx_large: float = 2.0
    x_small: float = 0.625
    xx_small: float = 0.5

    def keyword_table(self) -> dict[str, float]:
        """Keyword (lowercase) -> multiplier, including aliases."""
        return {
            "xx-small": self.xx_small,
            "x-small": self.x_small,
            "small": self.smaller,
            "smaller": self.smaller,
            "medium": self.normal,
            "normal": self.normal,
            "large": self.larger,
            "larger": self.larger,
            "big": self.larger,
            "bigger": self.larger,
            "x-large": self.x_large,
            "xx-large": self.xx_large,
        }


DEFAULT_FONT_SIZE_MULTIPLIERS = FontSizeMultipliers()


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp_font_size(value: float) -> int:
    """Round half-up and clamp into the allowed pixel range."""
    if isinstance(value, int):
        return max(FONT_SIZE_MIN, min(FONT_SIZE_MAX, value))
    if math.isinf(value):
        return FONT_SIZE_MAX if value > 0 else FONT_SIZE_MIN
    return max(FONT_SIZE_MIN, min(FONT_SIZE_MAX, round_half_up(value)))


def parse_font_size(
    hint: str | int | float,
    current_size: int | float,
    multipliers: FontSizeMultipliers = DEFAULT_FONT_SIZE_MULTIPLIERS,
    logger: logging.Logger = logger,
) -> int | float:
    """Resolve a font-size hint to pixels.

    Supported formats:
        - numbers: 16, 20.5
        - pixel strings: "16px", "20"
        - percentages of current_size: "120%", "80%"
        - keywords: "larger", "smaller", "x-large", "xx-small", "big", ...

    parse_font_size("larger", 20) == 24; parse_font_size("150%", 20) == 30;
    parse_font_size(999, 10) == 200; parse_font_size("bogus", 18) == 18.
    """
    if isinstance(hint, (int, float)) and not isinstance(hint, bool):
        if isinstance(hint, float) and math.isnan(hint):
            return _unrecognized(hint, current_size, logger)
        return clamp_font_size(hint)

    if not isinstance(hint, str):
        return _unrecognized(hint, current_size, logger)

    text = hint.lower().strip()
    if not text:
        return current_size

    pixel = _PIXEL_RE.match(text)
    if pixel:
        return clamp_font_size(float(pixel.group(1)))

    percent = _PERCENT_RE.match(text)
    if percent:
        return clamp_font_size(current_size * float(percent.group(1)) / 100)

    multiplier = multipliers.keyword_table().get(text)
    if multiplier is not None:
        size = clamp_font_size(current_size * multiplier)
        logger.debug(
            "Parsed font size hint %r: %s x %s -> %s",
            text, current_size, multiplier, size,
        )
        return size

    leading = _LEADING_FLOAT_RE.match(text)
    if leading:
        parsed = float(leading.group(0))
        if parsed > 0:
            return clamp_font_size(parsed)

    return _unrecognized(hint, current_size, logger)


def _unrecognized(
    hint: object, current_size: int | float, logger: logging.Logger,
) -> int | float:
    logger.warning(
        "Unrecognized font size hint %r, using current size %s",
        hint, current_size,
    )
    return current_size
