"""Domain Types: enums and bounded constants shared across the engine.

Invariants:
    - ColorRole has exactly four members; PALETTE_ROLE_ORDER is the tie-break priority
    - EditOp is the closed set of edit kinds; adding one means updating the edit
      schema, the resolver, the clamper and the applier together
    - All valid states encoded as Enums, no raw string matching
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class ColorRole(str, Enum):
    """Named palette roles an element color may reference."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    ACCENT = "accent"
    BACKGROUND = "background"


class EditOp(str, Enum):
    """The five edit operations an AI agent may request."""
    MOVE = "move"
    RESIZE = "resize"
    RECOLOR = "recolor"
    REORDER = "reorder"
    UPDATE_FONT_SIZE = "update_font_size"


# ─── Bounds & Limits ─────────────────────────────────────────────

PALETTE_ROLE_ORDER: tuple[ColorRole, ...] = (
    ColorRole.PRIMARY,
    ColorRole.SECONDARY,
    ColorRole.ACCENT,
    ColorRole.BACKGROUND,
)

DEFAULT_MAX_EDITS: int = 10
DEFAULT_MAX_DELTA: float = 0.2

Z_MIN: int = 0
Z_MAX: int = 1000

FONT_SIZE_MIN: int = 1
FONT_SIZE_MAX: int = 200
