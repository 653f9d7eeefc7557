"""Domain Types: tests for enums and bounded constants.

Tests cover:
    - ColorRole and EditOp values match their wire strings
    - PALETTE_ROLE_ORDER covers every role in priority order
    - Limit constants
"""

from labelguard.core.domain_types import (
    ColorRole,
    EditOp,
    PALETTE_ROLE_ORDER,
    DEFAULT_MAX_EDITS,
    DEFAULT_MAX_DELTA,
    Z_MIN,
    Z_MAX,
    FONT_SIZE_MIN,
    FONT_SIZE_MAX,
)


def test_color_role_values():
    assert [r.value for r in ColorRole] == ["primary", "secondary", "accent", "background"]


def test_color_role_is_str():
    assert ColorRole.ACCENT == "accent"


def test_edit_op_values():
    assert {op.value for op in EditOp} == {
        "move", "resize", "recolor", "reorder", "update_font_size",
    }


def test_palette_role_order_covers_all_roles():
    assert PALETTE_ROLE_ORDER == (
        ColorRole.PRIMARY, ColorRole.SECONDARY, ColorRole.ACCENT, ColorRole.BACKGROUND,
    )
    assert set(PALETTE_ROLE_ORDER) == set(ColorRole)


def test_limits():
    assert DEFAULT_MAX_EDITS == 10
    assert DEFAULT_MAX_DELTA == 0.2
    assert (Z_MIN, Z_MAX) == (0, 1000)
    assert (FONT_SIZE_MIN, FONT_SIZE_MAX) == (1, 200)
