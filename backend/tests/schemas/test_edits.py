"""Edit Schemas: tests for the discriminated Edit union and parse_edit.

Tests cover:
    - every EditOp parses through parse_edit
    - camelCase and snake_case keys accepted; unknown keys ignored
    - to_dict() emits camelCase JSON
    - edits are frozen
    - structural failures raise SchemaViolationError
"""

import pytest
from pydantic import ValidationError

from labelguard.core.domain_types import ColorRole, EditOp
from labelguard.core.errors import ErrorCode, SchemaViolationError
from labelguard.schemas.edits import (
    MoveEdit, RecolorEdit, ReorderEdit, ResizeEdit, UpdateFontSizeEdit, parse_edit,
)


MINIMAL_EDITS = {
    EditOp.MOVE: ({"op": "move", "id": "a", "dx": 0.1, "dy": 0}, MoveEdit),
    EditOp.RESIZE: ({"op": "resize", "id": "a", "dw": 0, "dh": -0.1}, ResizeEdit),
    EditOp.RECOLOR: ({"op": "recolor", "id": "a", "color": "accent"}, RecolorEdit),
    EditOp.REORDER: ({"op": "reorder", "id": "a", "z": 4}, ReorderEdit),
    EditOp.UPDATE_FONT_SIZE: (
        {"op": "update_font_size", "id": "a", "fontSize": 12}, UpdateFontSizeEdit,
    ),
}


def test_every_op_has_a_variant():
    assert set(MINIMAL_EDITS) == set(EditOp)


@pytest.mark.parametrize("op", list(EditOp))
def test_parse_edit_dispatches_on_op(op):
    raw, cls = MINIMAL_EDITS[op]
    edit = parse_edit(raw)
    assert isinstance(edit, cls)
    assert edit.op == op.value


def test_parse_edit_passes_typed_edits_through():
    edit = ReorderEdit(id="a", z=1)
    assert parse_edit(edit) is edit


def test_integral_float_accepted_for_z():
    assert parse_edit({"op": "reorder", "id": "a", "z": 3.0}).z == 3


def test_unknown_keys_ignored():
    edit = parse_edit({"op": "recolor", "id": "a", "color": "primary", "reason": "contrast"})
    assert edit.color == ColorRole.PRIMARY
    assert "reason" not in edit.to_dict()


def test_to_dict_uses_camel_case():
    edit = UpdateFontSizeEdit(id="title", font_size=18)
    assert edit.to_dict() == {"op": "update_font_size", "id": "title", "fontSize": 18}


def test_recolor_serializes_role_value():
    assert RecolorEdit(id="a", color=ColorRole.ACCENT).to_dict()["color"] == "accent"


def test_edits_are_frozen():
    edit = MoveEdit(id="a", dx=0.1, dy=0.1)
    with pytest.raises(ValidationError):
        edit.dx = 0.5


def test_parse_edit_raises_schema_violation():
    with pytest.raises(SchemaViolationError) as exc_info:
        parse_edit({"op": "move", "id": "a", "dx": "far", "dy": 0})
    assert exc_info.value.code == ErrorCode.SCHEMA_VIOLATION
    assert "dx" in exc_info.value.message


def test_infinite_delta_rejected():
    with pytest.raises(SchemaViolationError):
        parse_edit({"op": "resize", "id": "a", "dw": float("inf"), "dh": 0})
