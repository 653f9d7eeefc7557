"""Error Hierarchy: tests for codes, categories and the response envelope.

Tests cover:
    - every concrete error is a LabelGuardError with the right code/category
    - messages match the documented wording
    - to_response() envelope shape
    - describe_validation_error flattens pydantic errors
"""

import pytest
from pydantic import BaseModel, ValidationError

from labelguard.core.errors import (
    ErrorCategory,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    InvalidColorError,
    InvalidInputError,
    LabelGuardError,
    RepairExhaustedError,
    SchemaViolationError,
    UnknownElementError,
    describe_validation_error,
)


def test_unknown_element_error():
    err = UnknownElementError("missing")
    assert isinstance(err, LabelGuardError)
    assert err.message == "Element ID 'missing' does not exist"
    assert err.code == ErrorCode.UNKNOWN_ELEMENT
    assert err.category == ErrorCategory.RESOURCE_NOT_FOUND
    assert err.context.element_id == "missing"


def test_invalid_color_error_is_schema_violation():
    err = InvalidColorError("#zz")
    assert isinstance(err, SchemaViolationError)
    assert err.code == ErrorCode.INVALID_COLOR
    assert err.color == "#zz"
    assert str(err) == "Invalid hex color: #zz"


def test_schema_violation_defaults():
    err = SchemaViolationError("bad shape")
    assert err.code == ErrorCode.SCHEMA_VIOLATION
    assert err.category == ErrorCategory.VALIDATION
    assert err.severity == ErrorSeverity.ERROR


def test_invalid_input_error():
    err = InvalidInputError("prompt: Field required")
    assert err.message == "Invalid input: prompt: Field required"
    assert err.code == ErrorCode.INVALID_INPUT


def test_repair_exhausted_names_both_failures():
    err = RepairExhaustedError("text: too short", "text: still too short")
    assert err.severity == ErrorSeverity.CRITICAL
    assert err.category == ErrorCategory.REPAIR
    assert "text: too short" in err.message
    assert "Repair error: text: still too short" in err.message


def test_to_response_envelope():
    err = UnknownElementError("logo", ErrorContext(edit_op="move", step="validate"))
    body = err.to_response()["error"]
    assert body["code"] == "UNKNOWN_ELEMENT"
    assert body["category"] == "resource_not_found"
    assert body["severity"] == "error"
    assert body["context"] == {"element_id": "logo", "edit_op": "move", "step": "validate"}
    assert "timestamp" in body


def test_errors_are_raisable_as_base():
    with pytest.raises(LabelGuardError):
        raise InvalidColorError("nope")


class _Sample(BaseModel):
    name: str
    count: int


def test_describe_validation_error_flattens_locations():
    with pytest.raises(ValidationError) as exc_info:
        _Sample.model_validate({"count": "many"})
    text = describe_validation_error(exc_info.value)
    parts = text.split("; ")
    assert len(parts) == 2
    assert parts[0].startswith("name: ")
    assert parts[1].startswith("count: ")
