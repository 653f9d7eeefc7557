"""Edit Schemas: the closed set of typed edit operations and their structural contract.

Invariants:
    - Edit is a union discriminated by `op`: move | resize | recolor | reorder | update_font_size
    - Every variant carries a non-empty target `id`
    - Numeric fields reject strings, booleans, NaN and infinity
    - `z` and `fontSize` must be integral; `fontSize` must be positive
    - Edits are frozen: clamping produces a new edit via model_copy()
    - parse_edit() is the only entry point for untyped data and raises
      SchemaViolationError on any structural failure
"""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError,
)
from pydantic.alias_generators import to_camel

from labelguard.core.domain_types import ColorRole
from labelguard.core.errors import SchemaViolationError, describe_validation_error


def _require_number(value: Any) -> Any:
    """Reject strings and booleans before pydantic's lax numeric coercion."""
    if isinstance(value, (str, bytes, bool)):
        raise ValueError("Input should be a number")
    return value


Delta = Annotated[float, BeforeValidator(_require_number), Field(allow_inf_nan=False)]
Integral = Annotated[int, BeforeValidator(_require_number)]


class EditBase(BaseModel):
    """Common config: frozen, camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(min_length=1)

    def to_dict(self) -> dict:
        """JSON-ready dict with camelCase keys ({"op", "id", ...})."""
        return self.model_dump(mode="json", by_alias=True)


class MoveEdit(EditBase):
    op: Literal["move"] = "move"
    dx: Delta
    dy: Delta


class ResizeEdit(EditBase):
    op: Literal["resize"] = "resize"
    dw: Delta
    dh: Delta


class RecolorEdit(EditBase):
    op: Literal["recolor"] = "recolor"
    color: ColorRole


class ReorderEdit(EditBase):
    op: Literal["reorder"] = "reorder"
    z: Integral


class UpdateFontSizeEdit(EditBase):
    op: Literal["update_font_size"] = "update_font_size"
    font_size: Integral = Field(gt=0)


Edit = Annotated[
    MoveEdit | ResizeEdit | RecolorEdit | ReorderEdit | UpdateFontSizeEdit,
    Field(discriminator="op"),
]

EDIT_ADAPTER: TypeAdapter[Edit] = TypeAdapter(Edit)


def parse_edit(raw: Any) -> Edit:
    """Parse an untrusted edit-like value into a typed Edit.

    Already-typed edits pass through. Unknown `op` tags, missing fields and
    mistyped values raise SchemaViolationError with a flattened description.
    """
    if isinstance(raw, EditBase):
        return raw
    try:
        return EDIT_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise SchemaViolationError(
            f"Schema validation failed: {describe_validation_error(e)}",
        ) from e
