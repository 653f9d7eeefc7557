"""Property-Edit Resolver: turns "set property P of element E to V" into typed edits.

Invariants:
    - Mapping: color -> recolor, fontSize -> update_font_size, x/y/position -> move,
      w/h/width/height/size -> resize, zIndex/z -> reorder
    - move/resize carry deltas: target - current bounds
    - Unmapped properties are silently omitted (debug log only)
    - Unresolvable instructions (unknown element, unusable value) are omitted with a warning
    - Output order == input order restricted to resolvable instructions, one edit each
"""

import logging
import math
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, assert_never

from pydantic import ValidationError

from labelguard.core.color_match import hex_to_closest_palette_role
from labelguard.core.domain_types import ColorRole, EditOp
from labelguard.core.errors import SchemaViolationError, describe_validation_error
from labelguard.core.font_size import (
    DEFAULT_FONT_SIZE_MULTIPLIERS, FontSizeMultipliers, parse_font_size, round_half_up,
)
from labelguard.core.semantic_ids import map_semantic_to_actual_element_id
from labelguard.schemas.edits import (
    Edit, MoveEdit, RecolorEdit, ReorderEdit, ResizeEdit, UpdateFontSizeEdit,
)
from labelguard.schemas.instructions import PropertyInstruction
from labelguard.schemas.label_dsl import LabelDocument, ShapeElement, TextElement

logger = logging.getLogger(__name__)

PROPERTY_OPS: MappingProxyType[str, EditOp] = MappingProxyType({
    "color": EditOp.RECOLOR,
    "fontSize": EditOp.UPDATE_FONT_SIZE,
    "font_size": EditOp.UPDATE_FONT_SIZE,
    "x": EditOp.MOVE,
    "y": EditOp.MOVE,
    "position": EditOp.MOVE,
    "w": EditOp.RESIZE,
    "h": EditOp.RESIZE,
    "width": EditOp.RESIZE,
    "height": EditOp.RESIZE,
    "size": EditOp.RESIZE,
    "zIndex": EditOp.REORDER,
    "z": EditOp.REORDER,
})

# Scalar property -> the bounds field it targets
_AXIS_FIELDS: MappingProxyType[str, str] = MappingProxyType({
    "x": "x",
    "y": "y",
    "w": "w",
    "width": "w",
    "h": "h",
    "height": "h",
})

_ROLE_NAMES = frozenset(role.value for role in ColorRole)


class _Unresolvable(Exception):
    """Instruction maps to an op but cannot produce a valid edit."""


def coerce_document(document: LabelDocument | Mapping[str, Any]) -> LabelDocument:
    """Accept a parsed document or its JSON dict; raise SchemaViolationError if malformed."""
    if isinstance(document, LabelDocument):
        return document
    try:
        return LabelDocument.model_validate(document)
    except ValidationError as e:
        raise SchemaViolationError(
            f"Invalid label document: {describe_validation_error(e)}",
        ) from e


def resolve_property_edits(
    instructions: Iterable[PropertyInstruction | Mapping[str, Any]],
    document: LabelDocument | Mapping[str, Any],
    multipliers: FontSizeMultipliers = DEFAULT_FONT_SIZE_MULTIPLIERS,
    logger: logging.Logger = logger,
) -> list[Edit]:
    """Resolve abstract property instructions into typed edit candidates.

    The result still has to go through validate_and_clamp_edits before it
    may touch the document.
    """
    doc = coerce_document(document)
    edits: list[Edit] = []

    for raw in instructions:
        try:
            instruction = (
                raw if isinstance(raw, PropertyInstruction)
                else PropertyInstruction.model_validate(raw)
            )
        except ValidationError as e:
            logger.warning(
                "Malformed edit instruction skipped: %s", describe_validation_error(e),
            )
            continue

        op = PROPERTY_OPS.get(instruction.property)
        if op is None:
            logger.debug(
                "Unsupported property %r on %r, instruction omitted",
                instruction.property, instruction.element_id,
            )
            continue

        try:
            edits.append(_resolve_one(instruction, op, doc, multipliers, logger))
        except (_Unresolvable, ValidationError) as e:
            logger.warning(
                "Instruction %s=%r on %r not resolvable: %s",
                instruction.property, instruction.value, instruction.element_id, e,
                extra={"element_id": instruction.element_id, "edit_op": op.value},
            )

    logger.info(
        "Resolved %d edit(s) from property instructions", len(edits),
        extra={"valid_count": len(edits)},
    )
    return edits


def _resolve_one(
    instruction: PropertyInstruction,
    op: EditOp,
    doc: LabelDocument,
    multipliers: FontSizeMultipliers,
    logger: logging.Logger,
) -> Edit:
    element_id = map_semantic_to_actual_element_id(instruction.element_id, doc, logger)
    element = doc.find_element(element_id) if element_id else None
    if element is None:
        raise _Unresolvable(f"element {instruction.element_id!r} not found")

    value = instruction.value
    bounds = element.bounds

    match op:
        case EditOp.MOVE:
            targets = _bounds_targets(instruction.property, value, ("x", "y"))
            return MoveEdit(
                id=element.id,
                dx=targets.get("x", bounds.x) - bounds.x,
                dy=targets.get("y", bounds.y) - bounds.y,
            )
        case EditOp.RESIZE:
            targets = _bounds_targets(instruction.property, value, ("w", "h"))
            return ResizeEdit(
                id=element.id,
                dw=targets.get("w", bounds.w) - bounds.w,
                dh=targets.get("h", bounds.h) - bounds.h,
            )
        case EditOp.RECOLOR:
            if not isinstance(value, str):
                raise _Unresolvable("color value must be a string")
            role = value.strip().lower()
            if role in _ROLE_NAMES:
                return RecolorEdit(id=element.id, color=ColorRole(role))
            return RecolorEdit(
                id=element.id,
                color=hex_to_closest_palette_role(value, doc.palette, logger),
            )
        case EditOp.REORDER:
            return ReorderEdit(id=element.id, z=_integral(value))
        case EditOp.UPDATE_FONT_SIZE:
            if not isinstance(element, TextElement):
                raise _Unresolvable(f"fontSize on non-text element ({element.type})")
            if isinstance(value, str):
                size = parse_font_size(value, element.font_size, multipliers, logger)
            else:
                size = _integral(value)
            if size <= 0:
                raise _Unresolvable(f"font size must be positive, got {size}")
            return UpdateFontSizeEdit(id=element.id, font_size=size)
        case _:
            assert_never(op)


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _Unresolvable(f"expected a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise _Unresolvable(f"expected a finite number, got {value!r}")
    return value


def _integral(value: Any) -> int:
    """Integral numbers pass through; fractional ones round half-up."""
    number = _number(value)
    if isinstance(number, int):
        return number
    return round_half_up(number)


def _coordinate(value: Any) -> float:
    try:
        return float(_number(value))
    except OverflowError as e:
        raise _Unresolvable(f"coordinate out of range: {value!r}") from e


def _bounds_targets(
    prop: str, value: Any, fields: tuple[str, str],
) -> dict[str, float]:
    """Target bounds fields named by a scalar or a {x,y} / {w,h} mapping."""
    if prop in _AXIS_FIELDS:
        return {_AXIS_FIELDS[prop]: _coordinate(value)}

    if not isinstance(value, Mapping):
        raise _Unresolvable(f"{prop} expects an object with {fields}")
    aliases = {"w": ("w", "width"), "h": ("h", "height"), "x": ("x",), "y": ("y",)}
    targets = {}
    for name in fields:
        key = next((k for k in aliases[name] if k in value), None)
        if key is not None:
            targets[name] = _coordinate(value[key])
    if not targets:
        raise _Unresolvable(f"{prop} object has none of {fields}")
    return targets


def palette_update_to_edits(
    target_role: ColorRole | str, document: LabelDocument | Mapping[str, Any],
) -> list[Edit]:
    """Recolor edits for every text/shape element currently using target_role.

    Used when the refiner changes a palette role's hex value: the elements
    bound to that role are re-emitted so the host re-renders them.
    """
    doc = coerce_document(document)
    try:
        role = ColorRole(target_role)
    except ValueError as e:
        raise SchemaViolationError(f"Unknown palette role: {target_role!r}") from e
    return [
        RecolorEdit(id=el.id, color=role)
        for el in doc.elements
        if isinstance(el, (TextElement, ShapeElement)) and el.color == role
    ]
