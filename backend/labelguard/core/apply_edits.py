"""Edit Application: applies already-validated edits to a label document.

Invariants:
    - The input document is never mutated; edits land on a deep copy
    - Bounds changes go through clamp_bounds, so every rectangle stays in [0, 1]
    - recolor applies only to text/shape elements; update_font_size only to text
    - Per-edit failures are recorded and skipped; the rest still apply
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, assert_never

from labelguard.core.domain_types import Z_MAX, Z_MIN
from labelguard.core.enforce_edits import clamp_bounds
from labelguard.core.errors import LabelGuardError, SchemaViolationError, UnknownElementError
from labelguard.core.resolve_edits import coerce_document
from labelguard.schemas.edits import (
    Edit, MoveEdit, RecolorEdit, ReorderEdit, ResizeEdit, UpdateFontSizeEdit,
)
from labelguard.schemas.label_dsl import LabelDocument, ShapeElement, TextElement

logger = logging.getLogger(__name__)


@dataclass
class FailedEdit:
    edit: Edit
    reason: str


@dataclass
class ApplyEditsResult:
    updated_document: LabelDocument
    applied_edits: list[Edit] = field(default_factory=list)
    failed_edits: list[FailedEdit] = field(default_factory=list)


def extract_element_ids(document: LabelDocument | Mapping[str, Any]) -> list[str]:
    return [el.id for el in coerce_document(document).elements]


def apply_edits(
    document: LabelDocument | Mapping[str, Any],
    edits: Iterable[Edit],
    logger: logging.Logger = logger,
) -> ApplyEditsResult:
    """Apply typed edits in order; returns the updated copy plus a per-edit report."""
    updated = coerce_document(document).model_copy(deep=True)
    result = ApplyEditsResult(updated_document=updated)
    index_by_id = {el.id: i for i, el in enumerate(updated.elements)}

    for edit in edits:
        try:
            index = index_by_id.get(edit.id)
            if index is None:
                raise UnknownElementError(edit.id)
            updated.elements[index] = _apply_to_element(updated.elements[index], edit)
        except LabelGuardError as e:
            result.failed_edits.append(FailedEdit(edit=edit, reason=e.message))
            logger.warning(
                "Failed to apply %s edit to %r: %s", edit.op, edit.id, e.message,
                extra={"element_id": edit.id, "edit_op": edit.op, "error_code": e.code.value},
            )
            continue
        result.applied_edits.append(edit)
        logger.debug(
            "Applied %s edit to %r", edit.op, edit.id,
            extra={"element_id": edit.id, "edit_op": edit.op},
        )

    logger.info(
        "Finished applying edits: %d applied, %d failed",
        len(result.applied_edits), len(result.failed_edits),
    )
    return result


def _apply_to_element(element, edit: Edit):
    match edit:
        case MoveEdit() | ResizeEdit():
            return element.model_copy(update={"bounds": clamp_bounds(element.bounds, edit)})
        case RecolorEdit(color=color):
            if not isinstance(element, (TextElement, ShapeElement)):
                raise SchemaViolationError(
                    f"Cannot recolor element of type '{element.type}'",
                )
            return element.model_copy(update={"color": color})
        case ReorderEdit(z=z):
            return element.model_copy(update={"z": max(Z_MIN, min(Z_MAX, z))})
        case UpdateFontSizeEdit(font_size=font_size):
            if not isinstance(element, TextElement):
                raise SchemaViolationError(
                    f"Cannot update font size on element of type '{element.type}'",
                )
            return element.model_copy(update={"font_size": font_size})
        case _:
            assert_never(edit)
