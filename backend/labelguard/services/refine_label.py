"""Label Refinement: validate -> clamp -> apply for one batch of AI-proposed edits.

Invariants:
    - Edits are validated against the CURRENT document's element ids before any apply
    - Only ValidationResult.valid_edits reach apply_edits
    - The input document is never mutated
    - Limits default to get_settings() when no options are passed
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from labelguard.config import get_settings
from labelguard.core.apply_edits import ApplyEditsResult, apply_edits, extract_element_ids
from labelguard.core.enforce_edits import (
    ValidationOptions, ValidationResult, validate_and_clamp_edits,
)
from labelguard.core.resolve_edits import coerce_document, resolve_property_edits
from labelguard.schemas.instructions import PropertyInstruction
from labelguard.schemas.label_dsl import LabelDocument

logger = logging.getLogger(__name__)


@dataclass
class RefinementResult:
    updated_document: LabelDocument
    validation: ValidationResult
    application: ApplyEditsResult


def _options_for(
    document: LabelDocument, options: ValidationOptions | None,
) -> ValidationOptions:
    ids = extract_element_ids(document)
    if options is None:
        return ValidationOptions.from_settings(get_settings(), ids)
    if not options.existing_element_ids:
        return ValidationOptions(options.max_edits, options.max_delta, frozenset(ids))
    return options


def refine_label(
    document: LabelDocument | Mapping[str, Any],
    raw_edits: Sequence[Any],
    options: ValidationOptions | None = None,
    logger: logging.Logger = logger,
) -> RefinementResult:
    """Validate and clamp raw edits, then apply the survivors to a copy of document."""
    doc = coerce_document(document)
    opts = _options_for(doc, options)

    validation = validate_and_clamp_edits(raw_edits, opts, logger)
    application = apply_edits(doc, validation.valid_edits, logger)

    logger.info(
        "Label refinement: %d edit(s) applied, %d rejected, %d clamped, %d failed",
        len(application.applied_edits), len(validation.rejected_edits),
        len(validation.clamped_edits), len(application.failed_edits),
        extra={
            "valid_count": len(validation.valid_edits),
            "rejected_count": len(validation.rejected_edits),
            "clamped_count": len(validation.clamped_edits),
        },
    )
    return RefinementResult(
        updated_document=application.updated_document,
        validation=validation,
        application=application,
    )


def refine_from_instructions(
    document: LabelDocument | Mapping[str, Any],
    instructions: Iterable[PropertyInstruction | Mapping[str, Any]],
    options: ValidationOptions | None = None,
    logger: logging.Logger = logger,
) -> RefinementResult:
    """Resolve property instructions into edits, then run refine_label on them."""
    doc = coerce_document(document)
    edits = resolve_property_edits(
        instructions, doc, get_settings().multipliers(), logger,
    )
    return refine_label(doc, edits, options, logger)
