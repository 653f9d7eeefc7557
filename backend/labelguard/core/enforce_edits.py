"""Edit Enforcement: validates, filters and clamps untrusted edits against the live document.

Invariants:
    - validate_and_clamp_edits NEVER raises for malformed entries: every anomaly
      becomes a rejected or clamped record
    - Entries beyond max_edits are rejected first, in their original order, with
      reason "exceeded maximum edits limit of {max_edits}"
    - Remaining entries are processed once, left to right: parse -> id check -> clamp
    - move/resize deltas clamp into [-max_delta, +max_delta]; reorder.z into [Z_MIN, Z_MAX];
      recolor and update_font_size are never clamped
    - An in-range edit produces no clamped record
    - clamp_bounds keeps the rectangle inside [0, 1] on every side

Design Decisions:
    - Pure functions over frozen inputs: safe to call from concurrent workers
    - Exhaustive match with assert_never: a new EditOp fails type-checking here
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, assert_never

from labelguard.core.domain_types import DEFAULT_MAX_DELTA, DEFAULT_MAX_EDITS, Z_MAX, Z_MIN
from labelguard.core.errors import ErrorCode, SchemaViolationError, UnknownElementError
from labelguard.schemas.edits import (
    Edit, MoveEdit, RecolorEdit, ReorderEdit, ResizeEdit, UpdateFontSizeEdit, parse_edit,
)
from labelguard.schemas.label_dsl import Bounds

logger = logging.getLogger(__name__)


# ─── Options & Results ───────────────────────────────────────────

@dataclass(frozen=True)
class ValidationOptions:
    """Limits applied to one batch of edits."""
    max_edits: int = DEFAULT_MAX_EDITS
    max_delta: float = DEFAULT_MAX_DELTA
    existing_element_ids: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.existing_element_ids, frozenset):
            object.__setattr__(
                self, "existing_element_ids", frozenset(self.existing_element_ids),
            )
        if self.max_edits < 0:
            raise ValueError(f"max_edits must be >= 0, got {self.max_edits}")
        if self.max_delta < 0:
            raise ValueError(f"max_delta must be >= 0, got {self.max_delta}")

    @classmethod
    def from_settings(
        cls, settings: Any, existing_element_ids: Iterable[str],
    ) -> "ValidationOptions":
        """Build options from labelguard.config.Settings limits."""
        return cls(
            max_edits=settings.edit_max_edits,
            max_delta=settings.edit_max_delta,
            existing_element_ids=frozenset(existing_element_ids),
        )


@dataclass
class RejectedEdit:
    edit: Any
    reason: str
    error_code: ErrorCode

    def to_dict(self) -> dict:
        edit = self.edit.to_dict() if hasattr(self.edit, "to_dict") else self.edit
        return {"edit": edit, "reason": self.reason, "errorCode": self.error_code.value}


@dataclass
class ClampedEdit:
    original: Edit
    clamped: Edit
    reason: str
    error_code: ErrorCode = ErrorCode.RANGE_VIOLATION

    def to_dict(self) -> dict:
        return {
            "original": self.original.to_dict(),
            "clamped": self.clamped.to_dict(),
            "reason": self.reason,
            "errorCode": self.error_code.value,
        }


@dataclass
class ValidationResult:
    """Outcome of one validation call; every list preserves input order."""
    valid_edits: list[Edit] = field(default_factory=list)
    rejected_edits: list[RejectedEdit] = field(default_factory=list)
    clamped_edits: list[ClampedEdit] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "validEdits": [e.to_dict() for e in self.valid_edits],
            "rejectedEdits": [r.to_dict() for r in self.rejected_edits],
            "clampedEdits": [c.to_dict() for c in self.clamped_edits],
        }


# ─── Validation ──────────────────────────────────────────────────

def validate_and_clamp_edits(
    raw_edits: Sequence[Any],
    options: ValidationOptions | None = None,
    logger: logging.Logger = logger,
) -> ValidationResult:
    """Filter and clamp a batch of AI-proposed edits.

    Returns a complete report in one call; nothing is applied here.
    """
    opts = options or ValidationOptions()
    result = ValidationResult()
    entries = list(raw_edits)

    if len(entries) > opts.max_edits:
        logger.warning(
            "Edit validation: too many edits provided (%d > %d)",
            len(entries), opts.max_edits,
            extra={"error_code": ErrorCode.EDIT_LIMIT_EXCEEDED.value},
        )
        for extra_edit in entries[opts.max_edits:]:
            result.rejected_edits.append(RejectedEdit(
                edit=extra_edit,
                reason=f"exceeded maximum edits limit of {opts.max_edits}",
                error_code=ErrorCode.EDIT_LIMIT_EXCEEDED,
            ))
        entries = entries[:opts.max_edits]

    for raw in entries:
        try:
            edit = parse_edit(raw)
            if edit.id not in opts.existing_element_ids:
                raise UnknownElementError(edit.id)
        except (SchemaViolationError, UnknownElementError) as e:
            result.rejected_edits.append(
                RejectedEdit(edit=raw, reason=e.message, error_code=e.code),
            )
            logger.warning(
                "Edit rejected: %s", e.message,
                extra={"error_code": e.code.value},
            )
            continue

        clamped, reason = clamp_edit(edit, opts.max_delta)
        if clamped is not edit:
            result.clamped_edits.append(
                ClampedEdit(original=edit, clamped=clamped, reason=reason),
            )
        result.valid_edits.append(clamped)

    logger.info(
        "Edit validation completed: %d valid, %d rejected, %d clamped",
        len(result.valid_edits), len(result.rejected_edits), len(result.clamped_edits),
        extra={
            "valid_count": len(result.valid_edits),
            "rejected_count": len(result.rejected_edits),
            "clamped_count": len(result.clamped_edits),
        },
    )
    return result


# ─── Clamping ────────────────────────────────────────────────────

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_edit(edit: Edit, max_delta: float) -> tuple[Edit, str]:
    """Return (edit, "") when in range, else (new clamped edit, reason)."""
    match edit:
        case MoveEdit(dx=dx, dy=dy):
            cdx, cdy = _clamp(dx, -max_delta, max_delta), _clamp(dy, -max_delta, max_delta)
            if (cdx, cdy) != (dx, dy):
                return (
                    edit.model_copy(update={"dx": cdx, "dy": cdy}),
                    f"Move deltas clamped from ({dx}, {dy}) to ({cdx}, {cdy})",
                )
        case ResizeEdit(dw=dw, dh=dh):
            cdw, cdh = _clamp(dw, -max_delta, max_delta), _clamp(dh, -max_delta, max_delta)
            if (cdw, cdh) != (dw, dh):
                return (
                    edit.model_copy(update={"dw": cdw, "dh": cdh}),
                    f"Resize deltas clamped from ({dw}, {dh}) to ({cdw}, {cdh})",
                )
        case ReorderEdit(z=z):
            cz = int(_clamp(z, Z_MIN, Z_MAX))
            if cz != z:
                return (
                    edit.model_copy(update={"z": cz}),
                    f"Z-index clamped from {z} to {cz}",
                )
        case RecolorEdit() | UpdateFontSizeEdit():
            pass
        case _:
            assert_never(edit)
    return edit, ""


def clamp_bounds(bounds: Bounds, edit: Edit) -> Bounds:
    """Apply a move/resize to bounds, keeping the rectangle within [0, 1].

    x' = clamp(x + dx, 0, 1 - w); w' = clamp(w + dw, 0, 1 - x). Other ops
    return the bounds untouched.
    """
    match edit:
        case MoveEdit(dx=dx, dy=dy):
            return bounds.model_copy(update={
                "x": _clamp(bounds.x + dx, 0, 1 - bounds.w),
                "y": _clamp(bounds.y + dy, 0, 1 - bounds.h),
            })
        case ResizeEdit(dw=dw, dh=dh):
            return bounds.model_copy(update={
                "w": _clamp(bounds.w + dw, 0, 1 - bounds.x),
                "h": _clamp(bounds.h + dh, 0, 1 - bounds.y),
            })
        case RecolorEdit() | ReorderEdit() | UpdateFontSizeEdit():
            return bounds
        case _:
            assert_never(edit)
