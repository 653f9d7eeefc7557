"""Error Hierarchy: typed, categorized exceptions for every labelguard failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Clamping and truncation are corrections, never exceptions; they surface only
      as records in ValidationResult (RANGE_VIOLATION / EDIT_LIMIT_EXCEEDED codes)
    - RepairExhaustedError is the only fatal error the orchestrator must handle
    - to_response() produces the envelope the host stores on a failed generation job

Design Decisions:
    - Single hierarchy with LabelGuardError base: one except clause covers the engine
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from pydantic import ValidationError


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RANGE = "range"
    REPAIR = "repair"


class ErrorCode(str, Enum):
    """Machine-readable codes shared by exceptions and rejection records."""
    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"
    INVALID_COLOR = "INVALID_COLOR"
    UNKNOWN_ELEMENT = "UNKNOWN_ELEMENT"
    RANGE_VIOLATION = "RANGE_VIOLATION"
    EDIT_LIMIT_EXCEEDED = "EDIT_LIMIT_EXCEEDED"
    INVALID_INPUT = "INVALID_INPUT"
    REPAIR_EXHAUSTED = "REPAIR_EXHAUSTED"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    element_id: str | None = None
    edit_op: str | None = None
    step: str | None = None
    debug_info: dict[str, Any] | None = None


class LabelGuardError(Exception):
    """Base exception for all labelguard errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to the standardized error envelope."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "element_id": self.context.element_id,
                    "edit_op": self.context.edit_op,
                    "step": self.context.step,
                },
            }
        }


# ─── Structural Errors ───────────────────────────────────────────

class SchemaViolationError(LabelGuardError):
    """Malformed edit, color or document shape."""
    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SCHEMA_VIOLATION,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )


class InvalidColorError(SchemaViolationError):
    """Color string is not 3- or 6-digit RGB hex."""
    def __init__(self, color: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid hex color: {color}", ErrorCode.INVALID_COLOR, context,
        )
        self.color = color


class UnknownElementError(LabelGuardError):
    """Edit targets an element id that is not in the document."""
    def __init__(self, element_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.element_id = element_id
        super().__init__(
            f"Element ID '{element_id}' does not exist",
            ErrorCode.UNKNOWN_ELEMENT, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx,
        )
        self.element_id = element_id


# ─── Self-Repair Errors ──────────────────────────────────────────

class InvalidInputError(LabelGuardError):
    """Input handed to a generative step failed its own schema."""
    def __init__(self, validation_error: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid input: {validation_error}",
            ErrorCode.INVALID_INPUT, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.validation_error = validation_error


class RepairExhaustedError(LabelGuardError):
    """The single self-repair attempt still produced invalid output."""
    def __init__(
        self,
        original_error: str,
        repair_error: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Validation failed and self-repair unsuccessful: {original_error}. "
            f"Repair error: {repair_error}",
            ErrorCode.REPAIR_EXHAUSTED, ErrorCategory.REPAIR,
            ErrorSeverity.CRITICAL, context,
        )
        self.original_error = original_error
        self.repair_error = repair_error


# ─── Helpers ─────────────────────────────────────────────────────

def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one line: 'loc: msg; loc: msg'."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)
