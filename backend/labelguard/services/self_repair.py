"""Self-Repair Loop: validates a generative step's output, with one repair attempt.

Invariants:
    - Input is validated first; invalid input raises InvalidInputError and
      repair_fn is never called
    - A valid candidate is returned as the schema validated it
    - repair_fn is awaited AT MOST once, with the validated input and the
      flattened error description
    - A second failure (or any Exception from repair_fn) raises RepairExhaustedError
      carrying both the original and the repair failure
    - Cancellation is never caught

Design Decisions:
    - Schemas are wrapped in TypeAdapter so model classes, unions and plain
      annotated types all validate the same way
    - repair_fn is injected: the engine never talks to a model itself
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import TypeAdapter, ValidationError

from labelguard.core.errors import (
    ErrorContext, InvalidInputError, RepairExhaustedError, describe_validation_error,
)

logger = logging.getLogger(__name__)

RepairFn = Callable[[Any, str], Awaitable[Any]]


def _adapter(schema: Any) -> TypeAdapter:
    if isinstance(schema, TypeAdapter):
        return schema
    return TypeAdapter(schema)


async def validate_and_repair(
    input: Any,
    output: Any,
    input_schema: Any,
    output_schema: Any,
    repair_fn: RepairFn,
    logger: logging.Logger = logger,
) -> Any:
    """Return `output` validated against output_schema, repairing it once if needed.

    Raises:
        InvalidInputError: `input` fails input_schema.
        RepairExhaustedError: the output and its single repair both failed.
    """
    in_adapter = _adapter(input_schema)
    out_adapter = _adapter(output_schema)

    try:
        validated_input = in_adapter.validate_python(input)
    except ValidationError as e:
        raise InvalidInputError(
            describe_validation_error(e), ErrorContext(step="validate_input"),
        ) from e

    try:
        return out_adapter.validate_python(output)
    except ValidationError as e:
        original_error = describe_validation_error(e)

    logger.warning(
        "Output validation failed, attempting self-repair: %s", original_error,
        extra={"attempt": 1},
    )

    try:
        repaired = await repair_fn(validated_input, original_error)
    except Exception as e:
        raise RepairExhaustedError(
            original_error, f"{type(e).__name__}: {e}",
            ErrorContext(step="repair"),
        ) from e

    try:
        result = out_adapter.validate_python(repaired)
    except ValidationError as e:
        raise RepairExhaustedError(
            original_error, describe_validation_error(e),
            ErrorContext(step="validate_repair"),
        ) from e

    logger.info("Self-repair successful", extra={"attempt": 1})
    return result
