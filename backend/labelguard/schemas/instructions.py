"""Instruction Schemas: the abstract edit instructions an AI refiner proposes.

Invariants:
    - An instruction names one element, one property and a free-form value
    - Property names are kept verbatim; mapping to edit ops happens in the resolver
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PropertyInstruction(BaseModel):
    """'Change property P of element E to value V'."""
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True,
    )

    element_id: str = Field(min_length=1)
    property: str
    value: Any = None
