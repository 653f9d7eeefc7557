"""Label DSL Schemas: tests for the label document model.

Tests cover:
    - a complete document parses with camelCase keys
    - elements dispatch on `type`
    - bounds and z ranges are enforced
    - image elements must reference a known asset
    - find_element lookup
"""

import pytest
from pydantic import ValidationError

from labelguard.core.domain_types import ColorRole
from labelguard.schemas.label_dsl import (
    ImageElement, LabelDocument, ShapeElement, TextElement,
)


def test_sample_document_parses(sample_document):
    kinds = [type(el) for el in sample_document.elements]
    assert kinds == [TextElement, TextElement, TextElement, ImageElement, ShapeElement]
    assert sample_document.palette.temperature == "warm"
    assert sample_document.typography.secondary.letter_spacing == 0.5


def test_defaults_filled(sample_document):
    vintage = sample_document.find_element("vintage_text")
    assert vintage.color == ColorRole.SECONDARY
    assert vintage.align == "left"
    assert vintage.max_lines == 1
    assert sample_document.typography.hierarchy.producer_emphasis == "balanced"


def test_dump_by_alias_round_trips(sample_document):
    data = sample_document.model_dump(by_alias=True)
    assert data["elements"][0]["fontSize"] == 32
    assert data["elements"][3]["assetId"] == "logo_asset"
    assert LabelDocument.model_validate(data) == sample_document


def test_find_element_missing_returns_none(sample_document):
    assert sample_document.find_element("nope") is None


@pytest.mark.parametrize("field, value", [("x", -0.1), ("w", 1.5)])
def test_bounds_out_of_range_rejected(sample_label, field, value):
    sample_label["elements"][0]["bounds"][field] = value
    with pytest.raises(ValidationError):
        LabelDocument.model_validate(sample_label)


def test_z_out_of_range_rejected(sample_label):
    sample_label["elements"][0]["z"] = 1001
    with pytest.raises(ValidationError):
        LabelDocument.model_validate(sample_label)


def test_unknown_element_type_rejected(sample_label):
    sample_label["elements"][0]["type"] = "video"
    with pytest.raises(ValidationError):
        LabelDocument.model_validate(sample_label)


def test_image_requires_known_asset(sample_label):
    sample_label["assets"] = []
    with pytest.raises(ValidationError) as exc_info:
        LabelDocument.model_validate(sample_label)
    assert "Asset with id 'logo_asset' not found" in str(exc_info.value)
