"""Root conftest: shared test configuration and label fixtures."""

import copy

import pytest

from labelguard.config import get_settings
from labelguard.schemas.label_dsl import LabelDocument


SAMPLE_LABEL = {
    "version": "1",
    "canvas": {"width": 800, "height": 1200, "dpi": 144, "background": "#FFFFFF"},
    "palette": {
        "primary": "#8B0000",
        "secondary": "#F5F5DC",
        "accent": "#FFD700",
        "background": "#FFFFFF",
        "temperature": "warm",
        "contrast": "high",
    },
    "typography": {
        "primary": {"family": "Playfair Display", "weight": 700},
        "secondary": {"family": "Lato", "weight": 400, "letterSpacing": 0.5},
    },
    "assets": [
        {"id": "logo_asset", "url": "https://cdn.example.com/logo.png",
         "width": 400, "height": 300},
    ],
    "elements": [
        {"id": "producer_text", "type": "text", "text": "Château Margaux",
         "bounds": {"x": 0.1, "y": 0.1, "w": 0.8, "h": 0.1}, "z": 10,
         "color": "primary", "fontSize": 32},
        {"id": "vintage_text", "type": "text", "text": "2019",
         "bounds": {"x": 0.4, "y": 0.8, "w": 0.2, "h": 0.05}, "z": 10,
         "color": "secondary", "fontSize": 20},
        {"id": "region_text", "type": "text", "text": "Napa Valley",
         "bounds": {"x": 0.1, "y": 0.7, "w": 0.8, "h": 0.05}, "z": 5,
         "color": "accent", "fontSize": 18, "font": "secondary"},
        {"id": "logo", "type": "image", "assetId": "logo_asset",
         "bounds": {"x": 0.3, "y": 0.3, "w": 0.4, "h": 0.3}, "z": 1},
        {"id": "divider", "type": "shape", "shape": "rect",
         "bounds": {"x": 0.1, "y": 0.65, "w": 0.8, "h": 0.01}, "z": 2,
         "color": "accent"},
    ],
}


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Every test sees settings built from its own environment."""
    for name in (
        "LABELGUARD_EDIT_MAX_EDITS", "LABELGUARD_EDIT_MAX_DELTA",
        "LABELGUARD_FONT_SIZE_MULTIPLIERS", "LABELGUARD_LOG_LEVEL",
        "LABELGUARD_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_label() -> dict:
    return copy.deepcopy(SAMPLE_LABEL)


@pytest.fixture
def sample_document() -> LabelDocument:
    return LabelDocument.model_validate(SAMPLE_LABEL)
