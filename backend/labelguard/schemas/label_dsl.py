"""Label DSL Schemas: the declarative label layout document edits are applied to.

Invariants:
    - Bounds are normalized: x, y, w, h all in [0, 1]
    - Element z is an integer layering index in [Z_MIN, Z_MAX]
    - Elements are a closed union discriminated by `type` (text | image | shape)
    - Every image element references an asset id present in `assets`
    - JSON field names are camelCase (fontSize, assetId, ...); Python attributes
      are snake_case, and both are accepted on input

Design Decisions:
    - Shared DSLModel base carries the camelCase alias config for every model
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from labelguard.core.domain_types import ColorRole, Z_MAX, Z_MIN


class DSLModel(BaseModel):
    """Base for label DSL models: camelCase aliases, name population allowed."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Bounds(DSLModel):
    """Normalized element rectangle."""
    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)
    w: float = Field(ge=0, le=1)
    h: float = Field(ge=0, le=1)


class Canvas(DSLModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    dpi: int = Field(144, gt=0)
    background: str


class Palette(DSLModel):
    """Four color roles plus descriptive temperature/contrast tags."""
    primary: str
    secondary: str
    accent: str
    background: str
    temperature: Literal["warm", "cool", "neutral"] = "neutral"
    contrast: Literal["high", "medium", "low"] = "medium"


class TypographyFont(DSLModel):
    family: str
    weight: float = Field(ge=100, le=900)
    style: Literal["normal", "italic"] = "normal"
    letter_spacing: float = 0


class TextHierarchy(DSLModel):
    producer_emphasis: Literal["dominant", "balanced", "subtle"] = "balanced"
    vintage_prominence: Literal["featured", "standard", "minimal"] = "standard"
    region_display: Literal["prominent", "integrated", "subtle"] = "integrated"


class Typography(DSLModel):
    primary: TypographyFont
    secondary: TypographyFont
    hierarchy: TextHierarchy = Field(default_factory=TextHierarchy)


class FontResources(DSLModel):
    primary_url: str | None = None
    secondary_url: str | None = None


class Asset(DSLModel):
    id: str
    type: Literal["image"] = "image"
    url: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)


# ─── Elements ────────────────────────────────────────────────────

class ElementBase(DSLModel):
    id: str = Field(min_length=1)
    bounds: Bounds
    z: int = Field(ge=Z_MIN, le=Z_MAX)


class TextElement(ElementBase):
    type: Literal["text"] = "text"
    text: str
    font: Literal["primary", "secondary"] = "primary"
    color: ColorRole
    align: Literal["left", "center", "right"] = "left"
    font_size: int = Field(gt=0)
    line_height: float = Field(1.2, gt=0)
    max_lines: int = Field(1, ge=1, le=10)
    text_transform: Literal["uppercase", "lowercase", "none"] = "none"


class ImageElement(ElementBase):
    type: Literal["image"] = "image"
    asset_id: str
    fit: Literal["contain", "cover", "fill"] = "contain"
    opacity: float = Field(1, ge=0, le=1)
    rotation: float = Field(0, ge=-180, le=180)


class ShapeElement(ElementBase):
    type: Literal["shape"] = "shape"
    shape: Literal["rect", "line"]
    color: ColorRole
    stroke_width: float = Field(0, ge=0, le=20)
    rotation: float = Field(0, ge=-180, le=180)


Element = Annotated[
    TextElement | ImageElement | ShapeElement,
    Field(discriminator="type"),
]


class LabelDocument(DSLModel):
    """A complete label layout: canvas, palette, typography, assets, elements."""
    version: Literal["1"] = "1"
    canvas: Canvas
    palette: Palette
    typography: Typography
    fonts: FontResources | None = None
    assets: list[Asset] = Field(default_factory=list)
    elements: list[Element] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_image_assets(self) -> "LabelDocument":
        asset_ids = {asset.id for asset in self.assets}
        for element in self.elements:
            if isinstance(element, ImageElement) and element.asset_id not in asset_ids:
                raise ValueError(
                    f"Asset with id '{element.asset_id}' not found in assets array",
                )
        return self

    def find_element(self, element_id: str) -> TextElement | ImageElement | ShapeElement | None:
        return next((el for el in self.elements if el.id == element_id), None)
