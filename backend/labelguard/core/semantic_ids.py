"""Semantic Element IDs: maps the names an AI refiner invents to real DSL element ids.

Invariants:
    - Resolution order: exact id -> alias table -> fuzzy concept match
    - Fuzzy matching only considers text elements
    - Returns None when nothing matches (callers decide how to report it)
    - Alias and pattern tables are read-only module fixtures
"""

import logging
import re
from types import MappingProxyType

from labelguard.schemas.label_dsl import LabelDocument, TextElement

logger = logging.getLogger(__name__)

_VINTAGE_IDS = ("vintage_text", "vintage")
_PRODUCER_IDS = ("producer_text", "producer")
_WINE_NAME_IDS = ("wine_name_text", "wine-name")
_REGION_IDS = ("region_text", "region")
_VARIETY_IDS = ("variety_text", "variety")

SEMANTIC_ELEMENT_ALIASES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    # Year / vintage
    "year-text": _VINTAGE_IDS,
    "vintage-text": _VINTAGE_IDS,
    "year": _VINTAGE_IDS,
    "2018-text": _VINTAGE_IDS,
    "2019-text": _VINTAGE_IDS,
    "2020-text": _VINTAGE_IDS,
    "2021-text": _VINTAGE_IDS,
    "2022-text": _VINTAGE_IDS,
    "2023-text": _VINTAGE_IDS,
    # Producer / winery
    "winery-name": _PRODUCER_IDS,
    "producer-name": _PRODUCER_IDS,
    "winery": _PRODUCER_IDS,
    "producer": _PRODUCER_IDS,
    "producer-text": _PRODUCER_IDS,
    "winery-text": _PRODUCER_IDS,
    # Wine name
    "wine-name": _WINE_NAME_IDS,
    "wine-title": _WINE_NAME_IDS,
    "wine-label": _WINE_NAME_IDS,
    "wine-name-text": _WINE_NAME_IDS,
    # Region / appellation
    "region-text": _REGION_IDS,
    "appellation-text": _REGION_IDS,
    "appellation": _REGION_IDS,
    "location": _REGION_IDS,
    "ava-text": _REGION_IDS,
    "valley-text": _REGION_IDS,
    "napa-valley-ava-text": _REGION_IDS,
    "napa-valley-text": _REGION_IDS,
    "sonoma-county-text": _REGION_IDS,
    "paso-robles-text": _REGION_IDS,
    "santa-barbara-text": _REGION_IDS,
    "willamette-valley-text": _REGION_IDS,
    # Variety
    "variety-text": _VARIETY_IDS,
    "grape-variety": _VARIETY_IDS,
    "wine-type": _VARIETY_IDS,
})

# Concept -> pattern matched against the semantic id and element text.
# Dict order is the matching priority.
FUZZY_PATTERNS: MappingProxyType[str, re.Pattern[str]] = MappingProxyType({
    "vintage": re.compile(r"^(19|20)\d{2}$"),
    "producer": re.compile(
        r"château|chateau|domaine|estate|winery|vineyard|cellars|wines|family"
        r"|brothers|sons|daughters",
        re.IGNORECASE,
    ),
    "region": re.compile(
        r"valley|county|appellation|region|terroir|vineyard|ava|hills|mountains"
        r"|coast|creek|ranch|napa|sonoma|paso|santa|willamette",
        re.IGNORECASE,
    ),
    "variety": re.compile(
        r"cabernet|chardonnay|merlot|pinot|sauvignon|shiraz|riesling|malbec"
        r"|syrah|grenache|tempranillo|sangiovese|zinfandel|petit|verdot",
        re.IGNORECASE,
    ),
})

_REGION_ID_HINTS = ("region", "appellation", "location", "ava")


def map_semantic_to_actual_element_id(
    semantic_id: str,
    document: LabelDocument,
    logger: logging.Logger = logger,
) -> str | None:
    """Resolve an AI-facing element name (e.g. "year-text") to a document id."""
    ids = {el.id for el in document.elements}
    if semantic_id in ids:
        return semantic_id

    for candidate in SEMANTIC_ELEMENT_ALIASES.get(semantic_id, ()):
        if candidate in ids:
            return candidate

    texts = [el for el in document.elements if isinstance(el, TextElement)]
    lowered = semantic_id.lower()
    for concept, pattern in FUZZY_PATTERNS.items():
        by_name = concept in lowered or (concept == "vintage" and "year" in lowered)
        if not (by_name or pattern.search(semantic_id)):
            continue
        match = _fuzzy_match(concept, pattern, texts)
        if match is not None:
            logger.debug(
                "Fuzzy matched %r to element %r (concept %s)",
                semantic_id, match.id, concept,
            )
            return match.id

    return None


def _fuzzy_match(
    concept: str, pattern: re.Pattern[str], texts: list[TextElement],
) -> TextElement | None:
    if concept == "vintage":
        found = _first(texts, lambda el: pattern.search(el.text.strip()))
        found = found or _first(texts, lambda el: "vintage" in el.id or "year" in el.id)
        if found:
            return found

    if concept == "region":
        found = _first(texts, lambda el: any(h in el.id for h in _REGION_ID_HINTS))
        found = found or _first(texts, lambda el: pattern.search(el.text))
        if found:
            return found

    found = _first(
        texts,
        lambda el: concept in el.id or (concept == "producer" and "winery" in el.id),
    )
    if found:
        return found

    if concept in ("producer", "variety"):
        return _first(texts, lambda el: pattern.search(el.text))
    return None


def _first(texts: list[TextElement], predicate) -> TextElement | None:
    return next((el for el in texts if predicate(el)), None)
