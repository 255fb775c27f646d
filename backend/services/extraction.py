"""
Free-text context extraction and view triggers.

Turns a single chat utterance into the solar design parameters it mentions
(address, panel count, system size, roof dimensions, orientation, energy
goal) and decides which visualization views the utterance should open.

Both entry points are pure: they look only at the text they are given,
never raise, and simply leave out anything they cannot find. Merging the
result into a running session lives in ``services.layout_context``.
"""

import logging
import math
import re
from typing import Iterable, Optional

from services.layout_types import Orientation, RoofDimensions, VisibilityState
from services.solar_constants import (
    DEFAULT_PANEL_WATTS,
    LAYOUT_KEYWORDS,
    MAX_PANEL_COUNT,
    MAX_ROOF_SIDE_FT,
    MAX_SYSTEM_SIZE_KW,
    SATELLITE_KEYWORDS,
    STREET_SUFFIXES,
)

logger = logging.getLogger(__name__)

# ============================================================================
# PATTERNS
# ============================================================================

# "123 Main Street", "42 oak ave"
STREET_ADDRESS_RE = re.compile(
    r"\b\d+\s+[a-zA-Z\s]+(?:" + "|".join(STREET_SUFFIXES) + r")\b",
    re.IGNORECASE,
)

# "Springfield, IL 62704"
CITY_STATE_ZIP_RE = re.compile(r"\b[a-zA-Z\s]+,\s*[a-zA-Z]{2}\s*\d{5}\b", re.IGNORECASE)

ADDRESS_PATTERNS = (STREET_ADDRESS_RE, CITY_STATE_ZIP_RE)

# The remaining patterns run against lower-cased text
PANEL_COUNT_RE = re.compile(r"(\d+)\s*panels?")
SYSTEM_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*kw")
ROOF_DIMENSIONS_RE = re.compile(r"(\d+)\s*(?:x|by|×)\s*(\d+)\s*(?:feet|ft)")
ENERGY_GOAL_RE = re.compile(r"\d+\s*kwh")
BUDGET_RE = re.compile(r"\$[\d,]+")
USAGE_RE = re.compile(r"\d+\s*kwh")


# ============================================================================
# HELPERS
# ============================================================================

def _to_int(text: str, upper: int) -> Optional[int]:
    """Parse a matched integer; None when it is unparseable or above ``upper``."""
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value <= upper else None


def _to_float(text: str, upper: float) -> Optional[float]:
    try:
        value = float(text)
    except (ValueError, OverflowError):
        return None
    return value if math.isfinite(value) and value <= upper else None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def derive_panel_count(system_size_kw: float, panel_watts: int = DEFAULT_PANEL_WATTS) -> Optional[int]:
    """Best-effort panel count for a system size, e.g. 9.6 kW at 400 W -> 24."""
    value = system_size_kw * 1000 / panel_watts
    if not math.isfinite(value):
        return None
    return round_half_up(value)


def find_address(text: str) -> Optional[str]:
    """First address in the text; street form is preferred over city/state/ZIP."""
    for pattern in ADDRESS_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def contains_street_address(text: str) -> bool:
    return STREET_ADDRESS_RE.search(text) is not None


# ============================================================================
# EXTRACTOR
# ============================================================================

def extract_layout_info(utterance: str) -> dict:
    """
    Extract the design parameters mentioned in one utterance.

    Args:
        utterance: Raw user message.

    Returns:
        Partial context dict keyed by ``LayoutContext`` field names. Only
        matched fields are present.
    """
    context = {}
    lowered = utterance.lower()

    address = find_address(utterance)
    if address:
        context["address"] = address

    panel_match = PANEL_COUNT_RE.search(lowered)
    if panel_match:
        count = _to_int(panel_match.group(1), MAX_PANEL_COUNT)
        if count is not None:
            context["panel_count"] = count

    size_match = SYSTEM_SIZE_RE.search(lowered)
    if size_match:
        size = _to_float(size_match.group(1), MAX_SYSTEM_SIZE_KW)
        derived = derive_panel_count(size) if size is not None else None
        if derived is not None:
            context["system_size"] = size
            context.setdefault("panel_count", derived)

    dims_match = ROOF_DIMENSIONS_RE.search(lowered)
    if dims_match:
        width = _to_float(dims_match.group(1), MAX_ROOF_SIDE_FT)
        height = _to_float(dims_match.group(2), MAX_ROOF_SIDE_FT)
        if width is not None and height is not None:
            context["roof_dimensions"] = RoofDimensions(width=width, height=height)

    # portrait is checked first and wins when both words appear
    if "portrait" in lowered:
        context["orientation"] = Orientation.PORTRAIT
    elif "landscape" in lowered:
        context["orientation"] = Orientation.LANDSCAPE

    energy_match = ENERGY_GOAL_RE.search(lowered)
    if energy_match:
        context["energy_goals"] = energy_match.group(0)

    if context:
        logger.debug(f"Extracted layout fields: {sorted(context)}")
    return context


# ============================================================================
# TRIGGER CLASSIFIER
# ============================================================================

def should_show_satellite_view(utterance: str) -> bool:
    lowered = utterance.lower()
    if any(keyword in lowered for keyword in SATELLITE_KEYWORDS):
        return True
    return contains_street_address(utterance)


def should_show_layout_view(utterance: str) -> bool:
    lowered = utterance.lower()
    if any(keyword in lowered for keyword in LAYOUT_KEYWORDS):
        return True
    return bool(PANEL_COUNT_RE.search(lowered) or SYSTEM_SIZE_RE.search(lowered))


def classify_triggers(utterance: str) -> VisibilityState:
    """Decide which views this utterance opens. Depends on this text only."""
    return VisibilityState(
        show_satellite_view=should_show_satellite_view(utterance),
        show_layout_view=should_show_layout_view(utterance),
    )


# ============================================================================
# CONVERSATION-WIDE CONTEXT
# ============================================================================

def extract_solar_context(messages: Iterable[dict]) -> dict:
    """
    Summarize property details from a whole transcript.

    Args:
        messages: Chat history [{"role": ..., "content": ...}].

    Returns:
        Dict with any of 'property_type', 'budget', 'location', 'current_usage'.
    """
    context = {}
    text = " ".join(m.get("content", "") for m in messages).lower()

    if "house" in text or "residential" in text:
        context["property_type"] = "residential"
    elif "commercial" in text or "business" in text:
        context["property_type"] = "commercial"

    budget_match = BUDGET_RE.search(text)
    if budget_match:
        context["budget"] = budget_match.group(0)

    location = find_address(text)
    if location:
        context["location"] = location

    usage_match = USAGE_RE.search(text)
    if usage_match:
        context["current_usage"] = usage_match.group(0)

    return context
