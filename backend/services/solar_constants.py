"""
Centralized Solar Constants — single source of truth for the parsing and
layout modules.

Exposes:
  - Default panel wattage used for size → count derivation
  - Panel footprints per orientation, roof setback and spacing
  - Trigger keyword vocabularies for the satellite and layout views
  - Street suffixes recognised in addresses
  - Fallback layout values used when a session has no data yet
"""

from typing import Dict, Tuple

# ===========================================================================
# PANELS
# ===========================================================================

# Watts per panel assumed when deriving a panel count from a kW figure
DEFAULT_PANEL_WATTS = 400

# (width, height) in feet
PANEL_FOOTPRINT_FT: Dict[str, Tuple[float, float]] = {
    "landscape": (6.5, 3.25),
    "portrait": (3.25, 6.5),
}

ROOF_SETBACK_FT = 2.0
PANEL_SPACING_FT = 0.5

# Used by the panel planner when the session has not supplied a value
FALLBACK_ROOF_FT = (40.0, 30.0)
FALLBACK_PANEL_COUNT = 20
FALLBACK_ORIENTATION = "landscape"

# ===========================================================================
# TRIGGER VOCABULARIES
# ===========================================================================

SATELLITE_KEYWORDS = ("address", "satellite", "roof", "imagery", "analyze")

LAYOUT_KEYWORDS = ("panel", "layout", "design", "placement", "configuration")

STREET_SUFFIXES = (
    "street", "st", "avenue", "ave", "road", "rd", "drive", "dr",
    "lane", "ln", "way", "blvd", "boulevard",
)

# ===========================================================================
# PLAUSIBILITY LIMITS
# ===========================================================================

# Numbers above these are treated as unmatched by the extractor and
# rejected or capped by the API and panel planner
MAX_PANEL_COUNT = 10_000
MAX_PANEL_WATTS = 1_000
MAX_SYSTEM_SIZE_KW = MAX_PANEL_COUNT * DEFAULT_PANEL_WATTS / 1000
MAX_ROOF_SIDE_FT = 5_000.0

# ===========================================================================
# CONVERSATION
# ===========================================================================

APOLOGY_MESSAGE = "I apologize, but I encountered an error. Please try again."
