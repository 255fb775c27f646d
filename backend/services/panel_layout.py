"""
Solar panel grid planner.

Places a requested number of panels on a rectangular roof in a centred
grid, honouring a fixed edge setback and inter-panel spacing. Panels that
do not fit, or that go past MAX_PANEL_COUNT, are dropped; the plan reports
how many were requested and the maximum the roof can hold.
"""

import logging
import math
from typing import Optional

from services.layout_types import Orientation, RoofDimensions
from services.solar_constants import (
    DEFAULT_PANEL_WATTS,
    FALLBACK_ORIENTATION,
    FALLBACK_PANEL_COUNT,
    FALLBACK_ROOF_FT,
    MAX_PANEL_COUNT,
    PANEL_FOOTPRINT_FT,
    PANEL_SPACING_FT,
    ROOF_SETBACK_FT,
)

logger = logging.getLogger(__name__)


def _fit_count(roof_side: float, panel_side: float) -> int:
    return max(0, math.floor((roof_side - ROOF_SETBACK_FT) / (panel_side + PANEL_SPACING_FT)))


def plan_panel_layout(
    roof_dimensions: Optional[RoofDimensions] = None,
    panel_count: Optional[int] = None,
    panel_watts: Optional[int] = None,
    orientation: Optional[Orientation] = None,
) -> dict:
    """
    Lay out panels on a roof.

    Args:
        roof_dimensions: Roof size in feet (defaults to 40x30).
        panel_count: Panels wanted (defaults to 20).
        panel_watts: Rating of each panel (defaults to 400 W).
        orientation: Portrait or landscape (defaults to landscape).

    Returns:
        Dict with 'panels', 'panel_count', 'requested_panel_count',
        'max_panels', 'total_watts', 'system_size_kw', 'orientation', 'roof'.
    """
    roof = roof_dimensions or RoofDimensions(*FALLBACK_ROOF_FT)
    requested = FALLBACK_PANEL_COUNT if panel_count is None else max(0, panel_count)
    watts = panel_watts or DEFAULT_PANEL_WATTS
    orient = Orientation(orientation or FALLBACK_ORIENTATION)
    panel_w, panel_h = PANEL_FOOTPRINT_FT[orient.value]

    per_row = _fit_count(roof.width, panel_w)
    per_col = _fit_count(roof.height, panel_h)
    max_panels = per_row * per_col
    placed = min(requested, max_panels, MAX_PANEL_COUNT)

    panels = []
    if placed:
        rows = math.ceil(placed / per_row)
        grid_w = per_row * panel_w + (per_row - 1) * PANEL_SPACING_FT
        grid_h = rows * panel_h + (rows - 1) * PANEL_SPACING_FT
        start_x = (roof.width - grid_w) / 2
        start_y = (roof.height - grid_h) / 2

        for i in range(placed):
            row, col = divmod(i, per_row)
            panels.append({
                "id": f"panel-{i}",
                "x": round(start_x + col * (panel_w + PANEL_SPACING_FT), 2),
                "y": round(start_y + row * (panel_h + PANEL_SPACING_FT), 2),
                "width": panel_w,
                "height": panel_h,
                "watts": watts,
            })

    if placed < requested:
        logger.info(f"Roof {roof.width}x{roof.height} ft fits {max_panels} panels, {requested} requested")

    total_watts = placed * watts
    return {
        "panels": panels,
        "panel_count": placed,
        "requested_panel_count": requested,
        "max_panels": max_panels,
        "total_watts": total_watts,
        "system_size_kw": round(total_watts / 1000, 2),
        "orientation": orient.value,
        "roof": roof.to_dict(),
    }
