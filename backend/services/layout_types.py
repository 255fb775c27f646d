"""Plain data types shared by the extraction, context and planning services."""

import enum
from dataclasses import dataclass, fields
from typing import Optional

from services.solar_constants import DEFAULT_PANEL_WATTS


class Orientation(str, enum.Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class RoofDimensions:
    """Roof footprint in feet."""
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


@dataclass
class VisibilityState:
    show_satellite_view: bool = False
    show_layout_view: bool = False

    def to_dict(self) -> dict:
        return {
            "show_satellite_view": self.show_satellite_view,
            "show_layout_view": self.show_layout_view,
        }


@dataclass
class LayoutContext:
    """
    Accumulated solar design parameters for one conversation.

    Every field starts out unset. Fields are filled in as utterances are
    processed and are only ever replaced by a newer value, never cleared,
    until the whole context is reset.
    """
    address: Optional[str] = None
    roof_dimensions: Optional[RoofDimensions] = None
    panel_count: Optional[int] = None
    panel_watts: Optional[int] = None
    orientation: Optional[Orientation] = None
    system_size: Optional[float] = None
    energy_goals: Optional[str] = None

    @property
    def effective_panel_watts(self) -> int:
        return self.panel_watts or DEFAULT_PANEL_WATTS

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in CONTEXT_FIELDS)

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "roof_dimensions": self.roof_dimensions.to_dict() if self.roof_dimensions else None,
            "panel_count": self.panel_count,
            "panel_watts": self.panel_watts,
            "orientation": self.orientation.value if self.orientation else None,
            "system_size": self.system_size,
            "energy_goals": self.energy_goals,
        }


CONTEXT_FIELDS = tuple(f.name for f in fields(LayoutContext))


def partial_to_dict(partial: dict) -> dict:
    """JSON-friendly copy of a partial context, keeping only the fields it sets."""
    full = LayoutContext(**partial).to_dict()
    return {key: full[key] for key in partial if full.get(key) is not None}
