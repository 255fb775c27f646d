"""Pydantic schemas for API request/response validation."""

from pydantic import BaseModel, Field
from typing import Literal, Optional

from services.solar_constants import MAX_PANEL_COUNT, MAX_PANEL_WATTS, MAX_ROOF_SIDE_FT


# ---------- Layout Context ----------
class RoofDimensionsOut(BaseModel):
    width: float
    height: float


class LayoutContextOut(BaseModel):
    address: Optional[str] = None
    roof_dimensions: Optional[RoofDimensionsOut] = None
    panel_count: Optional[int] = None
    panel_watts: Optional[int] = None
    orientation: Optional[str] = None
    system_size: Optional[float] = None
    energy_goals: Optional[str] = None


class LayoutProcessRequest(BaseModel):
    session_id: str
    message: str = Field(..., description="One complete user utterance")


class RoofDetectedRequest(BaseModel):
    session_id: str
    width: float = Field(..., gt=0, le=MAX_ROOF_SIDE_FT, description="Roof width in feet")
    height: float = Field(..., gt=0, le=MAX_ROOF_SIDE_FT, description="Roof height in feet")


class LayoutStateResponse(BaseModel):
    session_id: str
    context: LayoutContextOut
    show_satellite_view: bool = False
    show_layout_view: bool = False
    extracted: Optional[dict] = None


# ---------- Panel Layout ----------
class PanelLayoutRequest(BaseModel):
    session_id: Optional[str] = None
    roof_width: Optional[float] = Field(None, gt=0, le=MAX_ROOF_SIDE_FT)
    roof_height: Optional[float] = Field(None, gt=0, le=MAX_ROOF_SIDE_FT)
    panel_count: Optional[int] = Field(None, ge=0, le=MAX_PANEL_COUNT)
    panel_watts: Optional[int] = Field(None, gt=0, le=MAX_PANEL_WATTS)
    orientation: Optional[Literal["portrait", "landscape"]] = None


class PanelOut(BaseModel):
    id: str
    x: float
    y: float
    width: float
    height: float
    watts: int


class PanelLayoutResponse(BaseModel):
    panels: list[PanelOut] = []
    panel_count: int
    requested_panel_count: int
    max_panels: int
    total_watts: int
    system_size_kw: float
    orientation: str
    roof: RoofDimensionsOut


# ---------- Chat ----------
class ChatMessage(BaseModel):
    role: str = Field(..., description="'user' or 'assistant'")
    content: str


class ChatRequest(BaseModel):
    session_id: str
    message: str
    history: list[ChatMessage] = []


class ChatResponse(BaseModel):
    reply: str
    history: list[ChatMessage] = []
    context: LayoutContextOut
    show_satellite_view: bool = False
    show_layout_view: bool = False
    solar_context: dict = {}
