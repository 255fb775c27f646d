"""Layout context routes: utterance processing, roof detection, panel plans."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from dependencies import get_session_registry
from schemas import (
    LayoutProcessRequest,
    LayoutStateResponse,
    PanelLayoutRequest,
    PanelLayoutResponse,
    RoofDetectedRequest,
)
from services.layout_context import SessionRegistry, describe_extracted
from services.layout_types import RoofDimensions
from services.panel_layout import plan_panel_layout

router = APIRouter(prefix="/api/layout", tags=["layout"])

logger = logging.getLogger(__name__)


@router.post("/process", response_model=LayoutStateResponse)
async def process_message(data: LayoutProcessRequest, sessions: SessionRegistry = Depends(get_session_registry)):
    """
    Extract design parameters from one user utterance and update the
    session's view flags.
    """
    text = data.message.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    result = sessions.get(data.session_id).process_utterance(text)
    return LayoutStateResponse(session_id=data.session_id, **describe_extracted(result))


@router.post("/roof-detected", response_model=LayoutStateResponse)
async def roof_detected(data: RoofDetectedRequest, sessions: SessionRegistry = Depends(get_session_registry)):
    """Record roof dimensions found from imagery and open the layout view."""
    store = sessions.get(data.session_id)
    store.handle_roof_detected(RoofDimensions(width=data.width, height=data.height))
    return LayoutStateResponse(session_id=data.session_id, **store.snapshot())


@router.get("/context/{session_id}", response_model=LayoutStateResponse)
async def get_context(session_id: str, sessions: SessionRegistry = Depends(get_session_registry)):
    """Current context and view flags for a session."""
    return LayoutStateResponse(session_id=session_id, **sessions.get(session_id).snapshot())


@router.delete("/context/{session_id}")
async def reset_context(session_id: str, sessions: SessionRegistry = Depends(get_session_registry)):
    """Clear a session's context (conversation cleared)."""
    existed = sessions.clear(session_id)
    return {"session_id": session_id, "cleared": existed}


@router.post("/panels", response_model=PanelLayoutResponse)
async def panel_layout(data: PanelLayoutRequest, sessions: SessionRegistry = Depends(get_session_registry)):
    """
    Plan a panel grid. Explicit request values win over what the session
    context knows; anything still missing uses the planner defaults.
    """
    roof = None
    panel_count = data.panel_count
    panel_watts = data.panel_watts
    orientation = data.orientation

    if data.session_id:
        context = sessions.get(data.session_id).get_context()
        roof = context.roof_dimensions
        panel_count = panel_count if panel_count is not None else context.panel_count
        panel_watts = panel_watts or context.panel_watts
        orientation = orientation or context.orientation

    if data.roof_width is not None or data.roof_height is not None:
        if data.roof_width is None or data.roof_height is None:
            raise HTTPException(status_code=400, detail="Provide both roof_width and roof_height")
        roof = RoofDimensions(width=data.roof_width, height=data.roof_height)

    return plan_panel_layout(
        roof_dimensions=roof,
        panel_count=panel_count,
        panel_watts=panel_watts,
        orientation=orientation,
    )
