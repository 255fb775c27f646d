"""Chat routes: HTTP turn endpoint and WebSocket conversation loop."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect

from dependencies import get_response_generator, get_session_registry
from schemas import ChatRequest, ChatResponse
from services.chat import ResponseGenerator
from services.conversation import ConversationMode, ConversationSession, SilentSpeaker
from services.extraction import extract_solar_context
from services.layout_context import SessionRegistry, describe_extracted

router = APIRouter(tags=["chat"])

logger = logging.getLogger(__name__)


@router.post("/api/chat", response_model=ChatResponse)
async def chat_http(
    request: ChatRequest,
    sessions: SessionRegistry = Depends(get_session_registry),
    generator: ResponseGenerator = Depends(get_response_generator),
):
    """
    One chat turn. The utterance updates the session's layout context
    before the assistant reply is requested.
    """
    user_text = request.message.strip()
    if not user_text:
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    layout = describe_extracted(sessions.get(request.session_id).process_utterance(user_text))

    history = [m.model_dump() for m in request.history]
    history.append({"role": "user", "content": user_text})
    reply = await generator.generate_response(history)
    history.append({"role": "assistant", "content": reply})

    return ChatResponse(
        reply=reply,
        history=history,
        context=layout["context"],
        show_satellite_view=layout["show_satellite_view"],
        show_layout_view=layout["show_layout_view"],
        solar_context=extract_solar_context(history),
    )


@router.websocket("/api/chat/ws/{session_id}")
async def chat_websocket(
    websocket: WebSocket,
    session_id: str,
    sessions: SessionRegistry = Depends(get_session_registry),
    generator: ResponseGenerator = Depends(get_response_generator),
):
    """
    WebSocket conversation.

    Client frames are JSON: {"message": "..."} for a user turn, or
    {"action": "clear" | "toggle_mode" | "stop_speaking"}. In continuous
    mode the server sends {"event": "listen"} when the client should start
    listening again.
    """
    await websocket.accept()

    async def notify_listen():
        await websocket.send_text(json.dumps({"event": "listen"}))

    session = ConversationSession(
        generator=generator,
        speaker=SilentSpeaker(),
        store=sessions.get(session_id),
        on_listen_ready=notify_listen,
    )

    try:
        while True:
            data = await websocket.receive_text()
            try:
                frame = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_text(json.dumps({"error": "Invalid JSON"}))
                continue
            if not isinstance(frame, dict) or not isinstance(frame.get("message", ""), str):
                await websocket.send_text(json.dumps({"error": "Invalid frame"}))
                continue

            action = frame.get("action")
            if action == "clear":
                await session.clear()
                await websocket.send_text(json.dumps({"event": "cleared", "mode": session.mode.value}))
                continue
            if action == "toggle_mode":
                mode = session.toggle_mode()
                await websocket.send_text(json.dumps({"event": "mode", "mode": mode.value}))
                continue
            if action == "stop_speaking":
                await session.stop_speaking()
                continue

            result = await session.send_message(frame.get("message", ""))
            if result is None:
                continue

            layout = describe_extracted(result["layout"])
            await websocket.send_text(json.dumps({
                "reply": result["reply"],
                "context": layout["context"],
                "show_satellite_view": layout["show_satellite_view"],
                "show_layout_view": layout["show_layout_view"],
                "mode": session.mode.value,
                "continuous": session.mode is ConversationMode.CONTINUOUS,
            }))

    except WebSocketDisconnect:
        logger.info(f"Chat session {session_id} disconnected")
        await session.stop_speaking()
