"""
Conversation loop for the solar design assistant.

Each user message is run through the layout context store first, then the
reply is requested, appended and spoken. In continuous mode the session
calls ``on_listen_ready`` once speech has finished so the caller can start
listening for the next utterance.

Collaborators (reply generator, speaker, store) are passed in explicitly.
"""

import asyncio
import enum
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Protocol, Union

from config import AUTO_LISTEN_DELAY
from services.layout_context import LayoutContextStore
from services.solar_constants import APOLOGY_MESSAGE

logger = logging.getLogger(__name__)

ListenCallback = Callable[[], Union[None, Awaitable[None]]]


class ConversationMode(str, enum.Enum):
    MANUAL = "manual"
    CONTINUOUS = "continuous"


@dataclass
class ChatMessage:
    role: str
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


class Speaker(Protocol):
    async def speak(self, text: str) -> None: ...

    async def stop(self) -> None: ...


class ReplyGenerator(Protocol):
    async def generate_response(self, history: List[dict]) -> str: ...


class SilentSpeaker:
    """Speaker for contexts without an audio device; completes immediately."""

    async def speak(self, text: str) -> None:
        logger.debug(f"Skipping speech for {len(text)} chars")

    async def stop(self) -> None:
        return None


class ConversationSession:
    """State and control flow of one chat conversation."""

    def __init__(
        self,
        generator: ReplyGenerator,
        speaker: Speaker,
        store: Optional[LayoutContextStore] = None,
        on_listen_ready: Optional[ListenCallback] = None,
        auto_listen_delay: float = AUTO_LISTEN_DELAY,
    ):
        self.generator = generator
        self.speaker = speaker
        self.store = store or LayoutContextStore()
        self.on_listen_ready = on_listen_ready
        self.auto_listen_delay = auto_listen_delay

        self.messages: List[ChatMessage] = []
        self.mode = ConversationMode.MANUAL
        self.is_loading = False
        self.is_typing = False
        self.is_speaking = False
        self.pending_listen: Optional[asyncio.Task] = None

    def history(self) -> List[dict]:
        return [m.to_dict() for m in self.messages]

    def _add_message(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.messages.append(message)
        return message

    async def send_message(self, content: str) -> Optional[dict]:
        """
        Handle one user message.

        Returns:
            Dict with 'reply' and 'layout' (the ``process_utterance`` result),
            or None when the message was empty or a reply is still pending.
        """
        content = content.strip()
        if not content:
            return None
        if self.is_loading:
            logger.info("Ignoring message while a reply is pending")
            return None

        self._add_message("user", content)
        layout = self.store.process_utterance(content)

        self.is_loading = True
        self.is_typing = True
        try:
            reply = await self.generator.generate_response(self.history())
            self._add_message("assistant", reply)
        except Exception as e:
            logger.error(f"Reply generation failed: {e}")
            reply = APOLOGY_MESSAGE
            self._add_message("assistant", reply)
            return {"reply": reply, "layout": layout}
        finally:
            self.is_loading = False
            self.is_typing = False

        await self._speak(reply)

        if self.mode is ConversationMode.CONTINUOUS and self.on_listen_ready is not None:
            self._cancel_pending_listen()
            self.pending_listen = asyncio.create_task(self._listen_after_delay())

        return {"reply": reply, "layout": layout}

    async def _speak(self, text: str) -> None:
        self.is_speaking = True
        try:
            await self.speaker.speak(text)
        except Exception as e:
            logger.warning(f"Speech playback failed: {e}")
        finally:
            self.is_speaking = False

    async def _listen_after_delay(self) -> None:
        await asyncio.sleep(self.auto_listen_delay)
        try:
            result = self.on_listen_ready()
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            logger.error(f"Auto-listen callback failed: {e}")

    def _cancel_pending_listen(self) -> None:
        if self.pending_listen is not None and not self.pending_listen.done():
            self.pending_listen.cancel()
        self.pending_listen = None

    async def stop_speaking(self) -> None:
        await self.speaker.stop()
        self.is_speaking = False
        self._cancel_pending_listen()

    def toggle_mode(self) -> ConversationMode:
        if self.mode is ConversationMode.MANUAL:
            self.mode = ConversationMode.CONTINUOUS
        else:
            self.mode = ConversationMode.MANUAL
        return self.mode

    async def clear(self) -> None:
        """Drop the transcript and layout context and return to manual mode."""
        self.messages = []
        self.is_loading = False
        self.is_typing = False
        await self.stop_speaking()
        self.store.reset()
        self.mode = ConversationMode.MANUAL
