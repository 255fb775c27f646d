"""
Conversation loop checks with in-memory collaborators.

Run: python test_conversation.py
"""

import asyncio
import os
import sys
sys.path.insert(0, os.path.dirname(__file__) or ".")

from services.conversation import ConversationMode, ConversationSession
from services.layout_context import LayoutContextStore
from services.solar_constants import APOLOGY_MESSAGE


class RecordingGenerator:
    """Returns a fixed reply and remembers what the store held at call time."""

    def __init__(self, store, reply="Sounds good, let's plan it."):
        self.store = store
        self.reply = reply
        self.calls = []

    async def generate_response(self, history):
        self.calls.append({
            "history": list(history),
            "panel_count": self.store.get_context().panel_count,
        })
        return self.reply


class FailingGenerator:
    async def generate_response(self, history):
        raise RuntimeError("network down")


class RecordingSpeaker:
    def __init__(self):
        self.spoken = []
        self.stops = 0

    async def speak(self, text):
        self.spoken.append(text)

    async def stop(self):
        self.stops += 1


def _session(generator_cls=RecordingGenerator, **kwargs):
    store = LayoutContextStore()
    generator = generator_cls(store) if generator_cls is RecordingGenerator else generator_cls()
    speaker = RecordingSpeaker()
    session = ConversationSession(generator, speaker, store=store, **kwargs)
    return session, generator, speaker


def test_utterance_processed_before_reply():
    async def run():
        session, generator, speaker = _session()
        result = await session.send_message("I'd like 22 panels")

        assert generator.calls[0]["panel_count"] == 22
        assert generator.calls[0]["history"] == [{"role": "user", "content": "I'd like 22 panels"}]
        assert result["reply"] == generator.reply
        assert result["layout"]["show_layout_view"] is True
        assert [m.role for m in session.messages] == ["user", "assistant"]
        assert speaker.spoken == [generator.reply]
        assert not session.is_loading and not session.is_speaking

    asyncio.run(run())


def test_generation_failure_appends_apology():
    async def run():
        session, _, speaker = _session(FailingGenerator)
        result = await session.send_message("hello")
        assert result["reply"] == APOLOGY_MESSAGE
        assert session.messages[-1].content == APOLOGY_MESSAGE
        assert speaker.spoken == []
        assert session.is_loading is False

        # user can retry
        again = await session.send_message("hello again")
        assert again is not None

    asyncio.run(run())


def test_messages_ignored_while_loading_or_empty():
    async def run():
        session, generator, _ = _session()
        assert await session.send_message("   ") is None
        session.is_loading = True
        assert await session.send_message("10 panels") is None
        assert generator.calls == []
        assert session.messages == []

    asyncio.run(run())


def test_continuous_mode_requests_listening():
    async def run():
        heard = []
        session, _, _ = _session(on_listen_ready=lambda: heard.append(True), auto_listen_delay=0)
        assert session.toggle_mode() is ConversationMode.CONTINUOUS

        await session.send_message("design a layout")
        assert session.pending_listen is not None
        await session.pending_listen
        assert heard == [True]

    asyncio.run(run())


def test_manual_mode_does_not_listen():
    async def run():
        heard = []
        session, _, _ = _session(on_listen_ready=lambda: heard.append(True), auto_listen_delay=0)
        await session.send_message("design a layout")
        assert session.pending_listen is None
        await asyncio.sleep(0)
        assert heard == []

    asyncio.run(run())


def test_stop_speaking_cancels_pending_listen():
    async def run():
        heard = []
        session, _, speaker = _session(on_listen_ready=lambda: heard.append(True), auto_listen_delay=10)
        session.toggle_mode()
        await session.send_message("design a layout")
        task = session.pending_listen

        await session.stop_speaking()
        await asyncio.sleep(0)
        assert task.cancelled()
        assert session.pending_listen is None
        assert speaker.stops == 1
        assert heard == []

    asyncio.run(run())


def test_async_listen_callback():
    async def run():
        heard = []

        async def on_listen():
            heard.append("async")

        session, _, _ = _session(on_listen_ready=on_listen, auto_listen_delay=0)
        session.toggle_mode()
        await session.send_message("panel placement")
        await session.pending_listen
        assert heard == ["async"]

    asyncio.run(run())


def test_failing_listen_callback_is_contained():
    async def run():
        async def on_listen():
            raise RuntimeError("client went away")

        session, _, _ = _session(on_listen_ready=on_listen, auto_listen_delay=0)
        session.toggle_mode()
        await session.send_message("panel placement")
        task = session.pending_listen
        await task
        assert task.done() and task.exception() is None

        # the session keeps working after the failed callback
        result = await session.send_message("make it 12 panels")
        assert result["layout"]["context"].panel_count == 12
        await session.pending_listen

    asyncio.run(run())


def test_clear_resets_everything():
    async def run():
        session, _, speaker = _session()
        session.toggle_mode()
        await session.send_message("24 panels at 123 Main Street")
        await session.clear()

        assert session.messages == []
        assert session.mode is ConversationMode.MANUAL
        assert session.store.get_context().is_empty()
        assert speaker.stops == 1

    asyncio.run(run())


if __name__ == "__main__":
    tests = [v for k, v in list(globals().items()) if k.startswith("test_")]
    for fn in tests:
        fn()
        print(f"  PASS  {fn.__name__}")
    print("=" * 60)
    print(f"ALL {len(tests)} TESTS PASSED")
