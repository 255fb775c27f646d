"""
AI reply generation for the solar design chat.

Uses Grok (xAI, OpenAI-compatible) as the primary provider with Groq as
fallback. When neither is configured or both fail, a fixed apology is
returned so the user can simply try again.
"""

import asyncio
import logging
from typing import List, Optional

from config import (
    AI_MAX_TOKENS,
    AI_TEMPERATURE,
    GROK_API_KEY,
    GROK_BASE_URL,
    GROK_MODEL,
    GROQ_API_KEY,
    GROQ_MODEL,
)
from services.solar_constants import APOLOGY_MESSAGE

logger = logging.getLogger(__name__)

CONNECTION_TROUBLE_MESSAGE = (
    "I'm having trouble connecting to my knowledge base right now. "
    "Please check your internet connection and try again."
)

SYSTEM_PROMPT = """You are SolarBot, an expert solar panel layout design assistant. \
You help users design optimal solar panel installations through natural conversation.

Your expertise includes:
- Roof analysis from satellite imagery
- Solar panel placement and orientation
- Energy production estimates and system sizing
- Setback requirements, local regulations and incentives
- Shading analysis and obstruction identification

The app shows visuals automatically:
- Satellite imagery appears when an address or the roof is mentioned
- A 2D panel layout appears when panels, system size or layout are discussed

Always:
- Ask clarifying questions about the property, usage and goals
- Be specific about panel quantities (e.g. "I recommend 24 panels")
- State system sizes in kW (e.g. "9.6kW system")
- Give roof dimensions in feet when known (e.g. "40x30 foot roof")
- Say whether panels should be landscape or portrait
- Keep answers conversational and practical"""


class ResponseGenerator:
    """
    Chat completion client with provider fallback.

    Provider clients are created lazily on first use and kept on the
    instance; construct one generator at startup and share it.
    """

    def __init__(
        self,
        grok_api_key: str = GROK_API_KEY,
        groq_api_key: str = GROQ_API_KEY,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.grok_api_key = grok_api_key
        self.groq_api_key = groq_api_key
        self.system_prompt = system_prompt
        self._grok_client = None
        self._groq_client = None

    def _get_grok_client(self):
        """Lazy initialization of Grok client using OpenAI SDK."""
        if self._grok_client is None and self.grok_api_key:
            from openai import OpenAI
            self._grok_client = OpenAI(api_key=self.grok_api_key, base_url=GROK_BASE_URL)
        return self._grok_client

    def _get_groq_client(self):
        """Lazy initialization of Groq client."""
        if self._groq_client is None and self.groq_api_key:
            from groq import Groq
            self._groq_client = Groq(api_key=self.groq_api_key)
        return self._groq_client

    def _providers(self) -> list:
        providers = []
        grok = self._get_grok_client()
        if grok is not None:
            providers.append(("grok", grok, GROK_MODEL))
        groq = self._get_groq_client()
        if groq is not None:
            providers.append(("groq", groq, GROQ_MODEL))
        return providers

    def build_messages(self, history: List[dict]) -> List[dict]:
        messages = [{"role": "system", "content": self.system_prompt}]
        for msg in history:
            if msg.get("role") in ("user", "assistant"):
                messages.append({"role": msg["role"], "content": msg["content"]})
        return messages

    @staticmethod
    def _complete(client, model: str, messages: List[dict]) -> Optional[str]:
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=AI_TEMPERATURE,
            max_tokens=AI_MAX_TOKENS,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def generate_response(self, history: List[dict]) -> str:
        """
        Generate the assistant reply for a conversation.

        Args:
            history: Messages so far, ending with the latest user message.

        Returns:
            Reply text. Never raises for provider errors.
        """
        providers = self._providers()
        if not providers:
            logger.warning("No AI provider configured; returning fallback reply")
            return CONNECTION_TROUBLE_MESSAGE

        messages = self.build_messages(history)
        failed = False
        for name, client, model in providers:
            try:
                reply = await asyncio.to_thread(self._complete, client, model, messages)
            except Exception as e:
                logger.warning(f"{name} completion failed: {e}")
                failed = True
                continue
            if reply:
                return reply
            logger.warning(f"{name} returned an empty completion")

        return CONNECTION_TROUBLE_MESSAGE if failed else APOLOGY_MESSAGE
