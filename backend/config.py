"""Application configuration via environment variables."""

import os
from dotenv import load_dotenv

load_dotenv()

# Grok (xAI) API — Primary AI provider
GROK_API_KEY = os.getenv("GROK_API_KEY", "")
GROK_MODEL = os.getenv("GROK_MODEL", "grok-3-mini")
GROK_BASE_URL = os.getenv("GROK_BASE_URL", "https://api.x.ai/v1")

# Groq API (fallback)
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama3-70b-8192")

# Completion tuning
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "600"))
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.7"))

# Conversation loop: seconds to wait after speech before listening again
AUTO_LISTEN_DELAY = float(os.getenv("AUTO_LISTEN_DELAY", "1.0"))

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8081,http://localhost:19006").split(",")
