"""FastAPI dependencies resolving the shared services built at startup."""

from fastapi.requests import HTTPConnection

from services.chat import ResponseGenerator
from services.layout_context import SessionRegistry


def get_session_registry(conn: HTTPConnection) -> SessionRegistry:
    return conn.app.state.sessions


def get_response_generator(conn: HTTPConnection) -> ResponseGenerator:
    return conn.app.state.response_generator
