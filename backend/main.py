"""
SolarBot Layout Backend – FastAPI Backend

Main entry point. Sets up logging and CORS, builds the shared services,
and includes all routes.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import CORS_ORIGINS, LOG_LEVEL
from services.chat import ResponseGenerator
from services.layout_context import SessionRegistry

# Import route modules
from routes.layout import router as layout_router
from routes.chat import router as chat_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Construct the per-process services once and share them via app.state."""
    app.state.sessions = SessionRegistry()
    app.state.response_generator = ResponseGenerator()
    yield


app = FastAPI(
    title="SolarBot Layout Backend",
    description="Turn solar design conversations into layout context and view triggers",
    version=API_VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(layout_router)
app.include_router(chat_router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": API_VERSION}


if __name__ == "__main__":
    import uvicorn
    from config import HOST, PORT
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
