"""
FastAPI application factory for the AutoWheel detector.

Routes:
- /api/* -> controller intents and status (REST)
- /static/* -> page assets, when a built front-end is present
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from runtime.context import RuntimeContext
from .routes import api


def create_app(ctx: RuntimeContext) -> FastAPI:
    """Create the FastAPI app bound to one runtime context."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.info("Web interface ready")
        yield
        await ctx.controller.shutdown()
        logging.info("Controller shut down")

    app = FastAPI(
        title="AutoWheel Detector",
        version="0.1.0",
        description="Camera and image object detection demo",
        lifespan=lifespan,
    )
    app.state.ctx = ctx

    # CORS for development (front-end dev server)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api.router, prefix="/api")

    static_path = Path("static")
    if static_path.exists():
        app.mount("/static", StaticFiles(directory=str(static_path), html=True), name="static")

    return app
