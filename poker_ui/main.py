"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from poker_ui.api.routes import router
from poker_ui.api.websocket import ws_router
from poker_ui.config.settings import Settings, configure_logging, get_settings
from poker_ui.engine.client import EngineClient
from poker_ui.managers.table_manager import table_manager

BASE_DIR = Path(__file__).resolve().parent.parent


def create_app(settings: Optional[Settings] = None, engine: Optional[EngineClient] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    table_manager.max_tables = settings.max_tables

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.engine.aclose()

    app = FastAPI(
        title="Poker Table",
        description="Player-facing table for a remote heads-up poker engine",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine or EngineClient(settings.engine_url, settings.engine_timeout)

    # Templates
    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
    app.state.templates = templates

    # Static files
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    # Routers
    app.include_router(router)
    app.include_router(ws_router)

    return app


app = create_app()
