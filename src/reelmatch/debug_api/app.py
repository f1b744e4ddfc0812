"""FastAPI application factory for the slot debug API."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import asyncpg
import uvicorn
from fastapi import FastAPI

from reelmatch.config import Settings, get_settings
from reelmatch.debug_api.middleware import RequestTimingMiddleware, setup_cors, setup_error_handlers
from reelmatch.debug_api.routes import router
from reelmatch.profile_match.engine import ProfileMatchEngine
from reelmatch.release_parser.parser import ReleaseParser
from reelmatch.shared.db import create_pool

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and cleanup application resources."""
    db_dsn: str | None = app.state.db_dsn
    db_pool: asyncpg.Pool | None = None

    if db_dsn:
        try:
            db_pool = await create_pool(db_dsn)
            app.state.db_pool = db_pool
        except Exception as exc:  # pragma: no cover - depends on external postgres
            logger.warning("postgres unavailable at startup (%s): %s", db_dsn, exc)
            app.state.db_pool = None
    else:
        app.state.db_pool = None

    try:
        yield
    finally:
        if db_pool is not None:
            await db_pool.close()


def create_app(settings: Settings | None = None, db_dsn: str | None = "auto") -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    if db_dsn == "auto":
        db_dsn = settings.dsn

    app = FastAPI(title="reelmatch Slot Debug API", lifespan=lifespan)
    app.state.settings = settings
    app.state.db_dsn = db_dsn
    app.state.db_pool = None
    app.state.parser = ReleaseParser(year_lookahead=settings.year_lookahead)
    app.state.engine = ProfileMatchEngine(preferred_bonus=settings.preferred_bonus)
    setup_cors(app, settings.cors_origin_list)
    setup_error_handlers(app)
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(router)
    return app


def main() -> None:
    """Entry point for ``python -m reelmatch.debug_api.app``."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    logger.info("debug api listening on %s:%d", settings.api_host, settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
