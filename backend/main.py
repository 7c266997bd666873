import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from core.auth import is_authenticated
from core.config import Settings, settings as default_settings
from core.logging_config import configure_logging
from core.search import InventoryCatalog
from core.staging import StagingLedger
from db.database import build_engine, build_session_maker, create_db_and_tables
from routers.auth import router as auth_router
from routers.inventory import router as inventory_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info("Connecting to DB %s", settings.masked_database_url)
        engine = build_engine(settings)
        await create_db_and_tables(engine)
        session_maker = build_session_maker(engine)
        app.state.catalog = InventoryCatalog(session_maker)
        app.state.ledger = StagingLedger(session_maker)
        app.state.ledger.add_listener(
            lambda committed: logger.info("Inventory changed: %d rows committed", committed)
        )
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(
        title="Parts Station API",
        description="Search and stage electronic component stock",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=not settings.allow_unsecure_cookie,
    )

    @app.get("/", include_in_schema=False)
    async def home(request: Request):
        target = "/inventory" if is_authenticated(request) else "/login"
        return RedirectResponse(target)

    app.include_router(auth_router, tags=["auth"])
    app.include_router(inventory_router, prefix="/api/inventory", tags=["inventory"])
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=default_settings.bind_host,
        port=default_settings.bind_port,
        use_colors=not default_settings.log_plain,
    )
