"""
Main FastAPI application for CrewCost.

Serves the v1 JSON API under /api/v1 and uploaded receipts under the
configured public prefix. Authentication uses a signed session cookie.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from crewcost.config import get_config, configure_logging
from crewcost.models import init_db
from crewcost.api.v1 import api_router as v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    configure_logging(config)
    init_db()
    config.receipt_directory.mkdir(parents=True, exist_ok=True)
    logger.info(f"CrewCost {config.version} started")
    yield


def create_app() -> FastAPI:
    config = get_config()

    app = FastAPI(
        title="CrewCost",
        description="Shared project expenses: cost splitting and budget tracking",
        version=config.version,
        lifespan=lifespan
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        session_cookie=config.session_cookie_name,
        max_age=config.session_max_age,
        same_site="lax"
    )

    app.include_router(v1_router)
    app.mount(
        config.receipt_public_prefix,
        StaticFiles(directory=str(config.receipt_directory), check_dir=False),
        name="receipts"
    )

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "version": config.version}

    return app


app = create_app()
