import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from packyadmin.api import (
    cards_router,
    dashboard_router,
    health_router,
    imports_router,
    sets_router,
)
from packyadmin.config import settings
from packyadmin.db import CatalogClientError
from packyadmin.db.database import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.getLogger("packyadmin").setLevel(settings.log_level)
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("packyadmin"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(dashboard_router)
app.include_router(health_router)
app.include_router(imports_router)
app.include_router(sets_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogClientError)
async def catalog_error_handler(_request: Request, exc: CatalogClientError) -> JSONResponse:
    """Store failures become a 503 instead of a raw 500."""
    logger.error("Catalog store error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "The catalog store is unavailable. Please try again."},
    )
