"""
Health check endpoints.

Liveness answers without touching the store; readiness runs a count
through the catalog client.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from packyadmin.config import settings
from packyadmin.db import CatalogClient, CatalogClientError, get_client
from packyadmin.models.db import CardSetDB

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    app: str = settings.app_name
    database: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Does not check the store."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 when the catalog tables cannot be queried.
    """
    try:
        await client.count(CardSetDB)
    except CatalogClientError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")
    return HealthResponse(status="ready", database="connected")
