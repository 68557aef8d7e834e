"""
Dashboard pages: analytics, users and settings.

Users and settings are read-only placeholders; accounts are managed by the
hosted authentication provider, not by this service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from packyadmin.config import settings
from packyadmin.db import CatalogClient, get_client
from packyadmin.models.db import CardDB, CardSetDB

router = APIRouter(tags=["dashboard"])


class AnalyticsResponse(BaseModel):
    """Catalog totals for the analytics page."""

    total_sets: int = 0
    total_cards: int = 0
    by_rarity: dict[str, int] = Field(default_factory=dict)
    by_set: dict[str, int] = Field(
        default_factory=dict,
        description="Card counts keyed by set name; cards without a set are under 'unknown'",
    )


class UsersResponse(BaseModel):
    """Placeholder user list until accounts exist."""

    users: list[dict[str, str]] = Field(default_factory=list)
    message: str = ""


class SettingsResponse(BaseModel):
    """Non-secret settings shown on the settings page."""

    app_name: str
    debug: bool
    import_batch_size: int
    preview_rows: int


@router.get("/analytics", response_model=AnalyticsResponse)
async def analytics(
    client: Annotated[CatalogClient, Depends(get_client)],
) -> AnalyticsResponse:
    """Set and card totals with breakdowns by rarity and by set."""
    sets = await client.select(CardSetDB)
    names = {card_set.id: card_set.set_name for card_set in sets}

    by_set: dict[str, int] = {}
    for set_id, count in (await client.count_by(CardDB, "set_id")).items():
        name = names.get(set_id, "unknown")
        by_set[name] = by_set.get(name, 0) + count

    by_rarity: dict[str, int] = {}
    for rarity, count in (await client.count_by(CardDB, "rarity")).items():
        key = rarity or "unknown"
        by_rarity[key] = by_rarity.get(key, 0) + count

    return AnalyticsResponse(
        total_sets=len(sets),
        total_cards=await client.count(CardDB),
        by_rarity=by_rarity,
        by_set=by_set,
    )


@router.get("/users", response_model=UsersResponse)
async def users() -> UsersResponse:
    """Placeholder: user accounts live with the authentication provider."""
    return UsersResponse(
        users=[],
        message="User management is handled by the authentication provider.",
    )


@router.get("/settings", response_model=SettingsResponse)
async def dashboard_settings() -> SettingsResponse:
    """Current dashboard settings (read-only)."""
    return SettingsResponse(
        app_name=settings.app_name,
        debug=settings.debug,
        import_batch_size=settings.import_batch_size,
        preview_rows=settings.preview_rows,
    )
