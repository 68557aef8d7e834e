"""
Card API endpoints.

Lists, creates and deletes cards. Listings carry the owning set's name and
series alongside each card.
"""

from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from packyadmin.db import CatalogClient, get_client
from packyadmin.models.db import CardDB, CardSetDB
from packyadmin.parsers.card_mapper import generate_slug

router = APIRouter(prefix="/cards", tags=["cards"])

SortField = Literal["name", "number", "rarity", "hp", "euro_price", "usd_price", "created_at"]
SortDirection = Literal["asc", "desc"]

SEARCH_COLUMNS = ("name", "number", "rarity")


class CardCreateRequest(BaseModel):
    """Request model for creating a single card."""

    set_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255, examples=["Pikachu"])
    number: str = Field(default="", max_length=32, examples=["58/102"])
    rarity: str = Field(default="", max_length=50, examples=["Common"])
    image: str = ""
    slug: str | None = Field(default=None, description="Derived from the name when omitted")
    hp: int | None = Field(default=None, ge=0)
    usd_price: float | None = Field(default=None, ge=0)
    euro_price: float | None = Field(default=None, ge=0)
    tcg_player: str | None = None
    card_market: str | None = None
    variant_type: str | None = None
    variant_id: str | None = None
    is_base_card: bool | None = None
    base_card_id: str | None = None


class CardResponse(BaseModel):
    """Response model for card data."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    set_id: str
    name: str
    slug: str
    number: str
    rarity: str
    image: str
    hp: int | None = None
    usd_price: float | None = None
    euro_price: float | None = None
    tcg_player: str | None = None
    card_market: str | None = None
    variant_type: str | None = None
    variant_id: str | None = None
    is_base_card: bool | None = None
    base_card_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # From the owning set; None when the set no longer exists
    set_name: str | None = None
    series: str | None = None


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    id: str
    deleted: bool
    message: str = ""


def _with_set(card: CardDB, card_set: CardSetDB | None) -> CardResponse:
    response = CardResponse.model_validate(card)
    if card_set is not None:
        response.set_name = card_set.set_name
        response.series = card_set.series
    return response


@router.get("", response_model=list[CardResponse])
async def list_cards(
    client: Annotated[CatalogClient, Depends(get_client)],
    set_id: Annotated[str | None, Query(description="Only cards from this set")] = None,
    search: Annotated[
        str | None, Query(description="Case-insensitive match on name, number or rarity")
    ] = None,
    sort: SortField = "created_at",
    direction: SortDirection = "desc",
) -> list[CardResponse]:
    """
    List cards with optional set filter, search and sorting.

    Newest cards come first unless another sort is requested.
    """
    filters = {"set_id": set_id} if set_id else None
    cards = await client.select(
        CardDB,
        filters=filters,
        search=search,
        search_columns=SEARCH_COLUMNS,
        order_by=sort,
        ascending=direction == "asc",
    )

    sets = {card_set.id: card_set for card_set in await client.select(CardSetDB)}
    return [_with_set(card, sets.get(card.set_id)) for card in cards]


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: str,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> CardResponse:
    """Get a single card with its set details."""
    card = await client.get(CardDB, card_id)
    if card is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{card_id}' not found",
        )
    card_set = await client.get(CardSetDB, card.set_id)
    return _with_set(card, card_set)


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    request: CardCreateRequest,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> CardResponse:
    """Create a single card in an existing set."""
    card_set = await client.get(CardSetDB, request.set_id)
    if card_set is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Set '{request.set_id}' not found",
        )

    values = request.model_dump(exclude_none=True)
    values["slug"] = request.slug or generate_slug(request.name or request.number)

    created = await client.insert(CardDB, [values])
    return _with_set(created[0], card_set)


@router.delete("/{card_id}", response_model=DeleteResponse)
async def delete_card(
    card_id: str,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> DeleteResponse:
    """Delete a card."""
    deleted = await client.delete(CardDB, card_id)

    if deleted:
        message = "Card deleted."
    else:
        message = "No card found to delete."

    return DeleteResponse(id=card_id, deleted=deleted, message=message)
