"""
Set API endpoints.

Provides CRUD operations for card sets.
"""

from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from packyadmin.db import CatalogClient, get_client
from packyadmin.models.db import CardSetDB

router = APIRouter(prefix="/sets", tags=["sets"])


def _check_optional_url(value: str | None) -> str | None:
    if value and not value.startswith(("http://", "https://")):
        msg = "Must be a valid URL"
        raise ValueError(msg)
    return value


OptionalUrl = Annotated[str, AfterValidator(_check_optional_url)]


class SetCreateRequest(BaseModel):
    """Request model for creating a set."""

    set_name: str = Field(..., min_length=1, max_length=100, examples=["Base Set"])
    card_amount: int = Field(..., ge=1, lt=10000)
    release_date: str = Field(..., min_length=1, examples=["1999-01-09"])
    logo_url: OptionalUrl = Field(default="", description="Logo image URL, or empty")
    background_url: OptionalUrl = Field(default="", description="Background image URL, or empty")
    series: str = Field(..., min_length=1, max_length=50, examples=["Original"])


class SetUpdateRequest(BaseModel):
    """Request model for editing a set. Only the given fields change."""

    set_name: str | None = Field(default=None, min_length=1, max_length=100)
    card_amount: int | None = Field(default=None, ge=1, lt=10000)
    release_date: str | None = Field(default=None, min_length=1)
    logo_url: OptionalUrl | None = None
    background_url: OptionalUrl | None = None
    series: str | None = Field(default=None, min_length=1, max_length=50)


class SetResponse(BaseModel):
    """Response model for set data."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    set_name: str
    series: str
    card_amount: int
    release_date: str
    logo_url: str = ""
    background_url: str = ""
    created_at: datetime | None = None


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    id: str
    deleted: bool
    message: str = ""


@router.get("", response_model=list[SetResponse])
async def list_sets(
    client: Annotated[CatalogClient, Depends(get_client)],
    order: Annotated[Literal["created_at", "set_name"], Query()] = "created_at",
) -> list[SetResponse]:
    """
    List all sets.

    Newest first by default; ``order=set_name`` sorts alphabetically, as
    used by the set pickers.
    """
    sets = await client.select(CardSetDB, order_by=order, ascending=order == "set_name")
    return [SetResponse.model_validate(card_set) for card_set in sets]


@router.get("/{set_id}", response_model=SetResponse)
async def get_set(
    set_id: str,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> SetResponse:
    """Get a single set."""
    card_set = await client.get(CardSetDB, set_id)
    if card_set is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Set '{set_id}' not found",
        )
    return SetResponse.model_validate(card_set)


@router.post("", response_model=SetResponse, status_code=status.HTTP_201_CREATED)
async def create_set(
    request: SetCreateRequest,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> SetResponse:
    """Create a new set."""
    created = await client.insert(CardSetDB, [request.model_dump()])
    return SetResponse.model_validate(created[0])


@router.patch("/{set_id}", response_model=SetResponse)
async def update_set(
    set_id: str,
    request: SetUpdateRequest,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> SetResponse:
    """
    Edit a set.

    Fields left out of the request keep their current value.
    """
    values = request.model_dump(exclude_unset=True)
    if not values:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )
    # logo/background may be cleared but not nulled
    for key in ("logo_url", "background_url"):
        if key in values and values[key] is None:
            values[key] = ""

    for key, value in values.items():
        if value is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"'{key}' cannot be null",
            )

    card_set = await client.update(CardSetDB, set_id, values)
    if card_set is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Set '{set_id}' not found",
        )
    return SetResponse.model_validate(card_set)


@router.delete("/{set_id}", response_model=DeleteResponse)
async def delete_set(
    set_id: str,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> DeleteResponse:
    """
    Delete a set.

    Cards that belong to the set are not deleted.
    """
    deleted = await client.delete(CardSetDB, set_id)

    if deleted:
        message = "Set deleted."
    else:
        message = "No set found to delete."

    return DeleteResponse(id=set_id, deleted=deleted, message=message)
