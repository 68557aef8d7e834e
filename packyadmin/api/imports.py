"""
CSV import API endpoints.

The operator first previews a file, then imports it into a chosen set.
File content is sent as text in the JSON body.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from packyadmin.config import settings
from packyadmin.db import CatalogClient, get_client
from packyadmin.models.db import CardSetDB
from packyadmin.parsers.csv_rows import REQUIRED_HEADERS
from packyadmin.services.import_session import (
    CsvImportError,
    ImportSession,
    ImportState,
    ImportStatus,
)

router = APIRouter(prefix="/import", tags=["import"])

SAMPLE_CSV = (
    "Set Name,Card Name,Card Number,Rarity,Image URL,USD Price\n"
    'Base Set,"Pikachu, Promo",58/102,Common,https://img.example/58.png,1.25'
)


class PreviewRequest(BaseModel):
    """Request model for previewing a CSV file."""

    filename: str = Field(..., examples=["base-set.csv"])
    content: str = Field(..., description="Raw CSV text", examples=[SAMPLE_CSV])
    max_rows: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Rows to return; defaults to the configured preview size",
    )


class ImportRequest(BaseModel):
    """Request model for importing a CSV file into a set."""

    filename: str = Field(..., examples=["base-set.csv"])
    content: str = Field(..., description="Raw CSV text", examples=[SAMPLE_CSV])
    set_id: str = Field(..., min_length=1, description="Set the cards are imported into")


class StatusInfo(BaseModel):
    """Status line for the import form."""

    type: str
    message: str


class PreviewResponse(BaseModel):
    """Response model for a CSV preview."""

    headers: list[str]
    required_headers: list[str] = Field(default_factory=lambda: list(REQUIRED_HEADERS))
    missing_headers: list[str] = Field(default_factory=list)
    rows: list[dict[str, str]] = Field(default_factory=list)
    parsed_rows: int = 0
    skipped_rows: int = Field(
        default=0,
        description="Rows dropped because their column count differs from the header",
    )
    status: StatusInfo | None = None


class RejectedRowInfo(BaseModel):
    """A CSV row the mapper refused, by its 0-based row index."""

    index: int
    reason: str


class ImportResponse(BaseModel):
    """Response model for a finished import."""

    set_id: str
    state: ImportState
    imported: int = 0
    failed: int = 0
    batches: int = 0
    failed_batches: int = 0
    skipped_rows: int = 0
    skipped_lines: list[int] = Field(default_factory=list)
    rejected_rows: list[RejectedRowInfo] = Field(default_factory=list)
    status: StatusInfo | None = None


def _status(import_status: ImportStatus | None) -> StatusInfo | None:
    if import_status is None:
        return None
    return StatusInfo(type=import_status.type, message=import_status.message)


@router.post("/preview", response_model=PreviewResponse)
async def preview_import(request: PreviewRequest) -> PreviewResponse:
    """
    Parse a CSV file and return the first rows.

    Nothing is stored. Missing required columns are reported but do not
    fail the preview.
    """
    session = ImportSession(preview_size=request.max_rows or settings.preview_rows)
    try:
        rows = session.select_file(request.filename, request.content)
    except CsvImportError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return PreviewResponse(
        headers=session.report.headers,
        missing_headers=session.missing_headers,
        rows=rows,
        parsed_rows=len(session.report.rows),
        skipped_rows=session.report.skipped,
        status=_status(session.status),
    )


@router.post("", response_model=ImportResponse)
async def import_cards(
    request: ImportRequest,
    client: Annotated[CatalogClient, Depends(get_client)],
) -> ImportResponse:
    """
    Import cards from a CSV file into a set.

    Cards are inserted in batches. A failed batch does not stop the import
    and batches already stored are kept, so the outcome can be a partial
    success.
    """
    card_set = await client.get(CardSetDB, request.set_id)
    if card_set is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Set '{request.set_id}' not found",
        )

    session = ImportSession(
        batch_size=settings.import_batch_size,
        preview_size=settings.preview_rows,
    )
    try:
        session.select_file(request.filename, request.content)
        session.choose_set(request.set_id)
        result = await session.run(client)
    except CsvImportError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return ImportResponse(
        set_id=request.set_id,
        state=session.state,
        imported=result.imported,
        failed=result.failed,
        batches=result.batches,
        failed_batches=result.failed_batches,
        skipped_rows=session.report.skipped,
        skipped_lines=session.report.skipped_lines,
        rejected_rows=[
            RejectedRowInfo(index=row.index, reason=row.reason) for row in session.rejected
        ],
        status=_status(session.status),
    )
