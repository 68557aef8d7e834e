"""
Chunked submission of records to the store.

Records are sent in fixed-size chunks, one insert call at a time, in source
order. A failing chunk is counted and skipped; chunks that already
succeeded stay committed.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Literal

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50

BatchOutcome = Literal["success", "partial", "failure"]
InsertFn = Callable[[list[dict[str, Any]]], Awaitable[Any]]


@dataclass
class BatchResult:
    """Success/failure tally for a chunked submission."""

    imported: int = 0
    failed: int = 0
    batches: int = 0
    failed_batches: int = 0

    @property
    def outcome(self) -> BatchOutcome:
        if self.failed == 0:
            return "success"
        if self.imported == 0:
            return "failure"
        return "partial"

    def message(self) -> str:
        """Summary line for the operator."""
        if self.outcome == "success":
            return f"Successfully imported {self.imported} cards!"
        if self.outcome == "failure":
            return f"Failed to import {self.failed} cards."
        return (
            f"Imported {self.imported} cards successfully. "
            f"{self.failed} cards failed to import."
        )


def chunk_records(
    records: Sequence[dict[str, Any]], batch_size: int
) -> Iterator[list[dict[str, Any]]]:
    """Yield contiguous chunks of ``batch_size`` records; the last may be shorter."""
    if batch_size < 1:
        msg = f"batch_size must be at least 1, got {batch_size}"
        raise ValueError(msg)

    for start in range(0, len(records), batch_size):
        yield list(records[start : start + batch_size])


async def submit_in_batches(
    records: Sequence[dict[str, Any]],
    insert: InsertFn,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> BatchResult:
    """
    Insert records chunk by chunk.

    Args:
        records: Records to insert, in the order they should be sent
        insert: Async callable that stores one chunk or raises
        batch_size: Maximum records per insert call

    Returns:
        Counts of imported and failed records
    """
    result = BatchResult()

    for chunk in chunk_records(records, batch_size):
        result.batches += 1
        try:
            await insert(chunk)
        except Exception as e:
            logger.error(
                "Error importing batch %d (%d records): %s", result.batches, len(chunk), e
            )
            result.failed += len(chunk)
            result.failed_batches += 1
        else:
            result.imported += len(chunk)

    return result
