"""
CSV import flow.

One ImportSession drives a single import from file selection to a final
outcome:

    IDLE -> FILE_SELECTED -> PREVIEWED -> IMPORTING -> COMPLETED
                                                    -> PARTIALLY_FAILED
                                                    -> FAILED

Selecting another file or choosing another target set goes back to
FILE_SELECTED/PREVIEWED. Once IMPORTING starts it runs to the end: there
is no cancel.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from packyadmin.db.client import CatalogClient
from packyadmin.models.db import CardDB
from packyadmin.parsers.card_mapper import RejectedRow, convert_rows
from packyadmin.parsers.csv_rows import (
    DEFAULT_PREVIEW_ROWS,
    CsvRow,
    ParseReport,
    missing_headers,
    parse_csv_report,
    preview_rows,
)
from packyadmin.services.batch_submitter import (
    DEFAULT_BATCH_SIZE,
    BatchResult,
    submit_in_batches,
)

logger = logging.getLogger(__name__)

StatusType = Literal["success", "warning", "error"]

GENERIC_FAILURE_MESSAGE = "An error occurred during import. Please try again."


class ImportState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    PREVIEWED = "previewed"
    IMPORTING = "importing"
    COMPLETED = "completed"
    PARTIALLY_FAILED = "partially_failed"
    FAILED = "failed"


TERMINAL_STATES = frozenset(
    {ImportState.COMPLETED, ImportState.PARTIALLY_FAILED, ImportState.FAILED}
)


class CsvImportError(Exception):
    """Base class for import errors shown to the operator."""


class ImportFileError(CsvImportError):
    """The uploaded file was rejected before parsing."""


class MissingColumnsError(CsvImportError):
    """The CSV header lacks one or more required columns."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required columns: {', '.join(missing)}")


class ImportStateError(CsvImportError):
    """The requested step is not allowed in the current state."""


@dataclass
class ImportStatus:
    """Status line shown next to the import form."""

    type: StatusType
    message: str


class ImportSession:
    """State for one CSV import."""

    def __init__(
        self,
        batch_size: int = DEFAULT_BATCH_SIZE,
        preview_size: int = DEFAULT_PREVIEW_ROWS,
    ) -> None:
        self.batch_size = batch_size
        self.preview_size = preview_size

        self.state = ImportState.IDLE
        self.status: ImportStatus | None = None
        self.filename: str | None = None
        self.content: str | None = None
        self.set_id: str | None = None
        self.report = ParseReport()
        self.preview: list[CsvRow] = []

        self.result: BatchResult | None = None
        self.rejected: list[RejectedRow] = []

    def _fail(self, error: CsvImportError) -> CsvImportError:
        self.status = ImportStatus("error", str(error))
        return error

    def select_file(self, filename: str, content: str) -> list[CsvRow]:
        """
        Load a file and build its preview.

        Raises:
            ImportFileError: Wrong extension or empty content
            ImportStateError: An import is running
        """
        if self.state is ImportState.IMPORTING:
            raise self._fail(ImportStateError("An import is already in progress"))
        if not filename.lower().endswith(".csv"):
            raise self._fail(ImportFileError("Please select a CSV file"))
        if not content or not content.strip():
            raise self._fail(ImportFileError("The selected file is empty"))

        self.filename = filename
        self.content = content
        self.status = None
        self.state = ImportState.FILE_SELECTED
        return self.build_preview()

    def build_preview(self) -> list[CsvRow]:
        """Parse the loaded file and keep the first rows for display."""
        if self.content is None:
            raise self._fail(ImportStateError("No file selected"))

        self.report = parse_csv_report(self.content)
        self.preview = preview_rows(self.report.rows, self.preview_size)
        self.state = ImportState.PREVIEWED

        if not self.preview:
            self.status = ImportStatus("warning", "No valid data found in CSV file")
        else:
            self.status = ImportStatus(
                "success", f"Found {len(self.preview)} preview rows. Ready to import."
            )
        return self.preview

    def choose_set(self, set_id: str) -> None:
        """Pick the set the cards are imported into."""
        if self.state is ImportState.IMPORTING:
            raise self._fail(ImportStateError("An import is already in progress"))
        self.set_id = set_id
        if self.content is not None:
            self.state = ImportState.PREVIEWED

    @property
    def missing_headers(self) -> list[str]:
        return missing_headers(self.report.headers)

    async def run(self, client: CatalogClient) -> BatchResult:
        """
        Import every parsed row into the chosen set.

        Raises:
            ImportStateError: No file/set chosen or an import already running
            MissingColumnsError: The header lacks required columns
            ImportFileError: The file has no usable rows
        """
        if self.state is ImportState.IMPORTING:
            raise self._fail(ImportStateError("An import is already in progress"))
        if not self.set_id or self.content is None:
            raise self._fail(ImportStateError("Please select a set and upload a CSV file"))

        missing = self.missing_headers
        if missing:
            raise self._fail(MissingColumnsError(missing))
        if not self.report.rows:
            raise self._fail(ImportFileError("No valid data found in CSV file"))

        set_id = self.set_id
        rows = self.report.rows
        self.state = ImportState.IMPORTING
        self.status = None
        logger.info("Importing %d rows from %s into set %s", len(rows), self.filename, set_id)

        async def insert_chunk(chunk: list[dict]) -> None:
            await client.insert(CardDB, chunk)

        try:
            mapping = convert_rows(rows, set_id)
            self.rejected = mapping.rejected
            result = await submit_in_batches(mapping.records, insert_chunk, self.batch_size)
        except Exception:
            logger.exception("Error importing cards from %s", self.filename)
            self.result = BatchResult(failed=len(rows))
            self.state = ImportState.FAILED
            self.status = ImportStatus("error", GENERIC_FAILURE_MESSAGE)
            self._clear_form()
            return self.result

        self.result = self._finish(result)
        self._clear_form()
        return self.result

    def _finish(self, result: BatchResult) -> BatchResult:
        # Rows the mapper rejected count as failed cards in the summary
        summary = BatchResult(
            imported=result.imported,
            failed=result.failed + len(self.rejected),
            batches=result.batches,
            failed_batches=result.failed_batches,
        )
        message = summary.message()
        if self.report.skipped:
            message += f" {self.report.skipped} rows were skipped (column count mismatch)."

        if summary.outcome == "success":
            self.state = ImportState.COMPLETED
            self.status = ImportStatus("success", message)
        elif summary.outcome == "partial":
            self.state = ImportState.PARTIALLY_FAILED
            self.status = ImportStatus("warning", message)
        else:
            self.state = ImportState.FAILED
            self.status = ImportStatus("error", message)

        logger.info(
            "Import of %s finished: %d imported, %d failed, %d rejected, %d skipped",
            self.filename,
            result.imported,
            result.failed,
            len(self.rejected),
            self.report.skipped,
        )
        return summary

    def _clear_form(self) -> None:
        self.content = None
        self.preview = []
        self.set_id = None
