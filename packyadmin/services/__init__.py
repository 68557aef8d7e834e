from packyadmin.services.batch_submitter import BatchResult, chunk_records, submit_in_batches
from packyadmin.services.import_session import (
    CsvImportError,
    ImportFileError,
    ImportSession,
    ImportState,
    ImportStateError,
    MissingColumnsError,
)

__all__ = [
    "BatchResult",
    "CsvImportError",
    "ImportFileError",
    "ImportSession",
    "ImportState",
    "ImportStateError",
    "MissingColumnsError",
    "chunk_records",
    "submit_in_batches",
]
