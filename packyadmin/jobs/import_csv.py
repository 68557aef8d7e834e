"""
Import a card CSV file from the command line.

Runs the same preview/validate/batch pipeline as the import endpoint:

    python -m packyadmin.jobs.import_csv --file base-set.csv --set-id <uuid>
"""

import argparse
import asyncio
import logging
from pathlib import Path

from packyadmin.config import settings
from packyadmin.db.client import CatalogClient
from packyadmin.db.database import catalog_client, init_db
from packyadmin.models.db import CardSetDB
from packyadmin.services.import_session import CsvImportError, ImportSession, ImportState

logger = logging.getLogger(__name__)


async def import_file(
    path: Path,
    set_id: str,
    client: CatalogClient,
    batch_size: int = settings.import_batch_size,
) -> ImportSession:
    """
    Import one CSV file into a set.

    Returns the finished session; its ``state`` and ``status`` describe the
    outcome. Files that cannot be imported at all leave the session short
    of IMPORTING with an error status.
    """
    session = ImportSession(batch_size=batch_size, preview_size=settings.preview_rows)

    card_set = await client.get(CardSetDB, set_id)
    if card_set is None:
        logger.error("Set %s not found", set_id)
        return session

    # utf-8-sig drops the byte-order mark spreadsheet exports often carry
    try:
        content = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        logger.error("Cannot read %s: %s", path, e)
        return session

    try:
        session.select_file(path.name, content)
        session.choose_set(set_id)
        for row in session.preview:
            logger.info("Preview: %s", row)
        await session.run(client)
    except CsvImportError as e:
        logger.error("Cannot import %s: %s", path, e)
        return session

    if session.status is not None:
        logger.info("%s", session.status.message)
    return session


def main() -> None:
    """CLI entry point for CSV import."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Import cards from a CSV file into a set")
    parser.add_argument("--file", type=Path, required=True, help="Path to the CSV file")
    parser.add_argument("--set-id", required=True, help="Target set id")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.import_batch_size,
        help="Cards per insert call",
    )
    args = parser.parse_args()

    if not args.file.exists():
        logger.error("File not found: %s", args.file)
        raise SystemExit(1)

    async def run() -> ImportSession:
        await init_db()
        return await import_file(args.file, args.set_id, catalog_client, args.batch_size)

    session = asyncio.run(run())
    if session.state is not ImportState.COMPLETED:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
