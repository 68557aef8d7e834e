"""Tests for the CSV import job."""

from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from packyadmin.db.client import CatalogClient
from packyadmin.jobs.import_csv import import_file
from packyadmin.models.db import Base, CardDB, CardSetDB
from packyadmin.services.import_session import ImportState

CSV_TEXT = (
    "\ufeffSet Name,Card Name,Card Number,Rarity,Image URL\n"
    "Base,Pikachu,58/102,Common,https://img.example/58.png\n"
    'Base,"Farfetch\'d, Promo",27/102,Uncommon,https://img.example/27.png\n'
)


@pytest.fixture
async def catalog():
    """Catalog client on an in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield CatalogClient(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
    await engine.dispose()


@pytest.fixture
async def set_id(catalog: CatalogClient) -> str:
    created = await catalog.insert(
        CardSetDB,
        [{"set_name": "Base", "series": "Original", "card_amount": 102, "release_date": "1999"}],
    )
    return created[0].id


class TestImportFile:
    async def test_imports_file(self, tmp_path: Path, catalog: CatalogClient, set_id: str):
        path = tmp_path / "base.csv"
        path.write_text(CSV_TEXT, encoding="utf-8")

        session = await import_file(path, set_id, catalog, batch_size=1)

        assert session.state is ImportState.COMPLETED
        assert session.result is not None
        assert session.result.batches == 2
        names = {card.name for card in await catalog.select(CardDB)}
        assert names == {"Pikachu", "Farfetch'd, Promo"}

    async def test_unknown_set(self, tmp_path: Path, catalog: CatalogClient):
        path = tmp_path / "base.csv"
        path.write_text(CSV_TEXT, encoding="utf-8")

        session = await import_file(path, "missing", catalog)

        assert session.state is ImportState.IDLE
        assert await catalog.count(CardDB) == 0

    async def test_wrong_extension(self, tmp_path: Path, catalog: CatalogClient, set_id: str):
        path = tmp_path / "base.txt"
        path.write_text(CSV_TEXT, encoding="utf-8")

        session = await import_file(path, set_id, catalog)

        assert session.state is ImportState.IDLE
        assert session.status is not None
        assert session.status.message == "Please select a CSV file"

    async def test_undecodable_file(self, tmp_path: Path, catalog: CatalogClient, set_id: str):
        path = tmp_path / "base.csv"
        path.write_bytes(b"Set Name,Card Name\n\xff\xfe\xfa bad")

        session = await import_file(path, set_id, catalog)

        assert session.state is ImportState.IDLE
        assert await catalog.count(CardDB) == 0
