"""Tests for card API endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from packyadmin.db import get_client
from packyadmin.db.client import CatalogClient
from packyadmin.main import app
from packyadmin.models.db import Base


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def catalog(async_engine) -> CatalogClient:
    """Catalog client bound to the test engine."""
    factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    return CatalogClient(factory)


@pytest.fixture
async def client(catalog: CatalogClient):
    """Provide an async test client with the catalog client overridden."""
    app.dependency_overrides[get_client] = lambda: catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _create_set(client: AsyncClient, name: str = "Base Set") -> str:
    response = await client.post(
        "/sets",
        json={
            "set_name": name,
            "card_amount": 102,
            "release_date": "1999-01-09",
            "series": "Original",
        },
    )
    return response.json()["id"]


async def _create_card(client: AsyncClient, set_id: str, name: str, **fields) -> dict:
    response = await client.post("/cards", json={"set_id": set_id, "name": name, **fields})
    assert response.status_code == 201
    return response.json()


class TestCreateCard:
    async def test_create(self, client: AsyncClient) -> None:
        set_id = await _create_set(client)

        data = await _create_card(
            client, set_id, "Pikachu V", number="SWSH061", rarity="Promo", usd_price=2.5
        )

        assert data["slug"] == "pikachu-v"
        assert data["usd_price"] == 2.5
        assert data["hp"] is None
        assert data["set_name"] == "Base Set"
        assert data["series"] == "Original"

    async def test_explicit_slug_kept(self, client: AsyncClient) -> None:
        set_id = await _create_set(client)

        data = await _create_card(client, set_id, "Pikachu", slug="pikachu-promo")

        assert data["slug"] == "pikachu-promo"

    async def test_unknown_set(self, client: AsyncClient) -> None:
        response = await client.post("/cards", json={"set_id": "missing", "name": "Mew"})

        assert response.status_code == 404


class TestListCards:
    async def test_filter_by_set(self, client: AsyncClient) -> None:
        base = await _create_set(client, "Base Set")
        jungle = await _create_set(client, "Jungle")
        await _create_card(client, base, "Pikachu")
        await _create_card(client, jungle, "Snorlax")

        response = await client.get("/cards", params={"set_id": jungle})

        data = response.json()
        assert [c["name"] for c in data] == ["Snorlax"]
        assert data[0]["set_name"] == "Jungle"

    async def test_search(self, client: AsyncClient) -> None:
        set_id = await _create_set(client)
        await _create_card(client, set_id, "Pikachu", rarity="Common")
        await _create_card(client, set_id, "Charizard", rarity="Rare Holo")
        await _create_card(client, set_id, "Machamp", rarity="Holo Rare")

        response = await client.get(
            "/cards", params={"search": "HOLO", "sort": "name", "direction": "asc"}
        )

        assert [c["name"] for c in response.json()] == ["Charizard", "Machamp"]

    async def test_sort_by_price(self, client: AsyncClient) -> None:
        set_id = await _create_set(client)
        await _create_card(client, set_id, "Cheap", usd_price=1.0)
        await _create_card(client, set_id, "Pricey", usd_price=300.0)
        await _create_card(client, set_id, "Middle", usd_price=20.0)

        response = await client.get("/cards", params={"sort": "usd_price", "direction": "desc"})

        assert [c["name"] for c in response.json()] == ["Pricey", "Middle", "Cheap"]

    async def test_invalid_sort_field(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"sort": "image"})

        assert response.status_code == 422


class TestGetAndDeleteCard:
    async def test_get(self, client: AsyncClient) -> None:
        set_id = await _create_set(client)
        card = await _create_card(client, set_id, "Pikachu")

        response = await client.get(f"/cards/{card['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Pikachu"

    async def test_get_missing(self, client: AsyncClient) -> None:
        response = await client.get("/cards/missing")

        assert response.status_code == 404

    async def test_delete(self, client: AsyncClient) -> None:
        set_id = await _create_set(client)
        card = await _create_card(client, set_id, "Pikachu")

        response = await client.delete(f"/cards/{card['id']}")

        assert response.json()["deleted"] is True
        assert (await client.get(f"/cards/{card['id']}")).status_code == 404
