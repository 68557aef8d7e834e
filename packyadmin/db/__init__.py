from packyadmin.db.client import CatalogClient, CatalogClientError
from packyadmin.db.database import get_client, init_db

__all__ = [
    "CatalogClient",
    "CatalogClientError",
    "get_client",
    "init_db",
]
