from packyadmin.models.db import Base, CardDB, CardSetDB

__all__ = [
    "Base",
    "CardDB",
    "CardSetDB",
]
