"""
SQLAlchemy ORM models for persistent storage.

Sets and cards are stored in two independent tables. A card points at its
set through ``set_id`` but there is no foreign key: deleting a set leaves
its cards untouched.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CardSetDB(Base):
    """A card set (expansion) in the catalog."""

    __tablename__ = "sets"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    set_name: Mapped[str] = mapped_column(String(100), index=True)
    series: Mapped[str] = mapped_column(String(50))
    card_amount: Mapped[int] = mapped_column(Integer)
    release_date: Mapped[str] = mapped_column(String(32))
    logo_url: Mapped[str] = mapped_column(Text, default="")
    background_url: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<CardSetDB(id={self.id}, set_name={self.set_name})>"


class CardDB(Base):
    """
    A single card belonging to a set.

    Optional columns are nullable: the CSV importer omits them when the
    source cell is blank, so they stay NULL rather than an empty string.
    """

    __tablename__ = "cards"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    set_id: Mapped[str] = mapped_column(String(36), index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    slug: Mapped[str] = mapped_column(String(255), index=True)
    number: Mapped[str] = mapped_column(String(32), default="")
    rarity: Mapped[str] = mapped_column(String(50), default="")
    image: Mapped[str] = mapped_column(Text, default="")

    hp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    usd_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    euro_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    tcg_player: Mapped[str | None] = mapped_column(Text, nullable=True)
    card_market: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Variant metadata
    variant_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    variant_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_base_card: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    base_card_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<CardDB(name={self.name}, number={self.number})>"
