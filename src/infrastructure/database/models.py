"""Declarative table models.

Every resource table carries ``account_id`` through ``TenantModel``. An
item's identifiers and price live in their own tables pointing back at the
item; ``Item.identifiers_id`` and ``Item.price_id`` are read-only column
properties resolved with a correlated subquery.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Uuid,
    select,
)
from sqlalchemy.orm import Mapped, column_property, mapped_column

from src.infrastructure.constants import (
    API_KEY_HASH_LENGTH,
    DESCRIPTION_LENGTH,
    NAME_LENGTH,
)
from src.infrastructure.database.base import BaseModel, TenantModel


class Account(BaseModel):
    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)


class ApiKey(BaseModel):
    """A hashed API key granting access to one account."""

    __tablename__ = "api_keys"

    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key_hash: Mapped[str] = mapped_column(
        String(API_KEY_HASH_LENGTH),
        nullable=False,
        unique=True,
        doc="SHA-256 hex digest of the key; the key itself is never stored",
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Group(TenantModel):
    __tablename__ = "groups"

    description: Mapped[str | None] = mapped_column(String(DESCRIPTION_LENGTH))
    name: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    parent_group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("groups.id", ondelete="SET NULL"), index=True
    )


class Inventory(TenantModel):
    __tablename__ = "inventories"

    in_stock: Mapped[int] = mapped_column(Integer, nullable=False)
    orderable: Mapped[int | None] = mapped_column(Integer)


class Item(TenantModel):
    __tablename__ = "items"

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[str | None] = mapped_column(String(DESCRIPTION_LENGTH))
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("groups.id", ondelete="SET NULL"), index=True
    )
    inventory_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("inventories.id", ondelete="SET NULL"), index=True
    )
    name: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    variant: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class ItemIdentifiers(TenantModel):
    __tablename__ = "item_identifiers"

    ean: Mapped[str | None] = mapped_column(String(14))
    gtin: Mapped[str | None] = mapped_column(String(14))
    isbn: Mapped[str | None] = mapped_column(String(13))
    jan: Mapped[str | None] = mapped_column(String(13))
    mpn: Mapped[str | None] = mapped_column(String(70))
    nsn: Mapped[str | None] = mapped_column(String(13))
    upc: Mapped[str | None] = mapped_column(String(12))
    qr: Mapped[str | None] = mapped_column(String(2048))
    sku: Mapped[str | None] = mapped_column(String(64))
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )


class Price(TenantModel):
    __tablename__ = "prices"

    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )


Item.identifiers_id = column_property(
    select(ItemIdentifiers.id)
    .where(ItemIdentifiers.item_id == Item.id)
    .correlate_except(ItemIdentifiers)
    .scalar_subquery()
)
Item.price_id = column_property(
    select(Price.id)
    .where(Price.item_id == Item.id)
    .correlate_except(Price)
    .scalar_subquery()
)
