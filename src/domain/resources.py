"""Client-facing resource models and expandable references.

Every resource carries the base identity fields ``id``, ``created_at`` and
``updated_at``. They are left unset when a resource is loaded only to check
that it exists, and unset base fields are omitted from the serialized form.

Relations between resources are held in ``Expandable`` references. A
collapsed reference serializes as the bare related id; once expanded it
serializes as the full nested resource.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer

BASE_FIELDS = ("id", "created_at", "updated_at")


class ItemType(Enum):
    """Kinds of item an account can sell."""

    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"


class Currency(Enum):
    """ISO 4217 currency codes accepted for prices."""

    AUD = "AUD"
    BRL = "BRL"
    CAD = "CAD"
    CHF = "CHF"
    CNY = "CNY"
    CZK = "CZK"
    DKK = "DKK"
    EUR = "EUR"
    GBP = "GBP"
    HKD = "HKD"
    HUF = "HUF"
    INR = "INR"
    JPY = "JPY"
    KRW = "KRW"
    MXN = "MXN"
    NOK = "NOK"
    NZD = "NZD"
    PLN = "PLN"
    RON = "RON"
    RSD = "RSD"
    SEK = "SEK"
    SGD = "SGD"
    TRY = "TRY"
    USD = "USD"
    ZAR = "ZAR"


class Resource(BaseModel):
    """Base model for every tenant-owned resource."""

    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_serializer(mode="wrap")
    def _omit_unset_base(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        for field in BASE_FIELDS:
            if data.get(field) is None:
                data.pop(field, None)
        return data


ResourceT = TypeVar("ResourceT", bound=Resource)


class Expandable(BaseModel, Generic[ResourceT]):
    """A foreign id plus, once expanded, the related resource.

    ``resource`` is only ever set by a successful expansion of a non-null
    ``id`` and holds a copy owned by the containing resource.
    """

    id: UUID | None = None
    resource: ResourceT | None = None

    @property
    def expanded(self) -> bool:
        return self.resource is not None

    @model_serializer(mode="wrap")
    def _collapse(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if self.resource is not None:
            return data["resource"]
        return data["id"]


class Group(Resource):
    description: str | None = None
    name: str
    parent_group: Expandable[Group] = Field(default_factory=lambda: Expandable[Group]())


class Inventory(Resource):
    in_stock: int
    orderable: int | None = None


class ItemIdentifiers(Resource):
    ean: str | None = None
    gtin: str | None = None
    isbn: str | None = None
    jan: str | None = None
    mpn: str | None = None
    nsn: str | None = None
    upc: str | None = None
    qr: str | None = None
    sku: str | None = None
    item: Expandable[Item] = Field(default_factory=lambda: Expandable[Item]())


class Price(Resource):
    amount: int
    currency: Currency
    item: Expandable[Item] = Field(default_factory=lambda: Expandable[Item]())


class Item(Resource):
    active: bool = True
    description: str | None = None
    group: Expandable[Group] = Field(default_factory=lambda: Expandable[Group]())
    identifiers: Expandable[ItemIdentifiers] = Field(
        default_factory=lambda: Expandable[ItemIdentifiers]()
    )
    inventory: Expandable[Inventory] = Field(
        default_factory=lambda: Expandable[Inventory]()
    )
    name: str
    price: Expandable[Price] = Field(default_factory=lambda: Expandable[Price]())
    type: ItemType
    variant: bool = False


Group.model_rebuild()
ItemIdentifiers.model_rebuild()
Price.model_rebuild()
Item.model_rebuild()
