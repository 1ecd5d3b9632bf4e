"""Item identifiers: barcodes and catalogue numbers attached to one item."""

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel

from src.core.validation import LengthIn, MaxLength, Required
from src.domain.pagination import ListParams
from src.domain.resources import Expandable, Item, ItemIdentifiers
from src.domain.service import ResourceService, expand_param, provided

IDENTIFIER_FIELDS = ("ean", "gtin", "isbn", "jan", "mpn", "nsn", "upc", "qr", "sku")

ITEM_IDENTIFIERS_EXPANDABLE_FIELDS = ("item",)

ItemIdentifiersExpand = expand_param(ITEM_IDENTIFIERS_EXPANDABLE_FIELDS)


class _IdentifierFields(BaseModel):
    ean: Annotated[str | None, LengthIn(8, 12, 13, 14)] = None
    gtin: Annotated[str | None, LengthIn(8, 12, 13, 14)] = None
    isbn: Annotated[str | None, LengthIn(10, 13)] = None
    jan: Annotated[str | None, LengthIn(8, 13)] = None
    mpn: Annotated[str | None, MaxLength(70)] = None
    nsn: Annotated[str | None, LengthIn(13)] = None
    upc: Annotated[str | None, LengthIn(12)] = None
    qr: Annotated[str | None, MaxLength(2048)] = None
    sku: Annotated[str | None, MaxLength(64)] = None


class CreateItemIdentifiersParams(_IdentifierFields):
    expand: ItemIdentifiersExpand = None
    item: Annotated[UUID | None, Required()] = None


class UpdateItemIdentifiersParams(_IdentifierFields):
    expand: ItemIdentifiersExpand = None


class RetrieveItemIdentifiersParams(BaseModel):
    expand: ItemIdentifiersExpand = None


class ListItemIdentifiersParams(ListParams):
    expand: ItemIdentifiersExpand = None


class ItemIdentifiersService(ResourceService[ItemIdentifiers]):
    resource_name = "item identifier"
    expandable_fields = ITEM_IDENTIFIERS_EXPANDABLE_FIELDS
    reference_fields = ("item",)

    def to_resource(self, row: Any) -> ItemIdentifiers:
        return ItemIdentifiers(
            id=row.id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            item=Expandable[Item](id=row.item_id),
            **{field: getattr(row, field) for field in IDENTIFIER_FIELDS},
        )

    def map_create(self, tenant_id: UUID, params: BaseModel) -> dict[str, object]:
        values: dict[str, object] = {
            field: getattr(params, field) for field in IDENTIFIER_FIELDS
        }
        values["account_id"] = tenant_id
        values["item_id"] = params.item
        return values

    def map_update(self, params: BaseModel) -> dict[str, object]:
        return provided(params, *IDENTIFIER_FIELDS)
