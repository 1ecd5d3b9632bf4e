"""Items: the products and services an account sells.

An item may belong to a group and be stocked in an inventory. Its
identifiers and price are separate resources that point back at the item;
they are read-only on the item and resolved when it is loaded.
"""

from typing import Annotated, Any
from uuid import UUID

from loguru import logger
from pydantic import BaseModel

from src.core.validation import MaxLength, OneOf, Required, ensure_valid
from src.domain.constants import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from src.domain.pagination import ListParams, Page
from src.domain.resources import (
    Expandable,
    Group,
    Inventory,
    Item,
    ItemIdentifiers,
    ItemType,
    Price,
)
from src.domain.service import ResourceService, expand_param, provided

ITEM_EXPANDABLE_FIELDS = ("group", "identifiers", "inventory", "price")
ITEM_TYPES = tuple(item_type.value for item_type in ItemType)

ItemExpand = expand_param(ITEM_EXPANDABLE_FIELDS)


class CreateItemParams(BaseModel):
    active: bool | None = None
    description: Annotated[str | None, MaxLength(DESCRIPTION_MAX_LENGTH)] = None
    expand: ItemExpand = None
    group: UUID | None = None
    inventory: UUID | None = None
    name: Annotated[str | None, Required(), MaxLength(NAME_MAX_LENGTH)] = None
    type: Annotated[str | None, Required(), OneOf(*ITEM_TYPES)] = None
    variant: bool | None = None


class UpdateItemParams(BaseModel):
    active: bool | None = None
    description: Annotated[str | None, MaxLength(DESCRIPTION_MAX_LENGTH)] = None
    expand: ItemExpand = None
    group: UUID | None = None
    inventory: UUID | None = None
    name: Annotated[str | None, MaxLength(NAME_MAX_LENGTH)] = None
    type: Annotated[str | None, OneOf(*ITEM_TYPES)] = None
    variant: bool | None = None


class RetrieveItemParams(BaseModel):
    expand: ItemExpand = None


class ListItemsParams(ListParams):
    active: bool | None = None
    description: str | None = None
    expand: ItemExpand = None
    group: UUID | None = None
    inventory: UUID | None = None
    name: str | None = None
    type: Annotated[str | None, OneOf(*ITEM_TYPES)] = None
    variant: bool | None = None


class ItemsService(ResourceService[Item]):
    resource_name = "item"
    expandable_fields = ITEM_EXPANDABLE_FIELDS
    reference_fields = ("group", "inventory")

    def to_resource(self, row: Any) -> Item:
        return Item(
            id=row.id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            active=row.active,
            description=row.description,
            group=Expandable[Group](id=row.group_id),
            identifiers=Expandable[ItemIdentifiers](id=row.identifiers_id),
            inventory=Expandable[Inventory](id=row.inventory_id),
            name=row.name,
            price=Expandable[Price](id=row.price_id),
            type=ItemType(row.type),
            variant=row.variant,
        )

    def map_create(self, tenant_id: UUID, params: BaseModel) -> dict[str, object]:
        return {
            "account_id": tenant_id,
            "active": True if params.active is None else params.active,
            "description": params.description,
            "group_id": params.group,
            "inventory_id": params.inventory,
            "name": params.name,
            "type": params.type,
            "variant": False if params.variant is None else params.variant,
        }

    def map_update(self, params: BaseModel) -> dict[str, object]:
        values = provided(params, "active", "description", "name", "type", "variant")
        values.update(_foreign_keys(params))
        return values

    def map_filters(self, params: ListParams) -> dict[str, object]:
        filters = provided(params, "active", "description", "name", "type", "variant")
        filters.update(_foreign_keys(params))
        return filters

    async def list_for_inventory(
        self, inventory_id: UUID, tenant_id: UUID, params: ListItemsParams
    ) -> Page[Item]:
        """List the items stocked in one inventory.

        Raises:
            ValidationError: If the list parameters are invalid.
            NotFoundError: If the inventory does not resolve for the tenant.
        """
        ensure_valid(params)
        await self.relations["inventory"].get(inventory_id, tenant_id)
        logger.debug("Listing items of inventory {}", inventory_id)
        return await self.list(
            tenant_id, params.model_copy(update={"inventory": inventory_id})
        )


def _foreign_keys(params: BaseModel) -> dict[str, object]:
    return {
        column: value
        for column, value in (
            ("group_id", params.group),
            ("inventory_id", params.inventory),
        )
        if value is not None
    }
