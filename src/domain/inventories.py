"""Inventories: stock levels that items are kept in."""

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel

from src.core.validation import Gte, Required
from src.domain.pagination import ListParams
from src.domain.resources import Inventory
from src.domain.service import ResourceService, expand_param, provided

# Inventories have no relations; any requested expansion is invalid.
INVENTORY_EXPANDABLE_FIELDS: tuple[str, ...] = ()

InventoryExpand = expand_param(INVENTORY_EXPANDABLE_FIELDS)


class CreateInventoryParams(BaseModel):
    expand: InventoryExpand = None
    in_stock: Annotated[int | None, Required(), Gte(0)] = None
    orderable: Annotated[int | None, Gte(0)] = None


class UpdateInventoryParams(BaseModel):
    expand: InventoryExpand = None
    in_stock: Annotated[int | None, Gte(0)] = None
    orderable: Annotated[int | None, Gte(0)] = None


class RetrieveInventoryParams(BaseModel):
    expand: InventoryExpand = None


class ListInventoriesParams(ListParams):
    expand: InventoryExpand = None


class InventoriesService(ResourceService[Inventory]):
    resource_name = "inventory"
    expandable_fields = INVENTORY_EXPANDABLE_FIELDS

    def to_resource(self, row: Any) -> Inventory:
        return Inventory(
            id=row.id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            in_stock=row.in_stock,
            orderable=row.orderable,
        )

    def map_create(self, tenant_id: UUID, params: BaseModel) -> dict[str, object]:
        return {
            "account_id": tenant_id,
            "in_stock": params.in_stock,
            "orderable": params.orderable,
        }

    def map_update(self, params: BaseModel) -> dict[str, object]:
        return provided(params, "in_stock", "orderable")
