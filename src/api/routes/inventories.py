"""Inventory endpoints, including the items stocked in an inventory."""

from operator import attrgetter

from fastapi import Request, Response

from src.api.dependencies import TenantId
from src.api.routes.resource import ResourceEndpoints, build_resource_router
from src.api.schemas.resources import ListResponse
from src.api.utils.decoding import decode_params, parse_resource_id
from src.api.utils.responses import ORJSONResponse
from src.domain.inventories import (
    CreateInventoryParams,
    ListInventoriesParams,
    RetrieveInventoryParams,
    UpdateInventoryParams,
)
from src.domain.items import ListItemsParams
from src.infrastructure.database.dependencies import ResourceServices

router = build_resource_router(
    ResourceEndpoints(
        resource="inventory",
        service=attrgetter("inventories"),
        create_params=CreateInventoryParams,
        update_params=UpdateInventoryParams,
        retrieve_params=RetrieveInventoryParams,
        list_params=ListInventoriesParams,
    )
)


@router.get("/{resource_id}/items")
async def list_inventory_items(
    resource_id: str, request: Request, tenant_id: TenantId, services: ResourceServices
) -> Response:
    """List the items stocked in one inventory.

    Accepts every item list parameter; ``inventory`` is always the path id.
    """
    inventory_id = parse_resource_id(resource_id, "inventory")
    params = await decode_params(request, ListItemsParams)
    page = await services.items.list_for_inventory(inventory_id, tenant_id, params)
    return ORJSONResponse(
        content=ListResponse.from_page(page, request.url.path).model_dump(mode="json")
    )
