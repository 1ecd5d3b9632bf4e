"""Item endpoints."""

from operator import attrgetter

from src.api.routes.resource import ResourceEndpoints, build_resource_router
from src.domain.items import (
    CreateItemParams,
    ListItemsParams,
    RetrieveItemParams,
    UpdateItemParams,
)

router = build_resource_router(
    ResourceEndpoints(
        resource="item",
        service=attrgetter("items"),
        create_params=CreateItemParams,
        update_params=UpdateItemParams,
        retrieve_params=RetrieveItemParams,
        list_params=ListItemsParams,
    )
)
