"""Item identifier endpoints."""

from operator import attrgetter

from src.api.routes.resource import ResourceEndpoints, build_resource_router
from src.domain.item_identifiers import (
    CreateItemIdentifiersParams,
    ListItemIdentifiersParams,
    RetrieveItemIdentifiersParams,
    UpdateItemIdentifiersParams,
)

router = build_resource_router(
    ResourceEndpoints(
        resource="item identifier",
        service=attrgetter("item_identifiers"),
        create_params=CreateItemIdentifiersParams,
        update_params=UpdateItemIdentifiersParams,
        retrieve_params=RetrieveItemIdentifiersParams,
        list_params=ListItemIdentifiersParams,
    )
)
