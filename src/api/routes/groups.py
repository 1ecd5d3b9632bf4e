"""Group endpoints."""

from operator import attrgetter

from src.api.routes.resource import ResourceEndpoints, build_resource_router
from src.domain.groups import (
    CreateGroupParams,
    ListGroupsParams,
    RetrieveGroupParams,
    UpdateGroupParams,
)

router = build_resource_router(
    ResourceEndpoints(
        resource="group",
        service=attrgetter("groups"),
        create_params=CreateGroupParams,
        update_params=UpdateGroupParams,
        retrieve_params=RetrieveGroupParams,
        list_params=ListGroupsParams,
    )
)
