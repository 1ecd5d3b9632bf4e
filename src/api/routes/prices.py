"""Price endpoints."""

from operator import attrgetter

from src.api.routes.resource import ResourceEndpoints, build_resource_router
from src.domain.prices import (
    CreatePriceParams,
    ListPricesParams,
    RetrievePriceParams,
    UpdatePriceParams,
)

router = build_resource_router(
    ResourceEndpoints(
        resource="price",
        service=attrgetter("prices"),
        create_params=CreatePriceParams,
        update_params=UpdatePriceParams,
        retrieve_params=RetrievePriceParams,
        list_params=ListPricesParams,
    )
)
