"""CRUD router shared by every resource type.

Each resource exposes the same five endpoints; only the parameter models and
the service differ. Parameters are decoded from the JSON body for every
method (an empty body is ``{}``) so that constraint violations are reported
by the service, all at once, in the ``{"errors": [...]}`` shape.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

from src.api.dependencies import TenantId
from src.api.schemas.resources import ListResponse
from src.api.utils.decoding import decode_params, parse_resource_id
from src.api.utils.responses import ORJSONResponse
from src.domain.pagination import ListParams
from src.domain.registry import Services
from src.domain.service import ResourceService
from src.infrastructure.database.dependencies import ResourceServices


@dataclass(frozen=True)
class ResourceEndpoints:
    """Parameter models and service of one resource type.

    Args:
        resource: Resource type name used in invalid id messages.
        service: Selects the resource's service from the request's services.
        create_params: Body model of ``POST``.
        update_params: Body model of ``PUT``.
        retrieve_params: Body model of ``GET /{id}``.
        list_params: Body model of ``GET``.
    """

    resource: str
    service: Callable[[Services], ResourceService[Any]]
    create_params: type[BaseModel]
    update_params: type[BaseModel]
    retrieve_params: type[BaseModel]
    list_params: type[ListParams]


def resource_response(resource: BaseModel, status_code: int = status.HTTP_200_OK) -> Response:
    return ORJSONResponse(status_code=status_code, content=resource.model_dump(mode="json"))


def build_resource_router(endpoints: ResourceEndpoints) -> APIRouter:
    """Create the ``POST``/``GET``/``PUT``/``DELETE`` routes of a resource.

    Args:
        endpoints: What the routes decode and which service they call.

    Returns:
        APIRouter: Router to include under the resource's collection path.
    """
    router = APIRouter()

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_resource(
        request: Request, tenant_id: TenantId, services: ResourceServices
    ) -> Response:
        params = await decode_params(request, endpoints.create_params)
        resource = await endpoints.service(services).create(tenant_id, params)
        return resource_response(resource, status.HTTP_201_CREATED)

    @router.get("")
    async def list_resources(
        request: Request, tenant_id: TenantId, services: ResourceServices
    ) -> Response:
        params = await decode_params(request, endpoints.list_params)
        page = await endpoints.service(services).list(tenant_id, params)
        return ORJSONResponse(
            content=ListResponse.from_page(page, request.url.path).model_dump(mode="json")
        )

    @router.get("/{resource_id}")
    async def retrieve_resource(
        resource_id: str, request: Request, tenant_id: TenantId, services: ResourceServices
    ) -> Response:
        parsed_id = parse_resource_id(resource_id, endpoints.resource)
        params = await decode_params(request, endpoints.retrieve_params)
        resource = await endpoints.service(services).get(parsed_id, tenant_id, params)
        return resource_response(resource)

    @router.put("/{resource_id}")
    async def update_resource(
        resource_id: str, request: Request, tenant_id: TenantId, services: ResourceServices
    ) -> Response:
        parsed_id = parse_resource_id(resource_id, endpoints.resource)
        params = await decode_params(request, endpoints.update_params)
        resource = await endpoints.service(services).update(parsed_id, tenant_id, params)
        return resource_response(resource)

    @router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_resource(
        resource_id: str, tenant_id: TenantId, services: ResourceServices
    ) -> Response:
        parsed_id = parse_resource_id(resource_id, endpoints.resource)
        await endpoints.service(services).delete(parsed_id, tenant_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
