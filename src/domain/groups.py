"""Groups: named, optionally nested buckets for items."""

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel

from src.core.validation import MaxLength, Required
from src.domain.constants import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from src.domain.pagination import ListParams
from src.domain.resources import Expandable, Group
from src.domain.service import ResourceService, expand_param, provided

GROUP_EXPANDABLE_FIELDS = ("parent_group",)

GroupExpand = expand_param(GROUP_EXPANDABLE_FIELDS)


class CreateGroupParams(BaseModel):
    description: Annotated[str | None, MaxLength(DESCRIPTION_MAX_LENGTH)] = None
    expand: GroupExpand = None
    name: Annotated[str | None, Required(), MaxLength(NAME_MAX_LENGTH)] = None
    parent_group: UUID | None = None


class UpdateGroupParams(BaseModel):
    description: Annotated[str | None, MaxLength(DESCRIPTION_MAX_LENGTH)] = None
    expand: GroupExpand = None
    name: Annotated[str | None, MaxLength(NAME_MAX_LENGTH)] = None
    parent_group: UUID | None = None


class RetrieveGroupParams(BaseModel):
    expand: GroupExpand = None


class ListGroupsParams(ListParams):
    description: str | None = None
    expand: GroupExpand = None
    name: str | None = None
    parent_group: UUID | None = None


class GroupsService(ResourceService[Group]):
    resource_name = "group"
    expandable_fields = GROUP_EXPANDABLE_FIELDS
    reference_fields = ("parent_group",)

    def to_resource(self, row: Any) -> Group:
        return Group(
            id=row.id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            description=row.description,
            name=row.name,
            parent_group=Expandable[Group](id=row.parent_group_id),
        )

    def map_create(self, tenant_id: UUID, params: BaseModel) -> dict[str, object]:
        return {
            "account_id": tenant_id,
            "description": params.description,
            "name": params.name,
            "parent_group_id": params.parent_group,
        }

    def map_update(self, params: BaseModel) -> dict[str, object]:
        values = provided(params, "description", "name")
        if params.parent_group is not None:
            values["parent_group_id"] = params.parent_group
        return values

    def map_filters(self, params: ListParams) -> dict[str, object]:
        filters = provided(params, "description", "name")
        if params.parent_group is not None:
            filters["parent_group_id"] = params.parent_group
        return filters
