"""Unit tests for src/domain/registry.py."""

import pytest
from pydantic import BaseModel

from src.core.validation import validate
from src.domain.groups import RetrieveGroupParams
from src.domain.inventories import RetrieveInventoryParams
from src.domain.item_identifiers import RetrieveItemIdentifiersParams
from src.domain.items import RetrieveItemParams
from src.domain.prices import RetrievePriceParams
from src.domain.registry import Services


@pytest.mark.unit
class TestServices:
    """Test service wiring."""

    @pytest.mark.parametrize(
        ("service", "field", "target"),
        [
            ("groups", "parent_group", "groups"),
            ("items", "group", "groups"),
            ("items", "identifiers", "item_identifiers"),
            ("items", "inventory", "inventories"),
            ("items", "price", "prices"),
            ("item_identifiers", "item", "items"),
            ("prices", "item", "items"),
        ],
    )
    def test_relations(
        self, services: Services, service: str, field: str, target: str
    ) -> None:
        """Verify every expandable field resolves through the right service."""
        assert getattr(services, service).relations[field] is getattr(services, target)

    @pytest.mark.parametrize(
        "service", ["groups", "inventories", "item_identifiers", "items", "prices"]
    )
    def test_every_expandable_field_is_related(
        self, services: Services, service: str
    ) -> None:
        """Verify no expandable field is left without a source."""
        resource_service = getattr(services, service)

        assert set(resource_service.expandable_fields) == set(resource_service.relations)

    @pytest.mark.parametrize(
        ("service", "retrieve_params"),
        [
            ("groups", RetrieveGroupParams),
            ("inventories", RetrieveInventoryParams),
            ("item_identifiers", RetrieveItemIdentifiersParams),
            ("items", RetrieveItemParams),
            ("prices", RetrievePriceParams),
        ],
    )
    def test_expand_accepts_exactly_the_expandable_fields(
        self, services: Services, service: str, retrieve_params: type[BaseModel]
    ) -> None:
        """Verify expand validation accepts the service's fields and nothing else."""
        fields = list(getattr(services, service).expandable_fields)

        accepted = validate(retrieve_params(expand=fields))
        rejected = validate(retrieve_params(expand=[*fields, "owner"]))

        assert accepted is None
        assert rejected is not None
        assert [error.param for error in rejected.errors] == [f"expand[{len(fields)}]"]
