"""Unit tests for src/domain/resources.py serialization."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.domain.resources import (
    Currency,
    Expandable,
    Group,
    Inventory,
    Item,
    ItemType,
    Price,
)

CREATED = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.mark.unit
class TestExpandable:
    """Test the collapsed/expanded wire forms of references."""

    def test_collapsed_reference_is_bare_id(self) -> None:
        """Verify an unexpanded reference serializes as its id."""
        parent_id = uuid4()
        group = Group(name="Child", parent_group=Expandable[Group](id=parent_id))

        data = group.model_dump(mode="json")

        assert data["parent_group"] == str(parent_id)
        assert not group.parent_group.expanded

    def test_null_reference_is_null(self) -> None:
        """Verify a reference without an id serializes as null."""
        assert Group(name="Root").model_dump(mode="json")["parent_group"] is None

    def test_expanded_reference_is_nested_object(self) -> None:
        """Verify an expanded reference serializes as the full resource."""
        parent = Group(id=uuid4(), created_at=CREATED, updated_at=CREATED, name="Root")
        child = Group(
            name="Child",
            parent_group=Expandable[Group](id=parent.id, resource=parent),
        )

        data = child.model_dump(mode="json")

        assert data["parent_group"] == {
            "id": str(parent.id),
            "created_at": "2024-05-01T12:00:00Z",
            "updated_at": "2024-05-01T12:00:00Z",
            "description": None,
            "name": "Root",
            "parent_group": None,
        }
        assert child.parent_group.expanded


@pytest.mark.unit
class TestResource:
    """Test base field handling."""

    def test_unset_base_fields_are_omitted(self) -> None:
        """Verify resources loaded for existence checks drop id and timestamps."""
        data = Inventory(in_stock=3).model_dump(mode="json")

        assert data == {"in_stock": 3, "orderable": None}

    def test_base_fields_are_rendered_when_set(self) -> None:
        """Verify id and timestamps appear when present."""
        resource_id = uuid4()
        data = Inventory(
            id=resource_id, created_at=CREATED, updated_at=CREATED, in_stock=0
        ).model_dump(mode="json")

        assert data["id"] == str(resource_id)
        assert data["created_at"] == "2024-05-01T12:00:00Z"

    def test_item_enums_render_as_values(self) -> None:
        """Verify enum fields render as their string values."""
        item = Item(name="Hammer", type=ItemType.PRODUCT)
        price = Price(amount=1299, currency=Currency.EUR)

        assert item.model_dump(mode="json")["type"] == "PRODUCT"
        assert price.model_dump(mode="json")["currency"] == "EUR"

    def test_item_references_default_to_null(self) -> None:
        """Verify every item relation starts collapsed and empty."""
        data = Item(name="Hammer", type=ItemType.SERVICE).model_dump(mode="json")

        for field in ("group", "identifiers", "inventory", "price"):
            assert data[field] is None
        assert data["active"] is True
        assert data["variant"] is False
