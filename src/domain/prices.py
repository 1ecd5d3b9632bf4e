"""Prices: the amount and currency an item sells for."""

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel

from src.core.validation import Gte, OneOf, Required
from src.domain.pagination import ListParams
from src.domain.resources import Currency, Expandable, Item, Price
from src.domain.service import ResourceService, expand_param, provided

PRICE_EXPANDABLE_FIELDS = ("item",)

PriceExpand = expand_param(PRICE_EXPANDABLE_FIELDS)

CURRENCY_CODES = tuple(currency.value for currency in Currency)


class CreatePriceParams(BaseModel):
    amount: Annotated[int | None, Required(), Gte(0)] = None
    currency: Annotated[str | None, Required(), OneOf(*CURRENCY_CODES)] = None
    expand: PriceExpand = None
    item: Annotated[UUID | None, Required()] = None


class UpdatePriceParams(BaseModel):
    amount: Annotated[int | None, Gte(0)] = None
    currency: Annotated[str | None, OneOf(*CURRENCY_CODES)] = None
    expand: PriceExpand = None


class RetrievePriceParams(BaseModel):
    expand: PriceExpand = None


class ListPricesParams(ListParams):
    expand: PriceExpand = None


class PricesService(ResourceService[Price]):
    resource_name = "price"
    expandable_fields = PRICE_EXPANDABLE_FIELDS
    reference_fields = ("item",)

    def to_resource(self, row: Any) -> Price:
        return Price(
            id=row.id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            amount=row.amount,
            currency=Currency(row.currency),
            item=Expandable[Item](id=row.item_id),
        )

    def map_create(self, tenant_id: UUID, params: BaseModel) -> dict[str, object]:
        return {
            "account_id": tenant_id,
            "amount": params.amount,
            "currency": params.currency,
            "item_id": params.item,
        }

    def map_update(self, params: BaseModel) -> dict[str, object]:
        return provided(params, "amount", "currency")
