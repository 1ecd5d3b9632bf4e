"""Wiring of the resource services and the relations between them."""

from dataclasses import dataclass

from src.domain.groups import GroupsService
from src.domain.inventories import InventoriesService
from src.domain.item_identifiers import ItemIdentifiersService
from src.domain.items import ItemsService
from src.domain.prices import PricesService
from src.domain.service import Repository


@dataclass(frozen=True)
class Services:
    """One service per resource type, related to each other for expansion."""

    groups: GroupsService
    inventories: InventoriesService
    item_identifiers: ItemIdentifiersService
    items: ItemsService
    prices: PricesService

    @classmethod
    def build(
        cls,
        *,
        groups: Repository,
        inventories: Repository,
        item_identifiers: Repository,
        items: Repository,
        prices: Repository,
    ) -> "Services":
        """Create every service over its repository and attach relations.

        Args:
            groups: Storage for groups.
            inventories: Storage for inventories.
            item_identifiers: Storage for item identifiers.
            items: Storage for items.
            prices: Storage for prices.

        Returns:
            Services: The related services.
        """
        services = cls(
            groups=GroupsService(groups),
            inventories=InventoriesService(inventories),
            item_identifiers=ItemIdentifiersService(item_identifiers),
            items=ItemsService(items),
            prices=PricesService(prices),
        )

        services.groups.relate("parent_group", services.groups)
        services.items.relate("group", services.groups)
        services.items.relate("identifiers", services.item_identifiers)
        services.items.relate("inventory", services.inventories)
        services.items.relate("price", services.prices)
        services.item_identifiers.relate("item", services.items)
        services.prices.relate("item", services.items)
        return services
