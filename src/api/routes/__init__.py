"""Resource routers, collected under one router mounted at the API prefix."""

from fastapi import APIRouter

from src.api.routes.groups import router as groups_router
from src.api.routes.inventories import router as inventories_router
from src.api.routes.item_identifiers import router as item_identifiers_router
from src.api.routes.items import router as items_router
from src.api.routes.prices import router as prices_router

api_router = APIRouter()

api_router.include_router(groups_router, prefix="/groups", tags=["groups"])
api_router.include_router(inventories_router, prefix="/inventories", tags=["inventories"])
api_router.include_router(
    item_identifiers_router, prefix="/item_identifiers", tags=["item identifiers"]
)
api_router.include_router(items_router, prefix="/items", tags=["items"])
api_router.include_router(prices_router, prefix="/prices", tags=["prices"])
