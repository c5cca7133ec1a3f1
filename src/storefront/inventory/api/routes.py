"""FastAPI endpoint for the admin inventory view."""

from fastapi import APIRouter, Query

from storefront.inventory.api.schemas import InventoryFilter, InventoryRowResponse
from storefront.inventory.stock_report import inventory_report
from storefront.web.envelope import Envelope
from storefront.web.security import AdminUser

inventory_router = APIRouter(prefix="/admin/inventory", tags=["admin"])


@inventory_router.get("", response_model=Envelope[list[InventoryRowResponse]])
async def admin_inventory(admin: AdminUser, level: InventoryFilter | None = Query(default=None, alias="filter")):
    rows = inventory_report(level)
    return Envelope(data=[InventoryRowResponse(**row.to_dict()) for row in rows])
