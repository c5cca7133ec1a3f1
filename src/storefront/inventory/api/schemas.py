"""Pydantic response schema for the admin inventory view."""

from typing import Literal

from pydantic import Field

from storefront.web.envelope import ApiModel

InventoryFilter = Literal["low_stock", "out_of_stock", "all"]


class InventoryRowResponse(ApiModel):
    product_id: str
    product_name: str
    product_status: str
    variant_sku: str = Field(alias="variantSKU")
    size: str | None = None
    color: str | None = None
    stock: int
    derived_status: Literal["in_stock", "low_stock", "out_of_stock"]
