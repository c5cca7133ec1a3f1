"""Admin inventory view: every variant of every product, classified by stock.

A read model computed on request from the Product aggregates; nothing is
stored.
"""

from dataclasses import asdict, dataclass
from enum import Enum

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product

LOW_STOCK_THRESHOLD = 5


class StockLevel(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


@dataclass(frozen=True)
class InventoryRow:
    product_id: str
    product_name: str
    product_status: str
    variant_sku: str
    size: str | None
    color: str | None
    stock: int
    derived_status: str

    def to_dict(self) -> dict:
        return asdict(self)


def classify(stock: int) -> StockLevel:
    stock = stock or 0
    if stock <= 0:
        return StockLevel.OUT_OF_STOCK
    if stock < LOW_STOCK_THRESHOLD:
        return StockLevel.LOW_STOCK
    return StockLevel.IN_STOCK


def inventory_rows(products, level: str | None = None) -> list[InventoryRow]:
    """Flatten products into rows, keeping only `level` when one is given ("all" keeps everything)."""
    rows = []
    for product in products:
        for variant in product.variants:
            rows.append(
                InventoryRow(
                    product_id=str(product.id),
                    product_name=product.name,
                    product_status=product.status,
                    variant_sku=variant.variant_sku,
                    size=variant.size,
                    color=variant.color,
                    stock=variant.stock or 0,
                    derived_status=classify(variant.stock).value,
                )
            )

    if level and level != "all":
        rows = [row for row in rows if row.derived_status == level]
    return rows


def inventory_report(level: str | None = None) -> list[InventoryRow]:
    products = current_domain.repository_for(Product).all_by_name()
    return inventory_rows(products, level)
