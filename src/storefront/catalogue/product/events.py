"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    status: String(required=True)
    price: Float(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """An administrator edited a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    status: String(required=True)
    price: Float(required=True)
    sale_price: Float()


@storefront.event(part_of="Product")
class StockReserved:
    """Units of a variant were taken out of stock by a placed order."""

    __version__ = 1

    product_id: Identifier(required=True)
    variant_sku: String(required=True)
    quantity: Integer(required=True)
    remaining_stock: Integer(required=True)
