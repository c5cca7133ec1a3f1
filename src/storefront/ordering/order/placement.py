"""Order placement: command and handler.

Placing an order re-prices every line from the catalogue, takes the ordered
units out of variant stock and opens the companion payment. All of it happens
inside the handler's Unit of Work: products, order and payment are persisted
together, and nothing is persisted when any line is rejected.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.order.numbering import generate_order_number
from storefront.ordering.order.order import Order
from storefront.payments.payment.payment import Payment
from storefront.shared.payment_methods import PaymentMethod
from storefront.shared.settings import setting, shipping_fee

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, variant_sku, quantity}
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, choices=PaymentMethod)


def reserve_lines(items):
    """Price each requested line and reserve its stock on the loaded products.

    Returns the priced lines and the products that were touched. Raises a
    ValidationError naming the first line that cannot be fulfilled; the
    products are only changed in memory until the caller persists them.
    """
    product_repo = current_domain.repository_for(Product)
    touched = {}
    priced = []

    for item in items:
        product_id = str(item["product_id"])
        product = touched.get(product_id) or product_repo.find_active(product_id)
        if product is None:
            raise ValidationError({"items": [f"Product not found or inactive: {product_id}"]})

        variant_sku = item["variant_sku"]
        if product.find_variant(variant_sku) is None:
            raise ValidationError({"items": [f"Variant not found: {variant_sku}"]})

        quantity = int(item["quantity"])
        product.reserve_stock(variant_sku, quantity)
        touched[product_id] = product

        priced.append(
            {
                "product_id": product_id,
                "variant_sku": variant_sku,
                "quantity": quantity,
                "unit_price": product.unit_price,
            }
        )

    return priced, list(touched.values())


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = json.loads(command.items)
        if not items:
            raise ValidationError({"items": ["At least one item is required"]})

        priced, products = reserve_lines(items)

        order_repo = current_domain.repository_for(Order)
        order = Order.place(
            order_number=generate_order_number(order_repo.number_taken, prefix=setting("ORDER_NUMBER_PREFIX")),
            user_id=command.user_id,
            lines=priced,
            shipping_address=json.loads(command.shipping_address),
            payment_method=command.payment_method,
            shipping_fee=shipping_fee(),
        )
        payment = Payment.open(order_id=order.id, method=order.payment_method)

        product_repo = current_domain.repository_for(Product)
        for product in products:
            product_repo.add(product)
        order_repo.add(order)
        current_domain.repository_for(Payment).add(payment)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            total_amount=order.total_amount,
        )
        return str(order.id)
