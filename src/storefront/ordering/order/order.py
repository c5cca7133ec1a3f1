"""Order aggregate (CQRS): the immutable record of a completed checkout.

Lines carry the unit price captured when the order was placed, so later
catalogue edits never change an existing order. Only the two status fields
move after placement; admins may set either one to any value.
"""

import math
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.ordering.order.events import OrderPlaced, OrderStatusChanged
from storefront.shared.payment_methods import PaymentMethod


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


# The usual flow of an order. Admins may set any status; moves outside this
# table are logged, not refused.
STANDARD_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, captured at checkout and never updated afterwards."""

    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=30)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    variant_sku = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress, required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    subtotal = Float(min_value=0.0, default=0.0)
    shipping_fee = Float(min_value=0.0, default=0.0)
    total_amount = Float(min_value=0.0, default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order needs at least one item"]})

    @invariant.post
    def total_must_equal_subtotal_plus_shipping(self):
        if not math.isclose(self.total_amount, self.subtotal + self.shipping_fee, abs_tol=1e-9):
            raise ValidationError({"total_amount": ["Total must equal subtotal plus shipping fee"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, order_number, user_id, lines, shipping_address, payment_method, shipping_fee):
        """Create the order from priced lines.

        Args:
            lines: dicts with product_id, variant_sku, quantity and unit_price.
            shipping_address: dict of ShippingAddress fields.
        """
        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=line["product_id"],
                variant_sku=line["variant_sku"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
            )
            for line in lines
        ]
        subtotal = round(sum(item.unit_price * item.quantity for item in items), 2)
        shipping_fee = float(shipping_fee)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            items=items,
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method,
            order_status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            total_amount=subtotal + shipping_fee,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(user_id),
                item_count=len(items),
                subtotal=order.subtotal,
                shipping_fee=order.shipping_fee,
                total_amount=order.total_amount,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status management
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def follows_standard_flow(self, order_status) -> bool:
        current = OrderStatus(self.order_status)
        target = OrderStatus(order_status)
        return target == current or target in STANDARD_TRANSITIONS.get(current, set())

    def change_status(self, order_status=None, payment_status=None):
        """Overwrite order status and/or payment status with the given values.

        Re-applying the current values changes nothing and raises no event.
        """
        target_order_status = OrderStatus(order_status) if order_status else OrderStatus(self.order_status)
        target_payment_status = PaymentStatus(payment_status) if payment_status else PaymentStatus(self.payment_status)

        previous_order_status = self.order_status
        previous_payment_status = self.payment_status
        if (
            target_order_status.value == previous_order_status
            and target_payment_status.value == previous_payment_status
        ):
            return

        now = datetime.now(UTC)
        self.order_status = target_order_status.value
        self.payment_status = target_payment_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_order_status=previous_order_status,
                order_status=self.order_status,
                previous_payment_status=previous_payment_status,
                payment_status=self.payment_status,
                changed_at=now,
            )
        )

    def confirm_payment(self):
        """Mark the order paid and confirmed, whatever its current statuses."""
        self.change_status(
            order_status=OrderStatus.CONFIRMED.value,
            payment_status=PaymentStatus.PAID.value,
        )
