"""Back-office order updates: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order, OrderStatus, PaymentStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    order_status = String(choices=OrderStatus)
    payment_status = String(choices=PaymentStatus)


@storefront.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        if order is None:
            raise ObjectNotFoundError("Order not found")

        previous = order.order_status
        if command.order_status and not order.follows_standard_flow(command.order_status):
            logger.warning(
                "Order status set outside the standard flow",
                order_id=str(order.id),
                from_status=previous,
                to_status=command.order_status,
            )

        order.change_status(order_status=command.order_status, payment_status=command.payment_status)
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            previous_order_status=previous,
            order_status=order.order_status,
            payment_status=order.payment_status,
        )
        return str(order.id)
