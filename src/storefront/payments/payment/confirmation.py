"""Mock payment confirmation: command and handler.

Stands in for a gateway callback. The customer who owns the order confirms
it, and the payment and the order flip to paid together.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.payments.payment.payment import Payment
from storefront.shared.errors import AccessDenied

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Payment")
class ConfirmPayment:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Payment)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.find(command.order_id)
        if order is None:
            raise ObjectNotFoundError("Order not found")
        if not order.is_owned_by(command.user_id):
            raise AccessDenied(str(command.order_id))

        payment_repo = current_domain.repository_for(Payment)
        payment = payment_repo.for_order(order.id)
        if payment is None:
            raise ObjectNotFoundError("Payment not found")

        payment.mark_paid()
        order.confirm_payment()

        payment_repo.add(payment)
        order_repo.add(order)

        logger.info(
            "Payment confirmed",
            order_id=str(order.id),
            payment_id=str(payment.id),
            reference_number=payment.reference_number,
        )
        return str(order.id)
