"""FastAPI endpoints for payments."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from storefront.ordering.order.order import Order
from storefront.payments.api.schemas import (
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    PaymentMethodName,
    PaymentRecordStatusName,
    PaymentResponse,
)
from storefront.payments.payment.confirmation import ConfirmPayment
from storefront.payments.payment.payment import Payment
from storefront.web.envelope import Envelope
from storefront.web.security import AdminUser, CurrentUser

payment_router = APIRouter(prefix="/payments", tags=["payments"])
admin_payment_router = APIRouter(prefix="/admin/payments", tags=["admin"])


@payment_router.post("/confirm", response_model=Envelope[ConfirmPaymentResponse])
async def confirm_payment(body: ConfirmPaymentRequest, principal: CurrentUser):
    """Mock gateway callback: marks the caller's order as paid and confirmed."""
    command = ConfirmPayment(user_id=principal.user_id, order_id=body.order_id)
    order_id = current_domain.process(command, asynchronous=False)
    return Envelope(data=ConfirmPaymentResponse(order_id=order_id))


@admin_payment_router.get("", response_model=Envelope[list[PaymentResponse]])
async def admin_list_payments(
    admin: AdminUser,
    method: PaymentMethodName | None = None,
    status: PaymentRecordStatusName | None = None,
):
    payments = current_domain.repository_for(Payment).newest_first(method=method, status=status)
    orders = current_domain.repository_for(Order).find_many(p.order_id for p in payments)
    return Envelope(data=[PaymentResponse.from_domain(p, orders.get(str(p.order_id))) for p in payments])
