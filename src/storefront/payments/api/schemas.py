"""Pydantic request/response schemas for the payments API."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from storefront.web.envelope import ApiModel

PaymentMethodName = Literal["EASYPAISA", "JAZZCASH", "BANK_TRANSFER"]
PaymentRecordStatusName = Literal["PENDING", "PAID", "FAILED"]


class ConfirmPaymentRequest(ApiModel):
    order_id: str = Field(min_length=1)


class ConfirmPaymentResponse(ApiModel):
    confirmed: bool = True
    order_id: str


class PaymentResponse(ApiModel):
    id: str
    order_id: str
    order_number: str | None = None
    total_amount: float | None = None
    method: str
    status: str
    reference_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, payment, order=None) -> "PaymentResponse":
        return cls(
            id=str(payment.id),
            order_id=str(payment.order_id),
            order_number=order.order_number if order else None,
            total_amount=order.total_amount if order else None,
            method=payment.method,
            status=payment.status,
            reference_number=payment.reference_number,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )
