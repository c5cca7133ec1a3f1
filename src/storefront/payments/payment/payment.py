"""Payment aggregate: the companion record of an order's payment.

There is no real gateway behind it. The reference number is generated
locally and confirmation is triggered by the customer.
"""

import time
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront
from storefront.payments.payment.events import PaymentConfirmed, PaymentOpened
from storefront.shared.payment_methods import PaymentMethod


class PaymentRecordStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


def mock_reference_number() -> str:
    return f"MOCK-{int(time.time() * 1000)}"


@storefront.aggregate
class Payment:
    order_id = Identifier(required=True, unique=True)
    method = String(required=True, choices=PaymentMethod)
    status = String(choices=PaymentRecordStatus, default=PaymentRecordStatus.PENDING.value)
    reference_number = String(max_length=50)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open(cls, order_id, method):
        now = datetime.now(UTC)
        payment = cls(
            order_id=str(order_id),
            method=method,
            status=PaymentRecordStatus.PENDING.value,
            reference_number=mock_reference_number(),
            created_at=now,
            updated_at=now,
        )
        payment.raise_(
            PaymentOpened(
                payment_id=str(payment.id),
                order_id=str(order_id),
                method=method,
                reference_number=payment.reference_number,
                opened_at=now,
            )
        )
        return payment

    def mark_paid(self):
        if self.status == PaymentRecordStatus.PAID.value:
            return

        now = datetime.now(UTC)
        self.status = PaymentRecordStatus.PAID.value
        self.updated_at = now

        self.raise_(
            PaymentConfirmed(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                reference_number=self.reference_number,
                confirmed_at=now,
            )
        )
