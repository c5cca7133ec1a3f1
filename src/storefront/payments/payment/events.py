"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Payment")
class PaymentOpened:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    method = String(required=True)
    reference_number = String(required=True)
    opened_at = DateTime(required=True)


@storefront.event(part_of="Payment")
class PaymentConfirmed:
    """The (mock) gateway reported the payment as settled."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reference_number = String(required=True)
    confirmed_at = DateTime(required=True)
