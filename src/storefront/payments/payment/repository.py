"""Lookups over the Payment aggregate."""

from storefront.domain import storefront
from storefront.payments.payment.payment import Payment

ADMIN_LIST_LIMIT = 200


@storefront.repository(part_of=Payment)
class PaymentRepository:
    def for_order(self, order_id) -> Payment | None:
        results = self._dao.query.filter(order_id=str(order_id)).all()
        return results.first if results.items else None

    def newest_first(self, method: str | None = None, status: str | None = None, limit: int = ADMIN_LIST_LIMIT):
        query = self._dao.query
        if method:
            query = query.filter(method=method)
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").limit(limit).all().items
