"""Lookups over the Order aggregate."""

from datetime import datetime

from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.shared.settings import query_limit


@storefront.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order | None:
        if not order_id:
            return None
        results = self._dao.query.filter(id=str(order_id)).all()
        return results.first if results.items else None

    def number_taken(self, order_number: str) -> bool:
        return bool(self._dao.query.filter(order_number=order_number).all().items)

    def for_user(self, user_id, limit: int | None = None) -> list[Order]:
        """A user's orders, newest first."""
        return (
            self._dao.query.filter(user_id=str(user_id))
            .order_by("-created_at")
            .limit(limit or query_limit())
            .all()
            .items
        )

    def summary_for_user(self, user_id) -> tuple[int, datetime | None]:
        """How many orders a user has placed, and when the latest one was."""
        results = self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").limit(1).all()
        return results.total, (results.first.created_at if results.items else None)

    def newest_first(self, order_status: str | None = None) -> list[Order]:
        query = self._dao.query
        if order_status:
            query = query.filter(order_status=order_status)
        return query.order_by("-created_at").limit(query_limit()).all().items

    def find_many(self, order_ids) -> dict:
        """Orders keyed by id, for joining onto payments."""
        wanted = {str(i) for i in order_ids}
        if not wanted:
            return {}
        orders = self._dao.query.filter(id__in=list(wanted)).limit(len(wanted)).all().items
        return {str(o.id): o for o in orders}
