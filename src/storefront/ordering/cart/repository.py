"""Lookups over the Cart aggregate: one cart per user."""

from storefront.domain import storefront
from storefront.ordering.cart.cart import Cart


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        results = self._dao.query.filter(user_id=str(user_id)).all()
        return results.first if results.items else None

    def for_user_or_new(self, user_id) -> Cart:
        return self.for_user(user_id) or Cart.create(user_id=str(user_id))
