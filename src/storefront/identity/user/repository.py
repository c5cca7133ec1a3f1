"""Lookups over the User aggregate."""

from protean import Q

from storefront.domain import storefront
from storefront.identity.user.user import Role, User, normalize_email


@storefront.repository(part_of=User)
class UserRepository:
    def find(self, user_id) -> User | None:
        if not user_id:
            return None
        results = self._dao.query.filter(id=str(user_id)).all()
        return results.first if results.items else None

    def find_by_email(self, email: str) -> User | None:
        results = self._dao.query.filter(email=normalize_email(email)).all()
        return results.first if results.items else None

    def customers_page(self, q: str | None = None, page: int = 1, limit: int = 20) -> tuple[list[User], int]:
        """One page of customer accounts, newest first, and how many match in total.

        `q` narrows the accounts to a case-insensitive name or email substring.
        """
        query = self._dao.query.filter(role=Role.CUSTOMER.value)
        if q and q.strip():
            needle = q.strip()
            query = query.filter(Q(name__icontains=needle) | Q(email__icontains=needle))

        results = query.order_by(["-created_at", "id"]).offset((page - 1) * limit).limit(limit).all()
        return results.items, results.total
