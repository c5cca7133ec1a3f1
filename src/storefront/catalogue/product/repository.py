"""Read paths over the Product aggregate."""

from protean import Q

from storefront.catalogue.product.product import Product, ProductStatus
from storefront.domain import storefront
from storefront.shared.settings import query_limit


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_active(self, product_id) -> Product | None:
        """The product when it exists and is ACTIVE, else None."""
        product = self.find(product_id)
        if product is None or not product.is_active:
            return None
        return product

    def find(self, product_id) -> Product | None:
        if not product_id:
            return None
        results = self._dao.query.filter(id=str(product_id)).all()
        return results.first if results.items else None

    def find_by_slug(self, slug: str) -> Product | None:
        results = self._dao.query.filter(slug=slug).all()
        return results.first if results.items else None

    def slug_taken(self, slug: str, exclude_id=None) -> bool:
        product = self.find_by_slug(slug)
        return product is not None and str(product.id) != str(exclude_id)

    def search(self, q: str | None = None, slug: str | None = None, ids=None, active_only: bool = True) -> list[Product]:
        """Newest first. `q` is a case-insensitive substring of name or description."""
        query = self._dao.query
        if active_only:
            query = query.filter(status=ProductStatus.ACTIVE.value)
        if slug:
            query = query.filter(slug=slug)
        if ids:
            query = query.filter(id__in=[str(i) for i in ids])
        if q and q.strip():
            needle = q.strip()
            query = query.filter(Q(name__icontains=needle) | Q(description__icontains=needle))

        limit = max(query_limit(), len(ids or ()))
        return query.order_by("-created_at").limit(limit).all().items

    def all_by_name(self) -> list[Product]:
        """Every product, read a page at a time."""
        page_size = query_limit()
        products, offset = [], 0
        while True:
            page = self._dao.query.order_by(["name", "id"]).offset(offset).limit(page_size).all()
            products.extend(page.items)
            offset += page_size
            if not page.items or offset >= page.total:
                break
        return sorted(products, key=lambda p: (p.name or "").lower())
