"""Read paths over the Collection aggregate."""

from storefront.catalogue.collection.collection import Collection
from storefront.domain import storefront
from storefront.shared.settings import query_limit


@storefront.repository(part_of=Collection)
class CollectionRepository:
    def find(self, collection_id) -> Collection | None:
        if not collection_id:
            return None
        results = self._dao.query.filter(id=str(collection_id)).all()
        return results.first if results.items else None

    def find_by_slug(self, slug: str) -> Collection | None:
        results = self._dao.query.filter(slug=slug).all()
        return results.first if results.items else None

    def slug_taken(self, slug: str, exclude_id=None) -> bool:
        collection = self.find_by_slug(slug)
        return collection is not None and str(collection.id) != str(exclude_id)

    def in_display_order(self) -> list[Collection]:
        collections = self._dao.query.order_by(["display_order", "name"]).limit(query_limit()).all().items
        return sorted(collections, key=lambda c: (c.display_order or 0, (c.name or "").lower()))
