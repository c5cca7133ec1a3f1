"""Collection aggregate: a named, ordered grouping of products."""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.fields import DateTime, Integer, String, Text

from storefront.catalogue.collection.events import CollectionCreated, CollectionUpdated
from storefront.domain import storefront
from storefront.shared.slugs import validate_slug


@storefront.aggregate
class Collection:
    """Products are referenced loosely by id; nothing cascades either way."""

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200, unique=True)
    description: Text()
    image: String(max_length=500)
    display_order: Integer(default=0)
    product_ids: Text()  # JSON array of product ids
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        validate_slug(self.slug)

    @classmethod
    def create(cls, name, slug, description=None, image=None, display_order=0, product_ids=None):
        now = datetime.now(UTC)
        collection = cls(
            name=name,
            slug=slug,
            description=description,
            image=image,
            display_order=display_order or 0,
            product_ids=json.dumps([str(pid) for pid in product_ids or []]),
            created_at=now,
            updated_at=now,
        )
        collection.raise_(
            CollectionCreated(
                collection_id=collection.id,
                name=collection.name,
                slug=collection.slug,
                display_order=collection.display_order,
            )
        )
        return collection

    @property
    def product_id_list(self) -> list[str]:
        return json.loads(self.product_ids) if self.product_ids else []

    def update_details(self, **changes):
        product_ids = changes.pop("product_ids", None)

        with atomic_change(self):
            for field_name, value in changes.items():
                setattr(self, field_name, value)
            if product_ids is not None:
                self.product_ids = json.dumps([str(pid) for pid in product_ids])
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CollectionUpdated(
                collection_id=self.id,
                name=self.name,
                slug=self.slug,
                display_order=self.display_order,
                product_count=len(self.product_id_list),
            )
        )
