"""Domain events for the Collection aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Collection")
class CollectionCreated:
    __version__ = 1

    collection_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    display_order: Integer(required=True)


@storefront.event(part_of="Collection")
class CollectionUpdated:
    __version__ = 1

    collection_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    display_order: Integer(required=True)
    product_count: Integer(required=True)
