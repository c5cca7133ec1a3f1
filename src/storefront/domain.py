"""Storefront domain: catalogue, identity, ordering, payments and inventory.

A single Domain owns every aggregate so that checkout can change Products,
an Order and its Payment inside one Unit of Work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
