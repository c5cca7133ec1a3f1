"""Catalogue API package."""

from storefront.catalogue.api.routes import admin_collection_router, collection_router, product_router

__all__ = ["product_router", "collection_router", "admin_collection_router"]
