"""Payments API package."""

from storefront.payments.api.routes import admin_payment_router, payment_router

__all__ = ["payment_router", "admin_payment_router"]
