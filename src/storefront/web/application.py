"""FastAPI application factory.

The domain is initialised by the caller and handed in, so the persistence
providers it built are shared by every request.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from protean.domain import Domain

from storefront.web.context import install_domain_context
from storefront.web.errors import register_exception_handlers


def create_app(domain: Domain) -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description="Catalogue, cart, checkout and back office",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_domain_context(app, domain)
    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    from storefront.catalogue.api import admin_collection_router, collection_router, product_router
    from storefront.identity.api import admin_user_router, auth_router
    from storefront.inventory.api import inventory_router
    from storefront.ordering.api import admin_order_router, cart_router, order_router
    from storefront.payments.api import admin_payment_router, payment_router

    for router in (
        auth_router,
        product_router,
        collection_router,
        cart_router,
        order_router,
        payment_router,
        admin_collection_router,
        admin_order_router,
        admin_payment_router,
        admin_user_router,
        inventory_router,
    ):
        app.include_router(router)

    @app.get("/health")
    async def health():
        return {"data": {"status": "ok", "domain": domain.name}}

    return app
