"""Per-request domain context and log context."""

import uuid

from fastapi import FastAPI, Request
from protean.domain import Domain

from storefront.utils.logging import add_context, clear_context


def install_domain_context(app: FastAPI, domain: Domain) -> None:
    """Run every request inside `domain`'s context, tagged with a request id."""
    app.state.domain = domain

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        clear_context()
        add_context(request_id=request_id, method=request.method, path=request.url.path)

        with domain.domain_context():
            response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        return response
