"""Storefront FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

PROTEAN_ENV selects the configuration overlay from storefront/domain.toml:
    - unset / "test"  -> in-memory providers
    - "production"    -> PostgreSQL via DATABASE_URL
"""

from storefront.domain import storefront
from storefront.web.application import create_app

# Initialised once at import so every worker reuses the same providers
storefront.init()

app = create_app(storefront)
