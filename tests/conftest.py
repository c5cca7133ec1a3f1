import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    PROTEAN_ENV has to be set before the domain module is imported, because the
    domain reads its configuration overlay when it is constructed.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


# ---------------------------------------------------------------------------
# Domain lifecycle
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def _storefront_domain():
    """Initialize the storefront domain once per session."""
    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
DEFAULT_VARIANTS = [{"variant_sku": "KRT-RED-M", "size": "M", "color": "Red", "stock": 10}]

ADDRESS = {
    "full_name": "Ayesha Khan",
    "phone": "+92 300 1234567",
    "street": "12 Canal View",
    "city": "Lahore",
    "state": "Punjab",
    "postal_code": "54000",
    "country": "Pakistan",
}

API_ADDRESS = {
    "fullName": "Ayesha Khan",
    "phone": "+92 300 1234567",
    "street": "12 Canal View",
    "city": "Lahore",
    "state": "Punjab",
    "postalCode": "54000",
    "country": "Pakistan",
}


@pytest.fixture()
def address():
    return dict(ADDRESS)


@pytest.fixture()
def api_address():
    return dict(API_ADDRESS)


@pytest.fixture()
def make_product():
    """Persist a product directly through its repository. ACTIVE with one variant unless told otherwise."""
    from protean.utils.globals import current_domain

    from storefront.catalogue.product.product import Product
    from storefront.shared.slugs import slugify, unique_slug

    def _make(name="Embroidered Lawn Kurta", price=4500.0, status="ACTIVE", variants=None, **extra):
        repo = current_domain.repository_for(Product)
        product = Product.create(
            name=name,
            slug=unique_slug(slugify(name), repo.slug_taken),
            price=price,
            status=status,
            variants=DEFAULT_VARIANTS if variants is None else variants,
            **extra,
        )
        repo.add(product)
        return repo.find(product.id)

    return _make


@pytest.fixture()
def make_user():
    from protean.utils.globals import current_domain

    from storefront.identity.security import hash_password
    from storefront.identity.user.user import User

    def _make(email="ayesha@example.com", name="Ayesha Khan", role="CUSTOMER", password=None):
        user = User.register(
            name=name,
            email=email,
            role=role,
            password_hash=hash_password(password) if password else None,
        )
        current_domain.repository_for(User).add(user)
        return user

    return _make


@pytest.fixture()
def customer(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@example.com", name="Shop Admin", role="ADMIN", password="s3cret-pass")


@pytest.fixture()
def auth_headers():
    """Bearer headers for a user; admins get an admin session unless a role is given."""
    from storefront.identity.security import issue_session_token

    def _headers(user, role=None):
        token = issue_session_token(user.id, role or user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def client(_storefront_domain):
    from fastapi.testclient import TestClient

    from storefront.web.application import create_app

    return TestClient(create_app(_storefront_domain))
