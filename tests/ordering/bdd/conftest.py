"""Shared BDD fixtures and step definitions for ordering."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an active product "{name}" priced {price:g} with {stock:d} units of "{variant_sku}"'),
    target_fixture="product",
)
def active_product(make_product, name, price, stock, variant_sku):
    return make_product(name=name, price=price, variants=[{"variant_sku": variant_sku, "stock": stock}])


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)
