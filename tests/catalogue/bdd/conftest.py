"""Shared BDD fixtures and step definitions for the catalogue."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from storefront.catalogue.product.product import Product


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
@given(parsers.cfparse('a product named "{name}" exists'))
def product_named_exists(make_product, name):
    make_product(name=name)


@given(parsers.cfparse("a product priced {price:g} with a sale price of {sale_price:g}"), target_fixture="product")
def product_on_sale(price, sale_price):
    return Product.create(name="Lawn Kurta", slug="lawn-kurta", price=price, sale_price=sale_price)


@given(parsers.cfparse("a product priced {price:g} without a sale price"), target_fixture="product")
def product_at_list_price(price):
    return Product.create(name="Lawn Kurta", slug="lawn-kurta", price=price)


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("the unit price is {price:g}"))
def unit_price_is(product, price):
    assert product.unit_price == price
