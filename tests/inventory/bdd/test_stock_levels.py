"""BDD tests for inventory stock levels."""

from pytest_bdd import given, parsers, scenarios, then, when

from storefront.inventory.stock_report import inventory_report

scenarios("features/stock_levels.feature")


@given(parsers.cfparse("a variant with {stock:d} units on hand"))
def variant_with_stock(make_product, stock):
    make_product(variants=[{"variant_sku": "KRT-RED-M", "stock": stock}])


@when("the inventory is reported", target_fixture="rows")
def inventory_is_reported():
    return inventory_report()


@then(parsers.cfparse('the variant is "{level}"'))
def variant_is(rows, level):
    assert [row.derived_status for row in rows] == [level]
