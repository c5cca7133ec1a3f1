"""Application tests for order placement."""

import json

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.ordering.order import numbering
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import PlaceOrder
from storefront.payments.payment.payment import Payment


def _place(address, lines, user_id="user-1", payment_method="EASYPAISA"):
    command = PlaceOrder(
        user_id=user_id,
        items=json.dumps(lines),
        shipping_address=json.dumps(address),
        payment_method=payment_method,
    )
    return current_domain.process(command, asynchronous=False)


def _line(product, quantity=1, variant_sku="KRT-RED-M"):
    return {"product_id": str(product.id), "variant_sku": variant_sku, "quantity": quantity}


def _stock(product, variant_sku="KRT-RED-M"):
    return current_domain.repository_for(Product).find(product.id).find_variant(variant_sku).stock


def _order_count():
    return len(current_domain.repository_for(Order).newest_first())


def _payment_count():
    return len(current_domain.repository_for(Payment).newest_first())


class TestPlaceOrderHandler:
    def test_order_priced_from_catalogue(self, make_product, address):
        kurta = make_product(name="Lawn Kurta", price=4500.0, sale_price=3900.0)
        dupatta = make_product(name="Silk Dupatta", price=1200.0, variants=[{"variant_sku": "DUP-BLK", "stock": 4}])

        order_id = _place(address, [_line(kurta, 2), _line(dupatta, 1, variant_sku="DUP-BLK")])

        order = current_domain.repository_for(Order).find(order_id)
        assert order.subtotal == 9000.0
        assert order.shipping_fee == 500.0
        assert order.total_amount == 9500.0
        assert {i.variant_sku: i.unit_price for i in order.items} == {"KRT-RED-M": 3900.0, "DUP-BLK": 1200.0}

    def test_order_number_format(self, make_product, address):
        order_id = _place(address, [_line(make_product())])

        number = current_domain.repository_for(Order).find(order_id).order_number
        assert number.startswith("ALN-")
        assert len(number) == 12

    def test_stock_decremented(self, make_product, address):
        product = make_product(variants=[{"variant_sku": "KRT-RED-M", "stock": 10}])
        _place(address, [_line(product, 3)])
        assert _stock(product) == 7

    def test_whole_stock_can_be_ordered(self, make_product, address):
        product = make_product(variants=[{"variant_sku": "KRT-RED-M", "stock": 2}])
        _place(address, [_line(product, 2)])
        assert _stock(product) == 0

    def test_payment_opened_pending(self, make_product, address):
        order_id = _place(address, [_line(make_product())], payment_method="BANK_TRANSFER")

        payment = current_domain.repository_for(Payment).for_order(order_id)
        assert payment.status == "PENDING"
        assert payment.method == "BANK_TRANSFER"
        assert payment.reference_number.startswith("MOCK-")

    def test_repeated_lines_checked_cumulatively(self, make_product, address):
        product = make_product(variants=[{"variant_sku": "KRT-RED-M", "stock": 3}])

        with pytest.raises(ValidationError) as exc:
            _place(address, [_line(product, 2), _line(product, 2)])

        assert exc.value.messages["quantity"] == ["Insufficient stock for KRT-RED-M"]
        assert _stock(product) == 3

    def test_unit_price_frozen_after_catalogue_change(self, make_product, address):
        product = make_product(price=4500.0)
        order_id = _place(address, [_line(product)])

        repo = current_domain.repository_for(Product)
        changed = repo.find(product.id)
        changed.update_details(price=9999.0)
        repo.add(changed)

        order = current_domain.repository_for(Order).find(order_id)
        assert order.items[0].unit_price == 4500.0

    def test_order_numbers_stay_unique_when_codes_collide(self, make_product, address, monkeypatch):
        monkeypatch.setattr(numbering, "random_code", lambda choice=None: "AAAAAAAA")
        product = make_product()

        first = _place(address, [_line(product)])
        second = _place(address, [_line(product)])

        repo = current_domain.repository_for(Order)
        assert repo.find(first).order_number == "ALN-AAAAAAAA"
        assert repo.find(second).order_number != "ALN-AAAAAAAA"
        assert repo.find(second).order_number.startswith("ALN-")


class TestRejectedOrders:
    def test_insufficient_stock_persists_nothing(self, make_product, address):
        plenty = make_product(name="Lawn Kurta", variants=[{"variant_sku": "KRT-RED-M", "stock": 10}])
        scarce = make_product(name="Silk Dupatta", variants=[{"variant_sku": "DUP-BLK", "stock": 1}])

        with pytest.raises(ValidationError) as exc:
            _place(address, [_line(plenty, 2), _line(scarce, 2, variant_sku="DUP-BLK")])

        assert exc.value.messages["quantity"] == ["Insufficient stock for DUP-BLK"]
        assert _order_count() == 0
        assert _payment_count() == 0
        assert _stock(plenty) == 10
        assert _stock(scarce, "DUP-BLK") == 1

    def test_inactive_product(self, make_product, address):
        product = make_product(status="ARCHIVED")

        with pytest.raises(ValidationError) as exc:
            _place(address, [_line(product)])

        assert exc.value.messages["items"] == [f"Product not found or inactive: {product.id}"]
        assert _order_count() == 0

    def test_missing_product(self, address):
        with pytest.raises(ValidationError) as exc:
            _place(address, [{"product_id": "gone", "variant_sku": "KRT-RED-M", "quantity": 1}])
        assert exc.value.messages["items"] == ["Product not found or inactive: gone"]

    def test_missing_variant(self, make_product, address):
        with pytest.raises(ValidationError) as exc:
            _place(address, [_line(make_product(), variant_sku="KRT-BLUE-XL")])
        assert exc.value.messages["items"] == ["Variant not found: KRT-BLUE-XL"]

    def test_no_items(self, address):
        with pytest.raises(ValidationError):
            _place(address, [])
        assert _order_count() == 0
