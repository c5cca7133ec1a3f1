"""Application tests for cart item handlers."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.items import AddToCart, ClearCart, RemoveCartItem, UpdateCartItem


def _add(user_id, product, quantity=1, variant_sku="KRT-RED-M"):
    command = AddToCart(user_id=user_id, product_id=str(product.id), variant_sku=variant_sku, quantity=quantity)
    return current_domain.process(command, asynchronous=False)


def _cart(user_id):
    return current_domain.repository_for(Cart).for_user(user_id)


class TestAddToCartHandler:
    def test_creates_the_cart_on_first_add(self, make_product):
        product = make_product()

        _add("user-1", product, quantity=2)

        cart = _cart("user-1")
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_second_add_reuses_the_cart(self, make_product):
        product = make_product()
        first = _add("user-1", product)
        second = _add("user-1", product)

        assert first == second
        assert _cart("user-1").items[0].quantity == 2

    def test_inactive_product_rejected(self, make_product):
        product = make_product(status="DRAFT")
        with pytest.raises(ObjectNotFoundError) as exc:
            _add("user-1", product)
        assert exc.value.messages == "Product not found or inactive"

    def test_unknown_variant_rejected(self, make_product):
        product = make_product()
        with pytest.raises(ObjectNotFoundError) as exc:
            _add("user-1", product, variant_sku="NOPE")
        assert exc.value.messages == "Variant not found"

    def test_new_total_above_stock_rejected(self, make_product):
        product = make_product(variants=[{"variant_sku": "KRT-RED-M", "stock": 3}])
        _add("user-1", product, quantity=2)

        with pytest.raises(ValidationError) as exc:
            _add("user-1", product, quantity=2)

        assert exc.value.messages["quantity"] == ["Insufficient stock for KRT-RED-M"]
        assert _cart("user-1").items[0].quantity == 2

    def test_carts_are_per_user(self, make_product):
        product = make_product()
        _add("user-1", product)
        _add("user-2", product, quantity=3)

        assert _cart("user-1").items[0].quantity == 1
        assert _cart("user-2").items[0].quantity == 3


class TestUpdateCartItemHandler:
    def test_sets_quantity(self, make_product):
        product = make_product()
        _add("user-1", product)
        item_id = _cart("user-1").items[0].id

        current_domain.process(UpdateCartItem(user_id="user-1", item_id=item_id, quantity=7), asynchronous=False)

        assert _cart("user-1").items[0].quantity == 7

    def test_checked_against_current_stock(self, make_product):
        product = make_product(variants=[{"variant_sku": "KRT-RED-M", "stock": 5}])
        _add("user-1", product)
        item_id = _cart("user-1").items[0].id

        with pytest.raises(ValidationError):
            current_domain.process(UpdateCartItem(user_id="user-1", item_id=item_id, quantity=6), asynchronous=False)

    def test_no_cart(self):
        with pytest.raises(ObjectNotFoundError) as exc:
            current_domain.process(UpdateCartItem(user_id="user-1", item_id="nope", quantity=1), asynchronous=False)
        assert exc.value.messages == "Cart item not found"

    def test_unknown_item(self, make_product):
        _add("user-1", make_product())
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateCartItem(user_id="user-1", item_id="nope", quantity=1), asynchronous=False)


class TestRemoveAndClearHandlers:
    def test_remove(self, make_product):
        _add("user-1", make_product())
        item_id = _cart("user-1").items[0].id

        current_domain.process(RemoveCartItem(user_id="user-1", item_id=item_id), asynchronous=False)

        assert _cart("user-1").items == []

    def test_remove_is_idempotent(self, make_product):
        _add("user-1", make_product())
        current_domain.process(RemoveCartItem(user_id="user-1", item_id="nope"), asynchronous=False)
        assert len(_cart("user-1").items) == 1

    def test_remove_without_cart(self):
        assert current_domain.process(RemoveCartItem(user_id="user-1", item_id="nope"), asynchronous=False) is None
        assert _cart("user-1") is None

    def test_clear(self, make_product):
        _add("user-1", make_product(name="Lawn Kurta"))
        _add("user-1", make_product(name="Silk Dupatta"))

        current_domain.process(ClearCart(user_id="user-1"), asynchronous=False)

        assert _cart("user-1").items == []

    def test_clear_without_cart(self):
        assert current_domain.process(ClearCart(user_id="user-1"), asynchronous=False) is None
