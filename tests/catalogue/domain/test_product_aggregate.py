"""Tests for the Product aggregate."""

import pytest
from protean.exceptions import ValidationError

from storefront.catalogue.product.events import ProductCreated, ProductDetailsUpdated, StockReserved
from storefront.catalogue.product.product import Product, ProductStatus


def _make_product(**overrides):
    defaults = {
        "name": "Embroidered Lawn Kurta",
        "slug": "embroidered-lawn-kurta",
        "price": 4500.0,
        "variants": [
            {"variant_sku": "KRT-RED-M", "size": "M", "color": "Red", "stock": 10},
            {"variant_sku": "KRT-RED-L", "size": "L", "color": "Red", "stock": 3},
        ],
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_defaults_to_draft(self):
        product = _make_product()
        assert product.status == ProductStatus.DRAFT.value
        assert product.is_active is False

    def test_variants_are_attached(self):
        product = _make_product()
        assert {v.variant_sku for v in product.variants} == {"KRT-RED-M", "KRT-RED-L"}

    def test_images_keep_their_position_as_display_order(self):
        product = _make_product(images=[{"url": "https://cdn.example.com/a.jpg"}, {"url": "https://cdn.example.com/b.jpg"}])
        assert sorted(i.display_order for i in product.images) == [0, 1]

    def test_raises_product_created(self):
        product = _make_product()
        assert any(isinstance(e, ProductCreated) for e in product._events)

    def test_duplicate_variant_skus_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_product(
                variants=[
                    {"variant_sku": "KRT-RED-M", "stock": 1},
                    {"variant_sku": "KRT-RED-M", "stock": 2},
                ]
            )
        assert exc.value.messages["variants"] == ["Duplicate variant SKU: KRT-RED-M"]

    def test_slug_must_be_url_safe(self):
        with pytest.raises(ValidationError) as exc:
            _make_product(slug="Not A Slug")
        assert "slug" in exc.value.messages


class TestUnitPrice:
    def test_list_price_without_sale(self):
        assert _make_product().unit_price == 4500.0

    def test_sale_price_wins_when_set(self):
        assert _make_product(sale_price=3900.0).unit_price == 3900.0

    def test_zero_sale_price_is_still_a_sale_price(self):
        assert _make_product(sale_price=0.0).unit_price == 0.0


class TestUpdateDetails:
    def test_partial_update(self):
        product = _make_product()
        product._events.clear()

        product.update_details(name="Chikankari Kurta", status="ACTIVE")

        assert product.name == "Chikankari Kurta"
        assert product.is_active
        assert product.price == 4500.0
        assert any(isinstance(e, ProductDetailsUpdated) for e in product._events)

    def test_variants_replaced_by_sku(self):
        product = _make_product()
        kept = product.find_variant("KRT-RED-M")

        product.update_details(variants=[{"variant_sku": "KRT-RED-M", "size": "M", "color": "Red", "stock": 4}])

        assert [v.variant_sku for v in product.variants] == ["KRT-RED-M"]
        assert product.find_variant("KRT-RED-M").id == kept.id
        assert product.find_variant("KRT-RED-M").stock == 4

    def test_images_replaced_wholesale(self):
        product = _make_product(images=[{"url": "https://cdn.example.com/a.jpg"}])
        product.update_details(images=[{"url": "https://cdn.example.com/z.jpg", "alt": "Back"}])
        assert [i.url for i in product.images] == ["https://cdn.example.com/z.jpg"]


class TestReserveStock:
    def test_decrements_variant_stock(self):
        product = _make_product()
        product.reserve_stock("KRT-RED-M", 4)
        assert product.find_variant("KRT-RED-M").stock == 6

    def test_whole_stock_can_be_reserved(self):
        product = _make_product()
        product.reserve_stock("KRT-RED-L", 3)
        assert product.find_variant("KRT-RED-L").stock == 0

    def test_raises_stock_reserved(self):
        product = _make_product()
        product._events.clear()
        product.reserve_stock("KRT-RED-M", 2)

        event = next(e for e in product._events if isinstance(e, StockReserved))
        assert event.remaining_stock == 8

    def test_more_than_on_hand_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError) as exc:
            product.reserve_stock("KRT-RED-L", 4)
        assert exc.value.messages["quantity"] == ["Insufficient stock for KRT-RED-L"]
        assert product.find_variant("KRT-RED-L").stock == 3

    def test_unknown_variant_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError) as exc:
            product.reserve_stock("KRT-BLUE-S", 1)
        assert exc.value.messages["variant_sku"] == ["Variant not found: KRT-BLUE-S"]
