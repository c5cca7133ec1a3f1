"""Cart aggregate (CQRS): the per-user server cart.

Carts never hold prices. Lines reference a product and a variant SKU, and
prices are resolved from the catalogue when the order is placed.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartMerged,
    CartQuantityUpdated,
)
from storefront.shared.stock import capped, ensure_available

# How many merge fingerprints a cart remembers
MERGE_HISTORY = 20


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    variant_sku = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    merge_fingerprints = Text()  # JSON array, oldest first
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_variant(self):
        keys = [(str(i.product_id), i.variant_sku) for i in self.items]
        if len(keys) != len(set(keys)):
            raise ValidationError({"items": ["A cart holds at most one line per product variant"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            merge_fingerprints=json.dumps([]),
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def find_line(self, product_id, variant_sku):
        return next(
            (i for i in self.items if str(i.product_id) == str(product_id) and i.variant_sku == variant_sku),
            None,
        )

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, variant_sku, quantity, available_stock):
        """Add a line, or grow the existing one. Stock is checked against the resulting total."""
        existing = self.find_line(product_id, variant_sku)
        current = existing.quantity if existing else 0
        ensure_available(variant_sku, current + quantity, available_stock)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = current + quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=product_id,
                variant_sku=variant_sku,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product_id),
                variant_sku=variant_sku,
                quantity=quantity,
            )
        )

    def update_item_quantity(self, item_id, new_quantity, available_stock=None):
        """Set a line's quantity. `available_stock` is None when the variant is gone from the catalogue."""
        item = self.find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Cart item not found"]})

        if available_stock is not None:
            ensure_available(item.variant_sku, new_quantity, available_stock)

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id) -> bool:
        """Drop a line. Returns False, and changes nothing, when there is no such line."""
        item = self.find_item(item_id)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))
        return True

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=removed))

    # -------------------------------------------------------------------
    # Merging the anonymous client cart
    # -------------------------------------------------------------------
    @property
    def fingerprints(self) -> list[str]:
        return json.loads(self.merge_fingerprints) if self.merge_fingerprints else []

    def has_merged(self, fingerprint) -> bool:
        return fingerprint in self.fingerprints

    def merge(self, lines, fingerprint=None):
        """Fold resolved client lines into the cart, capping each at the stock on hand.

        Args:
            lines: dicts with product_id, variant_sku, quantity and available_stock.
                Lines the caller could not resolve are simply left out.
            fingerprint: identifies this merge request within its session; a replay
                is a no-op. Without one the merge is applied and not remembered.
        """
        if fingerprint and self.has_merged(fingerprint):
            return

        now = datetime.now(UTC)
        merged = 0
        for line in lines:
            available = line["available_stock"]
            to_add = capped(line["quantity"], available)
            if to_add < 1:
                continue

            existing = self.find_line(line["product_id"], line["variant_sku"])
            if existing:
                existing.quantity = max(1, min(existing.quantity + to_add, available))
            else:
                self.add_items(
                    CartItem(
                        product_id=line["product_id"],
                        variant_sku=line["variant_sku"],
                        quantity=to_add,
                        added_at=now,
                    )
                )
            merged += 1

        if fingerprint:
            self.merge_fingerprints = json.dumps((self.fingerprints + [fingerprint])[-MERGE_HISTORY:])
        self.updated_at = now

        self.raise_(
            CartMerged(
                cart_id=str(self.id),
                fingerprint=fingerprint,
                lines_merged=merged,
            )
        )
