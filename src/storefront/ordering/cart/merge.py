"""Merging the anonymous client cart into the server cart after sign-in.

The client cart is untrusted and may reference products that have since
been archived or deleted; such lines are dropped without failing the merge.
Within one sign-in session a merge request is fingerprinted, so a retried
or repeated call with the same payload is applied once. A new session, or a
new merge key from the client, merges again.
"""

import hashlib
import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.cart.cart import Cart

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Cart")
class MergeCart:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON array of {product_id, variant_sku, quantity}
    merge_key = String(max_length=255)  # sent by clients that track their own sign-ins
    session_id = String(max_length=64)  # jti of the caller's session token


def merge_fingerprint(items, merge_key=None, session_id=None) -> str | None:
    """Stable digest of a merge request within its session, independent of line order.

    None when the request names neither a session nor a merge key: there is
    nothing to scope a replay to, so such a merge is always applied.
    """
    if not merge_key and not session_id:
        return None
    normalized = sorted((str(i["product_id"]), str(i["variant_sku"]), int(i["quantity"])) for i in items)
    payload = json.dumps(
        {"session": session_id or "", "key": merge_key or "", "items": normalized},
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def resolve_lines(items):
    """Attach current stock to each line that still points at a sellable variant."""
    products = current_domain.repository_for(Product)
    resolved = []
    for item in items:
        product = products.find_active(item["product_id"])
        variant = product.find_variant(item["variant_sku"]) if product else None
        if variant is None or (variant.stock or 0) < 1 or int(item["quantity"]) < 1:
            continue
        resolved.append(
            {
                "product_id": str(product.id),
                "variant_sku": variant.variant_sku,
                "quantity": int(item["quantity"]),
                "available_stock": variant.stock,
            }
        )
    return resolved


@storefront.command_handler(part_of=Cart)
class MergeCartHandler:
    @handle(MergeCart)
    def merge_cart(self, command):
        items = json.loads(command.items)
        fingerprint = merge_fingerprint(items, command.merge_key, command.session_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user_or_new(command.user_id)

        if fingerprint and cart.has_merged(fingerprint):
            logger.info("Cart merge replayed, skipping", cart_id=str(cart.id), user_id=str(command.user_id))
            return str(cart.id)

        lines = resolve_lines(items)
        cart.merge(lines, fingerprint)
        repo.add(cart)

        logger.info(
            "Cart merged",
            cart_id=str(cart.id),
            requested=len(items),
            merged=len(lines),
        )
        return str(cart.id)
