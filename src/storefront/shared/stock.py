"""Stock admission policy.

One rule, applied wherever a quantity is about to be reserved against a
variant's stock: a request is admitted only while it does not exceed what is
on hand. Cart merges cap instead of rejecting.
"""

from protean.exceptions import ValidationError


def admits(requested: int, available: int) -> bool:
    return 0 < requested <= max(available or 0, 0)


def ensure_available(variant_sku: str, requested: int, available: int) -> None:
    """Raise a ValidationError naming the SKU when `requested` exceeds `available`."""
    if not admits(requested, available):
        raise ValidationError({"quantity": [f"Insufficient stock for {variant_sku}"]})


def capped(requested: int, available: int) -> int:
    """The largest admissible part of `requested`; 0 when nothing is on hand."""
    return max(0, min(requested, available or 0))
