"""Tests for the stock admission policy."""

import pytest
from protean.exceptions import ValidationError

from storefront.shared.stock import admits, capped, ensure_available


@pytest.mark.parametrize(
    ("requested", "available", "admitted"),
    [
        (1, 1, True),
        (5, 5, True),
        (6, 5, False),
        (1, 0, False),
        (0, 5, False),
        (1, None, False),
    ],
)
def test_admits(requested, available, admitted):
    assert admits(requested, available) is admitted


def test_ensure_available_names_the_sku():
    with pytest.raises(ValidationError) as exc:
        ensure_available("KRT-RED-M", 3, 2)
    assert exc.value.messages == {"quantity": ["Insufficient stock for KRT-RED-M"]}


def test_ensure_available_passes_at_the_boundary():
    ensure_available("KRT-RED-M", 2, 2)


@pytest.mark.parametrize(("requested", "available", "expected"), [(3, 5, 3), (8, 5, 5), (2, 0, 0), (2, None, 0)])
def test_capped(requested, available, expected):
    assert capped(requested, available) == expected
