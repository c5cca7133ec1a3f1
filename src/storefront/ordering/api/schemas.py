"""Pydantic request/response schemas for the cart and order API.

These are external contracts (anti-corruption layer), separate from the
internal protean commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator

from storefront.catalogue.api.schemas import ProductResponse
from storefront.web.envelope import ApiModel

PaymentMethodName = Literal["EASYPAISA", "JAZZCASH", "BANK_TRANSFER"]
OrderStatusName = Literal["PENDING", "CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED", "REFUNDED"]
PaymentStatusName = Literal["PENDING", "PAID", "FAILED", "REFUNDED", "PARTIALLY_REFUNDED"]


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(ApiModel):
    full_name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=30)
    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20)
    country: str = Field(min_length=1, max_length=100)


class CartLineRequest(ApiModel):
    product_id: str = Field(min_length=1)
    variant_sku: str = Field(alias="variantSKU", min_length=1, max_length=100)
    quantity: int = Field(ge=1, default=1)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class UpdateCartItemRequest(ApiModel):
    quantity: int = Field(ge=1)


class MergeLine(ApiModel):
    """A line from the anonymous client cart. Not validated beyond its shape."""

    product_id: str
    variant_sku: str = Field(alias="variantSKU")
    quantity: int


class MergeCartRequest(ApiModel):
    items: list[MergeLine] = []
    merge_key: str | None = Field(default=None, max_length=255)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"productId": "0d6c…", "variantSKU": "KRT-RED-M", "quantity": 2}],
                    "mergeKey": "login-2024-05-01T10:00:00Z",
                }
            ]
        }
    }


class CartItemResponse(ApiModel):
    id: str
    product_id: str
    variant_sku: str = Field(alias="variantSKU")
    quantity: int
    product: ProductResponse | None = None


class CartResponse(ApiModel):
    id: str
    user_id: str | None = None
    items: list[CartItemResponse] = []
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(ApiModel):
    items: list[CartLineRequest] = Field(min_length=1)
    shipping_address: AddressSchema
    payment_method: PaymentMethodName

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"productId": "0d6c…", "variantSKU": "KRT-RED-M", "quantity": 1}],
                    "shippingAddress": {
                        "fullName": "Ayesha Khan",
                        "phone": "+92 300 1234567",
                        "street": "12 Canal View",
                        "city": "Lahore",
                        "state": "Punjab",
                        "postalCode": "54000",
                        "country": "Pakistan",
                    },
                    "paymentMethod": "JAZZCASH",
                }
            ]
        }
    }


class UpdateOrderRequest(ApiModel):
    order_status: OrderStatusName | None = None
    payment_status: PaymentStatusName | None = None

    @model_validator(mode="after")
    def needs_a_change(self):
        if self.order_status is None and self.payment_status is None:
            raise ValueError("Provide orderStatus and/or paymentStatus")
        return self


class OrderItemResponse(ApiModel):
    product_id: str
    variant_sku: str = Field(alias="variantSKU")
    quantity: int
    unit_price: float


class OrderResponse(ApiModel):
    id: str
    order_number: str
    user_id: str
    items: list[OrderItemResponse]
    shipping_address: AddressSchema
    payment_method: str
    order_status: str
    payment_status: str
    subtotal: float
    shipping_fee: float
    total_amount: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order) -> "OrderResponse":
        address = order.shipping_address
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            items=[
                OrderItemResponse(
                    product_id=str(i.product_id),
                    variant_sku=i.variant_sku,
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                )
                for i in order.items
            ],
            shipping_address=AddressSchema(
                full_name=address.full_name,
                phone=address.phone,
                street=address.street,
                city=address.city,
                state=address.state,
                postal_code=address.postal_code,
                country=address.country,
            ),
            payment_method=order.payment_method,
            order_status=order.order_status,
            payment_status=order.payment_status,
            subtotal=order.subtotal,
            shipping_fee=order.shipping_fee,
            total_amount=order.total_amount,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
