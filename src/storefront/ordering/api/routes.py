"""FastAPI endpoints for the cart and orders."""

import json

from fastapi import APIRouter
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import ProductResponse
from storefront.catalogue.product.product import Product
from storefront.ordering.api.schemas import (
    CartItemResponse,
    CartLineRequest,
    CartResponse,
    MergeCartRequest,
    OrderResponse,
    OrderStatusName,
    PlaceOrderRequest,
    UpdateCartItemRequest,
    UpdateOrderRequest,
)
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.items import AddToCart, ClearCart, RemoveCartItem, UpdateCartItem
from storefront.ordering.cart.merge import MergeCart
from storefront.ordering.order.administration import UpdateOrderStatus
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import PlaceOrder
from storefront.shared.errors import AccessDenied
from storefront.web.envelope import Envelope
from storefront.web.security import AdminUser, CurrentUser

cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin"])


def _cart_view(user_id) -> CartResponse:
    """The caller's cart with each line's product attached; the empty shape when there is none."""
    cart = current_domain.repository_for(Cart).for_user(user_id)
    if cart is None:
        return CartResponse(id="", user_id=None, items=[])

    products = current_domain.repository_for(Product)
    items = []
    for item in sorted(cart.items, key=lambda i: i.added_at or cart.created_at):
        product = products.find(item.product_id)
        items.append(
            CartItemResponse(
                id=str(item.id),
                product_id=str(item.product_id),
                variant_sku=item.variant_sku,
                quantity=item.quantity,
                product=ProductResponse.from_domain(product) if product else None,
            )
        )
    return CartResponse(id=str(cart.id), user_id=str(cart.user_id), items=items, updated_at=cart.updated_at)


def _load_order(order_id) -> Order:
    order = current_domain.repository_for(Order).find(order_id)
    if order is None:
        raise ObjectNotFoundError("Order not found")
    return order


# --- Cart endpoints ---


@cart_router.get("", response_model=Envelope[CartResponse])
async def get_cart(principal: CurrentUser):
    return Envelope(data=_cart_view(principal.user_id))


@cart_router.post("", response_model=Envelope[CartResponse])
async def add_to_cart(body: CartLineRequest, principal: CurrentUser):
    command = AddToCart(
        user_id=principal.user_id,
        product_id=body.product_id,
        variant_sku=body.variant_sku,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(data=_cart_view(principal.user_id))


@cart_router.delete("", response_model=Envelope[CartResponse])
async def clear_cart(principal: CurrentUser):
    current_domain.process(ClearCart(user_id=principal.user_id), asynchronous=False)
    return Envelope(data=_cart_view(principal.user_id))


@cart_router.patch("/items/{item_id}", response_model=Envelope[CartResponse])
async def update_cart_item(item_id: str, body: UpdateCartItemRequest, principal: CurrentUser):
    command = UpdateCartItem(user_id=principal.user_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return Envelope(data=_cart_view(principal.user_id))


@cart_router.delete("/items/{item_id}", response_model=Envelope[CartResponse])
async def remove_cart_item(item_id: str, principal: CurrentUser):
    current_domain.process(RemoveCartItem(user_id=principal.user_id, item_id=item_id), asynchronous=False)
    return Envelope(data=_cart_view(principal.user_id))


@cart_router.post("/merge", response_model=Envelope[CartResponse])
async def merge_cart(body: MergeCartRequest, principal: CurrentUser):
    """Fold the anonymous client cart into the caller's cart. Safe to retry."""
    command = MergeCart(
        user_id=principal.user_id,
        items=json.dumps([line.model_dump() for line in body.items]),
        merge_key=body.merge_key,
        session_id=principal.session_id,
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(data=_cart_view(principal.user_id))


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=Envelope[OrderResponse])
async def place_order(body: PlaceOrderRequest, principal: CurrentUser):
    command = PlaceOrder(
        user_id=principal.user_id,
        items=json.dumps([line.model_dump() for line in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return Envelope(data=OrderResponse.from_domain(_load_order(order_id)))


@order_router.get("", response_model=Envelope[list[OrderResponse]])
async def list_my_orders(principal: CurrentUser):
    orders = current_domain.repository_for(Order).for_user(principal.user_id)
    return Envelope(data=[OrderResponse.from_domain(o) for o in orders])


@order_router.get("/{order_id}", response_model=Envelope[OrderResponse])
async def get_order(order_id: str, principal: CurrentUser):
    order = _load_order(order_id)
    if not (principal.is_admin or order.is_owned_by(principal.user_id)):
        raise AccessDenied()
    return Envelope(data=OrderResponse.from_domain(order))


@order_router.patch("/{order_id}", response_model=Envelope[OrderResponse])
async def update_order(order_id: str, body: UpdateOrderRequest, admin: AdminUser):
    command = UpdateOrderStatus(
        order_id=order_id,
        order_status=body.order_status,
        payment_status=body.payment_status,
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(data=OrderResponse.from_domain(_load_order(order_id)))


# --- Admin order endpoints ---


@admin_order_router.get("", response_model=Envelope[list[OrderResponse]])
async def admin_list_orders(admin: AdminUser, status: OrderStatusName | None = None):
    orders = current_domain.repository_for(Order).newest_first(order_status=status)
    return Envelope(data=[OrderResponse.from_domain(o) for o in orders])
