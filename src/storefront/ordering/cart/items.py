"""Cart item management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.cart.cart import Cart


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_sku = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class RemoveCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).find_active(command.product_id)
        if product is None:
            raise ObjectNotFoundError("Product not found or inactive")

        variant = product.find_variant(command.variant_sku)
        if variant is None:
            raise ObjectNotFoundError("Variant not found")

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user_or_new(command.user_id)
        cart.add_item(
            product_id=str(product.id),
            variant_sku=variant.variant_sku,
            quantity=command.quantity,
            available_stock=variant.stock,
        )
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        item = cart.find_item(command.item_id) if cart else None
        if item is None:
            raise ObjectNotFoundError("Cart item not found")

        product = current_domain.repository_for(Product).find(item.product_id)
        variant = product.find_variant(item.variant_sku) if product else None

        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.quantity,
            available_stock=variant.stock if variant else None,
        )
        repo.add(cart)
        return str(cart.id)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            return None

        if cart.remove_item(command.item_id):
            repo.add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            return None

        cart.clear()
        repo.add(cart)
        return str(cart.id)
