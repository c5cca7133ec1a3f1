"""Product administration: commands and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.shared.slugs import slugify, unique_slug

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(max_length=200)
    description: Text()
    price: Float(required=True, min_value=0.0)
    sale_price: Float(min_value=0.0)
    material: String(max_length=100)
    rating: Float(min_value=0.0, max_value=5.0)
    sku: String(max_length=100)
    status: String(max_length=20)
    category_id: Identifier()
    images: Text()  # JSON array of {url, alt, display_order}
    variants: Text()  # JSON array of {variant_sku, size, color, stock}


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    changes: Text(required=True)  # JSON object of the fields being edited


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def load_product(product_id) -> Product:
    product = current_domain.repository_for(Product).find(product_id)
    if product is None:
        raise ObjectNotFoundError("Product not found")
    return product


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)

        base = slugify(command.slug or command.name)
        if not base:
            raise ValidationError({"slug": ["Slug is required"]})
        slug = unique_slug(base, repo.slug_taken)

        product = Product.create(
            name=command.name,
            slug=slug,
            price=command.price,
            description=command.description,
            sale_price=command.sale_price,
            material=command.material,
            rating=command.rating,
            sku=command.sku,
            status=command.status,
            category_id=command.category_id,
            images=json.loads(command.images) if command.images else [],
            variants=json.loads(command.variants) if command.variants else [],
        )
        repo.add(product)

        logger.info("Product created", product_id=str(product.id), slug=slug)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = load_product(command.product_id)

        changes = json.loads(command.changes)
        slug = changes.get("slug")
        if slug is not None and slug != product.slug and repo.slug_taken(slug, exclude_id=product.id):
            raise ValidationError({"slug": ["Slug already in use"]})

        product.update_details(**changes)
        repo.add(product)
        return str(product.id)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = load_product(command.product_id)
        repo.remove(product)

        logger.info("Product deleted", product_id=str(command.product_id))
