"""Product aggregate root with embedded ProductVariant and ProductImage entities."""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.slugs import validate_slug
from storefront.shared.stock import ensure_available


class ProductStatus(Enum):
    """Enumeration of product lifecycle statuses."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    OUT_OF_STOCK = "OUT_OF_STOCK"


@storefront.entity(part_of="Product")
class ProductVariant:
    """A purchasable size/color combination, addressed by its variant SKU."""

    size: String(max_length=50)
    color: String(max_length=50)
    stock: Integer(min_value=0, default=0)
    variant_sku: String(required=True, max_length=100)


@storefront.entity(part_of="Product")
class ProductImage:
    url: String(required=True, max_length=500)
    alt: String(max_length=255)
    display_order: Integer(default=0)


@storefront.aggregate
class Product:
    """Product aggregate root.

    Variants live inside the product, so every stock change goes through the
    aggregate and is persisted together with whatever else the Unit of Work
    touched.
    """

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200, unique=True)
    description: Text()
    price: Float(required=True, min_value=0.0)
    sale_price: Float(min_value=0.0)
    material: String(max_length=100)
    rating: Float(min_value=0.0, max_value=5.0, default=0.0)
    sku: String(max_length=100)
    status: String(choices=ProductStatus, default=ProductStatus.DRAFT.value)
    category_id: Identifier()
    images: HasMany(ProductImage)
    variants: HasMany(ProductVariant)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        validate_slug(self.slug)

    @invariant.post
    def variant_skus_must_be_unique(self):
        skus = [v.variant_sku for v in self.variants]
        duplicates = sorted({sku for sku in skus if skus.count(sku) > 1})
        if duplicates:
            raise ValidationError({"variants": [f"Duplicate variant SKU: {', '.join(duplicates)}"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        slug,
        price,
        description=None,
        sale_price=None,
        material=None,
        rating=None,
        sku=None,
        status=None,
        category_id=None,
        images=None,
        variants=None,
    ):
        from storefront.catalogue.product.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug,
            price=price,
            description=description,
            sale_price=sale_price,
            material=material,
            rating=rating if rating is not None else 0.0,
            sku=sku,
            status=status or ProductStatus.DRAFT.value,
            category_id=category_id,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(product):
            product.replace_images(images or [])
            product.set_variants(variants or [])

        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                slug=product.slug,
                status=product.status,
                price=product.price,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value

    @property
    def unit_price(self) -> float:
        """The price a buyer pays right now: the sale price when one is set."""
        return self.sale_price if self.sale_price is not None else self.price

    def find_variant(self, variant_sku):
        return next((v for v in self.variants if v.variant_sku == variant_sku), None)

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        """Apply a partial edit. `images` and `variants` replace the current lists."""
        from storefront.catalogue.product.events import ProductDetailsUpdated

        images = changes.pop("images", None)
        variants = changes.pop("variants", None)

        with atomic_change(self):
            for field_name, value in changes.items():
                setattr(self, field_name, value)
            if images is not None:
                self.replace_images(images)
            if variants is not None:
                self.set_variants(variants)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                slug=self.slug,
                status=self.status,
                price=self.price,
                sale_price=self.sale_price,
            )
        )

    def replace_images(self, images):
        for image in list(self.images):
            self.remove_images(image)
        for position, image in enumerate(images):
            self.add_images(
                ProductImage(
                    url=image["url"],
                    alt=image.get("alt"),
                    display_order=image.get("display_order", position),
                )
            )

    def set_variants(self, variants):
        """Reconcile variants by SKU: update matches in place, add new ones, drop the rest."""
        wanted = [v["variant_sku"] for v in variants]
        if len(wanted) != len(set(wanted)):
            duplicates = sorted({sku for sku in wanted if wanted.count(sku) > 1})
            raise ValidationError({"variants": [f"Duplicate variant SKU: {', '.join(duplicates)}"]})

        for existing in list(self.variants):
            if existing.variant_sku not in wanted:
                self.remove_variants(existing)

        for entry in variants:
            existing = self.find_variant(entry["variant_sku"])
            if existing is not None:
                existing.size = entry.get("size")
                existing.color = entry.get("color")
                existing.stock = entry.get("stock", 0)
            else:
                self.add_variants(
                    ProductVariant(
                        variant_sku=entry["variant_sku"],
                        size=entry.get("size"),
                        color=entry.get("color"),
                        stock=entry.get("stock", 0),
                    )
                )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def reserve_stock(self, variant_sku, quantity):
        """Take `quantity` units out of a variant, only while that many are on hand."""
        from storefront.catalogue.product.events import StockReserved

        variant = self.find_variant(variant_sku)
        if variant is None:
            raise ValidationError({"variant_sku": [f"Variant not found: {variant_sku}"]})

        ensure_available(variant_sku, quantity, variant.stock)

        variant.stock -= quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockReserved(
                product_id=self.id,
                variant_sku=variant_sku,
                quantity=quantity,
                remaining_stock=variant.stock,
            )
        )
