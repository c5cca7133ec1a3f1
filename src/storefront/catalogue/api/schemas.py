"""Pydantic request/response schemas for the catalogue API.

These are external contracts (anti-corruption layer), separate from the
internal protean commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from storefront.web.envelope import ApiModel

ProductStatusName = Literal["DRAFT", "ACTIVE", "ARCHIVED", "OUT_OF_STOCK"]


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ImageSchema(ApiModel):
    url: str = Field(min_length=1, max_length=500)
    alt: str | None = None
    display_order: int = 0


class VariantSchema(ApiModel):
    variant_sku: str = Field(alias="variantSKU", min_length=1, max_length=100)
    size: str | None = None
    color: str | None = None
    stock: int = Field(ge=0, default=0)


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------
class ProductResponse(ApiModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    price: float
    sale_price: float | None = None
    material: str | None = None
    rating: float | None = None
    sku: str | None = None
    status: str
    category_id: str | None = None
    images: list[ImageSchema] = []
    variants: list[VariantSchema] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            name=product.name,
            slug=product.slug,
            description=product.description,
            price=product.price,
            sale_price=product.sale_price,
            material=product.material,
            rating=product.rating,
            sku=product.sku,
            status=product.status,
            category_id=str(product.category_id) if product.category_id else None,
            images=[
                ImageSchema(url=i.url, alt=i.alt, display_order=i.display_order or 0)
                for i in sorted(product.images, key=lambda i: i.display_order or 0)
            ],
            variants=[
                VariantSchema(variant_sku=v.variant_sku, size=v.size, color=v.color, stock=v.stock or 0)
                for v in product.variants
            ],
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class CreateProductRequest(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: float = Field(ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    material: str | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    sku: str | None = None
    status: ProductStatusName = "DRAFT"
    category_id: str | None = None
    images: list[ImageSchema] = []
    variants: list[VariantSchema] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Embroidered Lawn Kurta",
                    "price": 4500,
                    "salePrice": 3900,
                    "status": "ACTIVE",
                    "variants": [{"variantSKU": "KRT-RED-M", "size": "M", "color": "Red", "stock": 12}],
                }
            ]
        }
    }


class UpdateProductRequest(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    material: str | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    sku: str | None = None
    status: ProductStatusName | None = None
    category_id: str | None = None
    images: list[ImageSchema] | None = None
    variants: list[VariantSchema] | None = None


class DeletedResponse(ApiModel):
    id: str
    deleted: bool = True


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------
class CollectionResponse(ApiModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    display_order: int = 0
    product_ids: list[str] = []
    product_count: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, collection, product_count=None) -> "CollectionResponse":
        return cls(
            id=str(collection.id),
            name=collection.name,
            slug=collection.slug,
            description=collection.description,
            image=collection.image,
            display_order=collection.display_order or 0,
            product_ids=collection.product_id_list,
            product_count=product_count,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )


class CollectionDetailResponse(CollectionResponse):
    products: list[ProductResponse] = []


class CreateCollectionRequest(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=200)
    description: str | None = None
    image: str | None = None
    display_order: int = 0
    product_ids: list[str] = []


class UpdateCollectionRequest(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    image: str | None = None
    display_order: int | None = None
    product_ids: list[str] | None = None
