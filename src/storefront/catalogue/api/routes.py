"""FastAPI endpoints for the catalogue: products and collections."""

import json

from fastapi import APIRouter
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    CollectionDetailResponse,
    CollectionResponse,
    CreateCollectionRequest,
    CreateProductRequest,
    DeletedResponse,
    ProductResponse,
    UpdateCollectionRequest,
    UpdateProductRequest,
)
from storefront.catalogue.collection.collection import Collection
from storefront.catalogue.collection.management import (
    CreateCollection,
    DeleteCollection,
    UpdateCollection,
    load_collection,
)
from storefront.catalogue.product.management import CreateProduct, DeleteProduct, UpdateProduct, load_product
from storefront.catalogue.product.product import Product
from storefront.web.envelope import Envelope
from storefront.web.security import AdminUser, OptionalUser

product_router = APIRouter(prefix="/products", tags=["products"])
collection_router = APIRouter(prefix="/collections", tags=["collections"])
admin_collection_router = APIRouter(prefix="/admin/collections", tags=["admin"])


def _products_in(collection, active_only=True) -> list[Product]:
    repo = current_domain.repository_for(Product)
    products = [repo.find(pid) for pid in collection.product_id_list]
    return [p for p in products if p is not None and (p.is_active or not active_only)]


# --- Product endpoints ---


@product_router.get("", response_model=Envelope[list[ProductResponse]])
async def list_products(
    principal: OptionalUser,
    q: str | None = None,
    slug: str | None = None,
    ids: str | None = None,
):
    """Newest first. Only ACTIVE products unless the caller is an admin."""
    id_list = [i.strip() for i in ids.split(",") if i.strip()] if ids else None
    products = current_domain.repository_for(Product).search(
        q=q,
        slug=slug,
        ids=id_list,
        active_only=not (principal and principal.is_admin),
    )
    return Envelope(data=[ProductResponse.from_domain(p) for p in products])


@product_router.get("/{product_id}", response_model=Envelope[ProductResponse])
async def get_product(product_id: str, principal: OptionalUser):
    product = current_domain.repository_for(Product).find(product_id)
    if product is None or not (product.is_active or (principal and principal.is_admin)):
        raise ObjectNotFoundError("Product not found")
    return Envelope(data=ProductResponse.from_domain(product))


@product_router.post("", status_code=201, response_model=Envelope[ProductResponse])
async def create_product(body: CreateProductRequest, admin: AdminUser):
    command = CreateProduct(
        name=body.name,
        slug=body.slug,
        description=body.description,
        price=body.price,
        sale_price=body.sale_price,
        material=body.material,
        rating=body.rating,
        sku=body.sku,
        status=body.status,
        category_id=body.category_id,
        images=json.dumps([i.model_dump() for i in body.images]),
        variants=json.dumps([v.model_dump() for v in body.variants]),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return Envelope(data=ProductResponse.from_domain(load_product(product_id)))


@product_router.patch("/{product_id}", response_model=Envelope[ProductResponse])
async def update_product(product_id: str, body: UpdateProductRequest, admin: AdminUser):
    command = UpdateProduct(
        product_id=product_id,
        changes=json.dumps(body.model_dump(exclude_unset=True)),
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(data=ProductResponse.from_domain(load_product(product_id)))


@product_router.delete("/{product_id}", response_model=Envelope[DeletedResponse])
async def delete_product(product_id: str, admin: AdminUser):
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return Envelope(data=DeletedResponse(id=product_id))


# --- Public collection endpoints ---


@collection_router.get("", response_model=Envelope[list[CollectionResponse]])
async def list_collections():
    """Collections in display order, each counting only its ACTIVE products."""
    collections = current_domain.repository_for(Collection).in_display_order()
    return Envelope(
        data=[CollectionResponse.from_domain(c, product_count=len(_products_in(c))) for c in collections]
    )


@collection_router.get("/{slug}", response_model=Envelope[CollectionDetailResponse])
async def get_collection(slug: str):
    collection = current_domain.repository_for(Collection).find_by_slug(slug)
    if collection is None:
        raise ObjectNotFoundError("Collection not found")

    products = _products_in(collection)
    summary = CollectionResponse.from_domain(collection, product_count=len(products))
    return Envelope(
        data=CollectionDetailResponse(
            **summary.model_dump(),
            products=[ProductResponse.from_domain(p) for p in products],
        )
    )


# --- Admin collection endpoints ---


@admin_collection_router.get("", response_model=Envelope[list[CollectionResponse]])
async def admin_list_collections(admin: AdminUser):
    collections = current_domain.repository_for(Collection).in_display_order()
    return Envelope(
        data=[CollectionResponse.from_domain(c, product_count=len(c.product_id_list)) for c in collections]
    )


@admin_collection_router.post("", status_code=201, response_model=Envelope[CollectionResponse])
async def admin_create_collection(body: CreateCollectionRequest, admin: AdminUser):
    command = CreateCollection(
        name=body.name,
        slug=body.slug,
        description=body.description,
        image=body.image,
        display_order=body.display_order,
        product_ids=json.dumps(body.product_ids),
    )
    collection_id = current_domain.process(command, asynchronous=False)
    collection = load_collection(collection_id)
    return Envelope(data=CollectionResponse.from_domain(collection, product_count=len(collection.product_id_list)))


@admin_collection_router.get("/{collection_id}", response_model=Envelope[CollectionDetailResponse])
async def admin_get_collection(collection_id: str, admin: AdminUser):
    collection = load_collection(collection_id)
    products = _products_in(collection, active_only=False)
    summary = CollectionResponse.from_domain(collection, product_count=len(collection.product_id_list))
    return Envelope(
        data=CollectionDetailResponse(
            **summary.model_dump(),
            products=[ProductResponse.from_domain(p) for p in products],
        )
    )


@admin_collection_router.patch("/{collection_id}", response_model=Envelope[CollectionResponse])
async def admin_update_collection(collection_id: str, body: UpdateCollectionRequest, admin: AdminUser):
    command = UpdateCollection(
        collection_id=collection_id,
        changes=json.dumps(body.model_dump(exclude_unset=True)),
    )
    current_domain.process(command, asynchronous=False)
    collection = load_collection(collection_id)
    return Envelope(data=CollectionResponse.from_domain(collection, product_count=len(collection.product_id_list)))


@admin_collection_router.delete("/{collection_id}", response_model=Envelope[DeletedResponse])
async def admin_delete_collection(collection_id: str, admin: AdminUser):
    current_domain.process(DeleteCollection(collection_id=collection_id), asynchronous=False)
    return Envelope(data=DeletedResponse(id=collection_id))
