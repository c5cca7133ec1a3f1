"""Collection administration: commands and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.collection.collection import Collection
from storefront.domain import storefront
from storefront.shared.slugs import slugify


@storefront.command(part_of="Collection")
class CreateCollection:
    name: String(required=True, max_length=255)
    slug: String(max_length=200)
    description: Text()
    image: String(max_length=500)
    display_order: Integer(default=0)
    product_ids: Text()  # JSON array


@storefront.command(part_of="Collection")
class UpdateCollection:
    collection_id: Identifier(required=True)
    changes: Text(required=True)  # JSON object


@storefront.command(part_of="Collection")
class DeleteCollection:
    collection_id: Identifier(required=True)


def load_collection(collection_id) -> Collection:
    collection = current_domain.repository_for(Collection).find(collection_id)
    if collection is None:
        raise ObjectNotFoundError("Collection not found")
    return collection


@storefront.command_handler(part_of=Collection)
class ManageCollectionsHandler:
    @handle(CreateCollection)
    def create_collection(self, command):
        repo = current_domain.repository_for(Collection)

        slug = slugify(command.slug or command.name)
        if repo.slug_taken(slug):
            raise ValidationError({"slug": ["Slug already in use"]})

        collection = Collection.create(
            name=command.name,
            slug=slug,
            description=command.description,
            image=command.image,
            display_order=command.display_order,
            product_ids=json.loads(command.product_ids) if command.product_ids else [],
        )
        repo.add(collection)
        return str(collection.id)

    @handle(UpdateCollection)
    def update_collection(self, command):
        repo = current_domain.repository_for(Collection)
        collection = load_collection(command.collection_id)

        changes = json.loads(command.changes)
        slug = changes.get("slug")
        if slug is not None and slug != collection.slug and repo.slug_taken(slug, exclude_id=collection.id):
            raise ValidationError({"slug": ["Slug already in use"]})

        collection.update_details(**changes)
        repo.add(collection)
        return str(collection.id)

    @handle(DeleteCollection)
    def delete_collection(self, command):
        repo = current_domain.repository_for(Collection)
        repo.remove(load_collection(command.collection_id))
