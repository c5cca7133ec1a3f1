"""Application tests for collection administration handlers."""

import json

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.collection.collection import Collection
from storefront.catalogue.collection.management import CreateCollection, DeleteCollection, UpdateCollection


def _create_collection(**overrides):
    defaults = {"name": "Eid Edit", "product_ids": json.dumps(["p-1", "p-2"])}
    defaults.update(overrides)
    return current_domain.process(CreateCollection(**defaults), asynchronous=False)


def test_create_collection():
    collection_id = _create_collection(display_order=3)

    collection = current_domain.repository_for(Collection).find(collection_id)
    assert collection.slug == "eid-edit"
    assert collection.display_order == 3
    assert collection.product_id_list == ["p-1", "p-2"]


def test_create_with_taken_slug_rejected():
    _create_collection()
    with pytest.raises(ValidationError) as exc:
        _create_collection(name="Another", slug="eid-edit")
    assert exc.value.messages["slug"] == ["Slug already in use"]


def test_update_slug_conflict_rejected():
    _create_collection()
    other_id = _create_collection(name="Winter")

    with pytest.raises(ValidationError) as exc:
        current_domain.process(
            UpdateCollection(collection_id=other_id, changes=json.dumps({"slug": "eid-edit"})),
            asynchronous=False,
        )
    assert exc.value.messages["slug"] == ["Slug already in use"]


def test_update_products():
    collection_id = _create_collection()
    current_domain.process(
        UpdateCollection(collection_id=collection_id, changes=json.dumps({"product_ids": ["p-9"]})),
        asynchronous=False,
    )
    assert current_domain.repository_for(Collection).find(collection_id).product_id_list == ["p-9"]


def test_delete_collection():
    collection_id = _create_collection()
    current_domain.process(DeleteCollection(collection_id=collection_id), asynchronous=False)
    assert current_domain.repository_for(Collection).find(collection_id) is None


def test_delete_unknown_collection():
    with pytest.raises(ObjectNotFoundError):
        current_domain.process(DeleteCollection(collection_id="missing"), asynchronous=False)
