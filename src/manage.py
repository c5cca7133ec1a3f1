"""Storefront management CLI.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py seed                     # Provision the admin account
    python src/manage.py seed --catalogue data.json

`seed` reads ADMIN_EMAIL and ADMIN_PASSWORD from the environment. The
optional catalogue file is a JSON object with "products" and "collections"
lists, in the same camelCase shape the admin API accepts.
"""

import argparse
import json
import os
import sys

MIN_ADMIN_PASSWORD_LENGTH = 8


def _initialised_domain():
    from storefront.domain import storefront

    print("Initializing storefront domain...")
    storefront.init()
    return storefront


def setup_databases():
    from storefront.utils.db import setup_db

    domain = _initialised_domain()
    print("Creating database schema...")
    setup_db(domain)
    print("Done.")


def drop_databases():
    from storefront.utils.db import drop_db

    domain = _initialised_domain()
    print("Dropping database schema...")
    drop_db(domain)
    print("Done.")


def seed_catalogue(path):
    """Create the products and collections listed in a JSON file.

    Collections may reference products by slug through "productSlugs".
    """
    from protean.utils.globals import current_domain

    from storefront.catalogue.api.schemas import CreateCollectionRequest, CreateProductRequest
    from storefront.catalogue.collection.management import CreateCollection
    from storefront.catalogue.product.management import CreateProduct
    from storefront.catalogue.product.product import Product

    with open(path, encoding="utf-8") as handle:
        payload = json.load(handle)

    for raw in payload.get("products", []):
        body = CreateProductRequest.model_validate(raw)
        product_id = current_domain.process(
            CreateProduct(
                **body.model_dump(exclude={"images", "variants"}),
                images=json.dumps([i.model_dump() for i in body.images]),
                variants=json.dumps([v.model_dump() for v in body.variants]),
            ),
            asynchronous=False,
        )
        print(f"  product {body.name} -> {product_id}")

    products = current_domain.repository_for(Product)
    for raw in payload.get("collections", []):
        slugs = raw.pop("productSlugs", [])
        body = CreateCollectionRequest.model_validate(raw)
        product_ids = list(body.product_ids)
        for slug in slugs:
            product = products.find_by_slug(slug)
            if product is not None:
                product_ids.append(str(product.id))
        collection_id = current_domain.process(
            CreateCollection(
                **body.model_dump(exclude={"product_ids"}),
                product_ids=json.dumps(product_ids),
            ),
            asynchronous=False,
        )
        print(f"  collection {body.name} -> {collection_id}")


def seed(catalogue_path=None):
    from storefront.identity.user.authentication import ProvisionAdmin

    email = os.environ.get("ADMIN_EMAIL", "").strip()
    password = os.environ.get("ADMIN_PASSWORD", "")
    if not email or len(password) < MIN_ADMIN_PASSWORD_LENGTH:
        print(
            f"ADMIN_EMAIL and ADMIN_PASSWORD (at least {MIN_ADMIN_PASSWORD_LENGTH} characters) must be set",
            file=sys.stderr,
        )
        sys.exit(1)

    domain = _initialised_domain()
    with domain.domain_context():
        print("Provisioning admin account...")
        user_id = domain.process(ProvisionAdmin(email=email, password=password), asynchronous=False)
        print(f"  admin {email} -> {user_id}")

        if catalogue_path:
            print(f"Loading catalogue from {catalogue_path}...")
            seed_catalogue(catalogue_path)

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Provision the admin account and optional catalogue")
    seed_parser.add_argument("--catalogue", help="JSON file with products and collections to create")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "seed":
        seed(args.catalogue)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
