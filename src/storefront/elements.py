"""Loads every module that registers an element with the storefront domain.

Protean only discovers modules in the domain's own folder and the folders
directly beneath it, while aggregates, handlers and repositories live one
level deeper inside their context packages. This module sits next to
`domain.py`, so `storefront.init()` picks it up and every element is
registered before references are resolved.
"""

# isort: off
import storefront.catalogue.product.product  # noqa: F401
import storefront.catalogue.product.events  # noqa: F401
import storefront.catalogue.product.management  # noqa: F401
import storefront.catalogue.product.repository  # noqa: F401
import storefront.catalogue.collection.collection  # noqa: F401
import storefront.catalogue.collection.events  # noqa: F401
import storefront.catalogue.collection.management  # noqa: F401
import storefront.catalogue.collection.repository  # noqa: F401
import storefront.identity.user.user  # noqa: F401
import storefront.identity.user.events  # noqa: F401
import storefront.identity.user.authentication  # noqa: F401
import storefront.identity.user.repository  # noqa: F401
import storefront.ordering.cart.cart  # noqa: F401
import storefront.ordering.cart.events  # noqa: F401
import storefront.ordering.cart.items  # noqa: F401
import storefront.ordering.cart.merge  # noqa: F401
import storefront.ordering.cart.repository  # noqa: F401
import storefront.ordering.order.order  # noqa: F401
import storefront.ordering.order.events  # noqa: F401
import storefront.ordering.order.placement  # noqa: F401
import storefront.ordering.order.administration  # noqa: F401
import storefront.ordering.order.repository  # noqa: F401
import storefront.payments.payment.payment  # noqa: F401
import storefront.payments.payment.events  # noqa: F401
import storefront.payments.payment.confirmation  # noqa: F401
import storefront.payments.payment.repository  # noqa: F401
# isort: on
