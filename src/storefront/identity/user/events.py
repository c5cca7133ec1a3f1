"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """An account was created, either from a provider sign-in or by seeding an admin."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class AdminCredentialsChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    password_changed: Boolean(default=False)
