"""User aggregate: customers signed in through the identity provider, and admins."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from storefront.domain import storefront
from storefront.identity.user.events import AdminCredentialsChanged, UserRegistered


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@storefront.aggregate
class User:
    """A storefront account.

    Customers never carry a password hash; only credential-based admin
    accounts do.
    """

    name: String(required=True, max_length=255)
    email: String(required=True, max_length=254, unique=True)
    image: String(max_length=500)
    role: String(choices=Role, default=Role.CUSTOMER.value)
    password_hash: String(max_length=255)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        email = self.email or ""
        local_part, _, domain_part = email.partition("@")
        if (
            " " in email
            or email.count("@") != 1
            or not local_part
            or "." not in domain_part
            or domain_part.startswith(".")
            or domain_part.endswith(".")
            or ".." in email
        ):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

    @classmethod
    def register(cls, name, email, image=None, role=Role.CUSTOMER.value, password_hash=None):
        now = datetime.now(UTC)
        user = cls(
            name=name or "User",
            email=normalize_email(email),
            image=image,
            role=role,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def grant_admin(self, password_hash=None):
        """Used by seeding: make this account an admin, optionally with a new password."""
        self.role = Role.ADMIN.value
        if password_hash:
            self.password_hash = password_hash
        self.updated_at = datetime.now(UTC)

    def change_credentials(self, email=None, password_hash=None):
        if not self.is_admin:
            raise ValidationError({"role": ["Only admin accounts have credentials"]})

        if email:
            self.email = normalize_email(email)
        if password_hash:
            self.password_hash = password_hash
        self.updated_at = datetime.now(UTC)

        self.raise_(
            AdminCredentialsChanged(
                user_id=self.id,
                email=self.email,
                password_changed=bool(password_hash),
            )
        )
