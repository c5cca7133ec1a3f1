"""Sign-in and credential management: commands, handler and the admin login check."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.security import hash_password, verify_password
from storefront.identity.user.user import Role, User, normalize_email

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


@storefront.command(part_of="User")
class SignInWithProvider:
    """A verified identity handed over by the identity-provider integration."""

    email: String(required=True, max_length=254)
    name: String(max_length=255)
    image: String(max_length=500)


@storefront.command(part_of="User")
class UpdateAdminProfile:
    user_id: Identifier(required=True)
    current_password: String(max_length=255)
    new_email: String(max_length=254)
    new_password: String(max_length=255)


@storefront.command(part_of="User")
class ProvisionAdmin:
    email: String(required=True, max_length=254)
    password: String(max_length=255)
    name: String(max_length=255, default="Admin")


def authenticate_admin(email: str, password: str) -> User | None:
    """The admin account matching these credentials, or None."""
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None or not user.is_admin:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


@storefront.command_handler(part_of=User)
class AuthenticationHandler:
    @handle(SignInWithProvider)
    def sign_in_with_provider(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            user = User.register(name=command.name, email=command.email, image=command.image)
            repo.add(user)
            logger.info("Customer registered", user_id=str(user.id))
        return str(user.id)

    @handle(UpdateAdminProfile)
    def update_admin_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find(command.user_id)
        if user is None:
            raise ObjectNotFoundError("User not found")

        new_email = normalize_email(command.new_email) if command.new_email else None
        new_password = command.new_password or None

        if not new_email and not new_password:
            raise ValidationError({"profile": ["Provide email and/or newPassword to update"]})
        if new_password and len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                {"new_password": [f"New password must be at least {MIN_PASSWORD_LENGTH} characters"]}
            )
        if not command.current_password:
            raise ValidationError({"current_password": ["Current password is required"]})
        if not verify_password(command.current_password, user.password_hash):
            raise ValidationError({"current_password": ["Current password is incorrect"]})

        if new_email and new_email != user.email:
            other = repo.find_by_email(new_email)
            if other is not None and str(other.id) != str(user.id):
                raise ValidationError({"email": ["Email is already in use"]})

        user.change_credentials(
            email=new_email,
            password_hash=hash_password(new_password) if new_password else None,
        )
        repo.add(user)
        return str(user.id)

    @handle(ProvisionAdmin)
    def provision_admin(self, command):
        repo = current_domain.repository_for(User)
        password_hash = hash_password(command.password) if command.password else None

        user = repo.find_by_email(command.email)
        if user is None:
            user = User.register(
                name=command.name,
                email=command.email,
                role=Role.ADMIN.value,
                password_hash=password_hash,
            )
        else:
            user.grant_admin(password_hash=password_hash)
        repo.add(user)

        logger.info("Admin provisioned", user_id=str(user.id), password_set=bool(password_hash))
        return str(user.id)
