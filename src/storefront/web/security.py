"""Request authentication: session tokens resolved into a Principal."""

import hmac
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException
from protean.utils.globals import current_domain

from storefront.identity.security import read_session_token
from storefront.identity.user.user import Role, User
from storefront.shared.settings import setting


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str
    email: str
    name: str
    session_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def optional_user(authorization: Annotated[str | None, Header()] = None) -> Principal | None:
    """The signed-in caller, or None for anonymous and unverifiable requests."""
    token = _bearer_token(authorization)
    if token is None:
        return None

    claims = read_session_token(token)
    if claims is None:
        return None

    user = current_domain.repository_for(User).find(claims["sub"])
    if user is None:
        return None

    # Admin rights only come with an admin session; other roles follow the account
    role = claims.get("role") if user.is_admin else user.role
    return Principal(
        user_id=str(user.id),
        role=role or Role.CUSTOMER.value,
        email=user.email,
        name=user.name,
        session_id=claims.get("jti"),
    )


async def current_user(principal: Annotated[Principal | None, Depends(optional_user)]) -> Principal:
    if principal is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return principal


async def require_admin(principal: Annotated[Principal, Depends(current_user)]) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
    return principal


async def require_identity_provider(
    x_identity_provider_secret: Annotated[str | None, Header()] = None,
) -> None:
    expected = str(setting("IDENTITY_PROVIDER_SECRET") or "")
    supplied = x_identity_provider_secret or ""
    if not expected or not hmac.compare_digest(expected.encode(), supplied.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")


CurrentUser = Annotated[Principal, Depends(current_user)]
OptionalUser = Annotated[Principal | None, Depends(optional_user)]
AdminUser = Annotated[Principal, Depends(require_admin)]
