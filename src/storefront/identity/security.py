"""Password hashing and session tokens."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext
from protean.utils.globals import current_domain

from storefront.shared.settings import setting

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def _signing_key() -> str:
    return current_domain.config["secret_key"]


def issue_session_token(user_id: str, role: str, expires_delta: timedelta | None = None) -> str:
    """Sign a session for the user. Each call starts a new session with its own `jti`."""
    expires_delta = expires_delta or timedelta(days=int(setting("SESSION_TTL_DAYS")))
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "role": role,
        "jti": uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, _signing_key(), algorithm=ALGORITHM)


def read_session_token(token: str) -> dict | None:
    """The token's claims, or None when it is malformed, forged or expired."""
    try:
        payload = jwt.decode(token, _signing_key(), algorithms=[ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
