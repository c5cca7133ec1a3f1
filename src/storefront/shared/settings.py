"""Business settings read from the `[custom]` section of domain.toml."""

from protean.utils.globals import current_domain

DEFAULTS = {
    "SHIPPING_FEE": 500,
    "ORDER_NUMBER_PREFIX": "ALN-",
    "SESSION_TTL_DAYS": 30,
    "IDENTITY_PROVIDER_SECRET": "",
    "QUERY_LIMIT": 1000,
}


def setting(name: str):
    custom = current_domain.config.get("custom") or {}
    value = custom.get(name)
    return DEFAULTS[name] if value in (None, "") else value


def shipping_fee() -> float:
    return float(setting("SHIPPING_FEE"))


def query_limit() -> int:
    return int(setting("QUERY_LIMIT"))
