"""Errors raised by the domain that protean has no equivalent for."""


class AccessDenied(Exception):
    """The caller is authenticated but may not act on this resource."""
