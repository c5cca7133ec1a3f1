"""Human-readable order numbers: a prefix plus eight unambiguous characters."""

import secrets
import time

ORDER_NUMBER_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 8
RANDOM_ATTEMPTS = 5

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def random_code(choice=secrets.choice) -> str:
    return "".join(choice(ORDER_NUMBER_ALPHABET) for _ in range(CODE_LENGTH))


def timestamp_code(millis: int) -> str:
    """Last eight base-36 digits of a millisecond timestamp."""
    digits = ""
    value = max(int(millis), 0)
    while value:
        value, remainder = divmod(value, 36)
        digits = _BASE36[remainder] + digits
    return digits.rjust(CODE_LENGTH, "0")[-CODE_LENGTH:]


def generate_order_number(is_taken, prefix="ALN-", choice=secrets.choice, clock=time.time) -> str:
    """Draw random codes until one is free; after a few collisions fall back to the clock.

    The fallback walks forward one millisecond at a time, so it always ends on
    a number `is_taken` has not seen.
    """
    for _ in range(RANDOM_ATTEMPTS):
        candidate = f"{prefix}{random_code(choice)}"
        if not is_taken(candidate):
            return candidate

    millis = int(clock() * 1000)
    while True:
        candidate = f"{prefix}{timestamp_code(millis)}"
        if not is_taken(candidate):
            return candidate
        millis += 1
