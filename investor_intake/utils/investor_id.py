"""Investor ID generation"""
import secrets
import string
import time
from typing import Optional

ALPHABET = string.digits + string.ascii_uppercase
RANDOM_LENGTH = 10
PREFIX = "INV"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(ALPHABET[rem])
    return "".join(reversed(digits))


def generate_investor_id(now_ms: Optional[int] = None) -> str:
    """
    Generate an opaque investor ID, e.g. ``INV-MGX2K1QZ-7F3KD0A9QW``.

    The millisecond timestamp keeps IDs roughly ordered; the random part
    (about 51 bits from ``secrets``) keeps IDs issued in the same millisecond
    apart.

    Args:
        now_ms: Override for the current time in milliseconds

    Returns:
        Printable upper-case ID
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    random_part = "".join(secrets.choice(ALPHABET) for _ in range(RANDOM_LENGTH))
    return f"{PREFIX}-{_base36(now_ms)}-{random_part}"
