"""
Human-shareable reference codes for reservations and payments.
"""

import secrets
import string
import time

_BASE36 = string.digits + string.ascii_uppercase


def _random_chars(alphabet: str, length: int) -> str:
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def generate_confirmation_number(prefix: str = "MH") -> str:
    """Prefix + 6 random base36 characters + last 4 digits of the epoch millis."""
    millis = str(int(time.time() * 1000))
    return f"{prefix}{_random_chars(_BASE36, 6)}{millis[-4:]}"


def generate_transaction_id(prefix: str = "PAY") -> str:
    """Prefix + epoch millis + 4 random uppercase letters."""
    millis = int(time.time() * 1000)
    return f"{prefix}{millis}{_random_chars(string.ascii_uppercase, 4)}"
