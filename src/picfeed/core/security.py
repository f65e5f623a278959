"""Account validation and password hashing helpers."""
from __future__ import annotations

import hashlib
import re
import secrets

_ACCOUNT_NAME_RE = re.compile(r"\A[0-9a-zA-Z_]{3,}\Z")
_PASSWORD_RE = re.compile(r"\A[0-9a-zA-Z_]{6,}\Z")


def validate_user(account_name: str, password: str) -> bool:
    """Return True if the account name and password satisfy the format rules.

    Account names need at least 3 and passwords at least 6 characters drawn
    from ASCII letters, digits and underscore.
    """
    return bool(_ACCOUNT_NAME_RE.match(account_name)) and bool(_PASSWORD_RE.match(password))


def digest(src: str) -> str:
    """Return the hex SHA-512 digest of ``src``."""
    return hashlib.sha512(src.encode("utf-8")).hexdigest()


def calculate_salt(account_name: str) -> str:
    return digest(account_name)


def calculate_passhash(account_name: str, password: str) -> str:
    """Return the salted one-way hash stored for an account."""
    return digest(f"{password}:{calculate_salt(account_name)}")


def verify_password(account_name: str, password: str, passhash: str) -> bool:
    """Compare a candidate password against a stored hash in constant time."""
    return secrets.compare_digest(calculate_passhash(account_name, password), passhash)


def secure_random_str(num_bytes: int = 16) -> str:
    """Return ``num_bytes`` of randomness encoded as hex."""
    return secrets.token_hex(num_bytes)
