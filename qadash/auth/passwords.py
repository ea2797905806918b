# =============================================================================
# Password Hashing
# =============================================================================
#
# New hashes are PBKDF2-SHA256 in "salt:hash" form. Records written by the
# earlier dashboard hold a bare SHA-256 hex digest; those still verify so
# existing data files keep working, and are rehashed at the next successful
# login.
#
# =============================================================================

from __future__ import annotations

import hashlib
import re
import secrets

ITERATIONS = 100_000

_LEGACY_SHA256 = re.compile(r"^[0-9a-f]{64}$")


def hash_password(password: str) -> str:
    """
    Hash a password using PBKDF2-SHA256.

    Returns: salt:hash format string
    """
    salt = secrets.token_hex(32)
    hash_bytes = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=ITERATIONS,
    )
    return f"{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    if _LEGACY_SHA256.match(password_hash or ""):
        digest = hashlib.sha256(password.encode("utf-8")).hexdigest()
        return secrets.compare_digest(digest, password_hash)
    try:
        salt, stored_hash = password_hash.split(":")
        hash_bytes = hashlib.pbkdf2_hmac(
            "sha256",
            password.encode("utf-8"),
            salt.encode("utf-8"),
            iterations=ITERATIONS,
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False


def is_legacy_hash(password_hash: str) -> bool:
    return bool(_LEGACY_SHA256.match(password_hash or ""))
