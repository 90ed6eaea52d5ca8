"""Security utilities.

Re-exports all security-related functions for convenience.
"""

from src.portal.core.security.crypto import (
    TEMPORARY_PASSWORD_ALPHABET,
    generate_temporary_password,
    hash_password,
    verify_password,
)

__all__ = [
    "TEMPORARY_PASSWORD_ALPHABET",
    "generate_temporary_password",
    "hash_password",
    "verify_password",
]
