"""
Secrets, password hashing and key comparison
"""

from passlib.context import CryptContext
from typing import Optional
import secrets

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Verified against when no real hash exists so a missing subdomain costs
# the same as a wrong password.
_DUMMY_HASH = pwd_context.hash(secrets.token_hex(16))


def generate_api_key() -> str:
    """256-bit hex API key"""
    return secrets.token_hex(32)


def generate_session_token() -> str:
    """256-bit hex session token"""
    return secrets.token_hex(32)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Constant-time password check; always performs a full hash verification"""
    if password_hash is None:
        pwd_context.verify(password, _DUMMY_HASH)
        return False
    return pwd_context.verify(password, password_hash)


def keys_match(supplied: Optional[str], expected: str) -> bool:
    if not supplied:
        return False
    return secrets.compare_digest(supplied.encode(), expected.encode())
