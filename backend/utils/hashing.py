# backend/utils/hashing.py
from passlib.context import CryptContext

# Unsalted SHA-256 hex digests, compatible with accounts created by the
# previous storefront.
pwd_context = CryptContext(schemes=["hex_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognised hash
        return False
