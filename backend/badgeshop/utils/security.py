import hashlib
import hmac
import time
from typing import Optional

import jwt
from passlib.context import CryptContext

from badgeshop.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ALGORITHM = "HS256"


def create_access_token(user_id: int, role: str, expires_delta: Optional[int] = None) -> str:
    now = int(time.time())
    exp = now + (expires_delta or settings.ACCESS_TOKEN_TTL_SECONDS)
    payload = {"sub": str(user_id), "role": role, "iat": now, "exp": exp, "purpose": "access"}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_reset_token(user_id: int, email: str) -> str:
    now = int(time.time())
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + settings.PASSWORD_RESET_TTL_SECONDS,
        "purpose": "password-reset",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str, purpose: str = "access") -> dict:
    """Raises jwt.PyJWTError for a bad signature, expiry, or a token minted for another purpose."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    if payload.get("purpose") != purpose:
        raise jwt.InvalidTokenError(f"token is not a {purpose} token")
    return payload


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def _verify_legacy_scrypt(password: str, stored: str) -> bool:
    # "salt:hex" written by the previous storefront (scrypt, 64-byte key, N=16384 r=8 p=1)
    salt, _, key = stored.partition(":")
    derived = hashlib.scrypt(password.encode(), salt=salt.encode(), n=16384, r=8, p=1, dklen=64)
    return hmac.compare_digest(derived.hex(), key)


def _verify_legacy_sha256(password: str, stored: str) -> bool:
    # bare unsalted sha256 hex from the oldest accounts
    digest = hashlib.sha256(password.encode()).hexdigest()
    return hmac.compare_digest(digest.encode(), stored.lower().encode())


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    if pwd_context.identify(hashed) is None:
        if ":" in hashed:
            return _verify_legacy_scrypt(plain, hashed)
        return _verify_legacy_sha256(plain, hashed)
    return pwd_context.verify(plain, hashed)
