# jobify/services/auth.py
from datetime import datetime, timedelta, timezone
from typing import Optional
import hashlib
import secrets
from jose import jwt
from pydantic import BaseModel
from jobify.core.config import settings

# PBKDF2-HMAC-SHA256, stored as "pbkdf2_sha256$<iterations>$<salt>$<hex digest>"
_SCHEME = "pbkdf2_sha256"
_PBKDF2_ITERATIONS = 100_000

ALGORITHM = "HS256"

class TokenData(BaseModel):
    sub: Optional[str] = None


def _derive(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations).hex()


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    return "$".join((_SCHEME, str(_PBKDF2_ITERATIONS), salt, _derive(password, salt, _PBKDF2_ITERATIONS)))


def verify_password(plain: str, hashed: str) -> bool:
    """False for a wrong password and for anything that is not one of our hashes."""
    parts = hashed.split("$") if isinstance(hashed, str) else []
    if len(parts) != 4 or parts[0] != _SCHEME or not parts[1].isdigit():
        return False
    _, iterations, salt, expected = parts
    return secrets.compare_digest(_derive(plain, salt, int(iterations)), expected)

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta if expires_delta else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": subject, "iat": now, "exp": exp}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)

def decode_access_token(token: str) -> TokenData:
    """Verify signature and expiry. Raises JWTError on any failure."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    return TokenData(sub=payload.get("sub"))
