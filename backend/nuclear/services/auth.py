"""
Auth service: JWT creation/verification for bearer tokens.
Sign-in happens in the identity provider, which signs tokens with the shared SECRET_KEY;
this API only verifies them. create_access_token mints tokens for tests and dev tooling.
"""
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from nuclear.config import settings


def create_access_token(user_id: str, email: str, mode: str, expires_in: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_in or timedelta(hours=settings.jwt_expire_hours))
    # JWT exp must be numeric (Unix timestamp), not datetime
    payload = {"sub": str(user_id), "email": email, "mode": mode, "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
