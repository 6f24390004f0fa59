from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .errors import Unauthenticated
from .models import CurrentUser
from .settings import settings

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Sign a token for the given claims.

    The API never issues tokens itself; this is used by tests and local tooling.
    """
    to_encode = data.copy()
    if "sub" in to_encode:
        # RFC 7519 requires a string subject
        to_encode["sub"] = str(to_encode["sub"])
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise Unauthenticated("Invalid or expired token")

    subject = payload.get("sub")
    if subject is None:
        raise Unauthenticated("Could not validate credentials")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise Unauthenticated("Could not validate credentials")

    return CurrentUser(id=user_id, email=payload.get("email"))


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> CurrentUser:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated("Authentication token missing or malformed")
    return decode_access_token(credentials.credentials)
