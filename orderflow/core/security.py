from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from orderflow.core.settings import AppSettings, get_app_settings

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password using bcrypt."""
    return _pwd_context.verify(plain_password, hashed_password)


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return _pwd_context.hash(password)


def _create_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta],
    token_type: str,
    settings: AppSettings,
) -> str:
    to_encode = data.copy()
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire, "iat": now, "type": token_type})
    encoded_jwt = jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt


# PUBLIC_INTERFACE
def create_access_token(
    subject: str,
    email: str,
    expires_minutes: Optional[int] = None,
    settings: Optional[AppSettings] = None,
) -> str:
    """Create a signed access token with subject (user id) and email claims."""
    settings = settings or get_app_settings()
    exp = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: Dict[str, Any] = {"sub": subject, "email": email}
    return _create_token(payload, exp, ACCESS_TOKEN, settings)


# PUBLIC_INTERFACE
def create_refresh_token(
    subject: str,
    expires_minutes: Optional[int] = None,
    settings: Optional[AppSettings] = None,
) -> str:
    """Create a signed refresh token carrying only the subject."""
    settings = settings or get_app_settings()
    exp = timedelta(minutes=expires_minutes or settings.REFRESH_TOKEN_EXPIRE_MINUTES)
    return _create_token({"sub": subject}, exp, REFRESH_TOKEN, settings)


# PUBLIC_INTERFACE
def decode_token(token: str, settings: Optional[AppSettings] = None) -> Dict[str, Any]:
    """Decode and validate a JWT; raises JWTError if invalid/expired."""
    settings = settings or get_app_settings()
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


# PUBLIC_INTERFACE
def get_token_subject(
    token: str,
    token_type: str = ACCESS_TOKEN,
    settings: Optional[AppSettings] = None,
) -> Optional[str]:
    """Return 'sub' from a token of the given type, or None when the token is invalid."""
    try:
        payload = decode_token(token, settings)
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload.get("sub")
