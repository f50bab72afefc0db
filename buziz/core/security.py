# buziz/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from fastapi.security import HTTPBearer
from jose import JWTError, jwt

from buziz.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject)}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> Optional[str]:
    """
    Decode a bearer token issued by the identity provider.

    Returns:
        The user id carried in ``sub``, or None if the token is invalid
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")
