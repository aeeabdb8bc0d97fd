from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from golf_league.core.config import settings
from golf_league.core.exceptions import AuthenticationError

# The identity provider puts the role either in a plain claim or in its
# custom attribute namespace.
ROLE_CLAIMS = ("role", "custom:role")


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verifies signature and expiry; returns the claims or raises AuthenticationError."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")
    if not payload.get("sub"):
        raise AuthenticationError("Token has no subject")
    return payload


def role_claim(payload: Dict[str, Any]) -> Optional[str]:
    for claim in ROLE_CLAIMS:
        if payload.get(claim):
            return payload[claim]
    return None
