"""
Security utilities
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from novel_api.core.config import settings
from novel_api.core.exceptions import Unauthorized


# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Missing credentials are reported as 401 by the dependencies below, not 403
security = HTTPBearer(auto_error=False)

TOKEN_ERROR_MESSAGE = "Token is invalid or expired."


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unknown or malformed hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def _secret_for(token_type: str) -> str:
    if token_type == "refresh":
        return settings.JWT_REFRESH_SECRET_KEY
    return settings.JWT_SECRET_KEY


def _identity(data: dict) -> dict:
    return {k: data[k] for k in ("sub", "username") if k in data}


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Issue an access token"""
    to_encode = _identity(data)
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, _secret_for("access"), algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a refresh token"""
    to_encode = _identity(data)
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire, "type": "refresh"})
    return jwt.encode(to_encode, _secret_for("refresh"), algorithm=settings.JWT_ALGORITHM)


def verify_token(token: Optional[str], token_type: str = "access") -> Optional[dict]:
    """Return the token claims, or None when the token is unusable"""
    if not token:
        return None
    try:
        payload = jwt.decode(token, _secret_for(token_type), algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    if not payload.get("username"):
        return None
    return payload


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Raw bearer token from the Authorization header, if any"""
    if credentials is None:
        return None
    return credentials.credentials


def get_token_claims(token: Optional[str] = Depends(get_bearer_token)) -> dict:
    """Claims of a valid access token; 401 otherwise"""
    payload = verify_token(token, "access")
    if payload is None:
        raise Unauthorized(TOKEN_ERROR_MESSAGE)
    return payload
