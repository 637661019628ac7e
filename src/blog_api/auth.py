# Authentication: resolves the acting user from a bearer token.
# Tokens are issued by the account service; this module only verifies them.
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from blog_api.config import Settings, get_settings
from blog_api.database import get_db
from blog_api.errors import AuthenticationError
from blog_api.models import User
from blog_api.repositories import UserRepository

security = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str, settings: Settings, expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {"sub": user_id, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def verify_token(token: str, settings: Settings, token_type: str = "access") -> Optional[str]:
    """Verify and decode JWT token, returning the user id it was issued for"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError:
        return None

    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != token_type:
        return None
    return user_id


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """Get current authenticated user"""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    user_id = verify_token(credentials.credentials, settings)
    if user_id is None:
        raise AuthenticationError("Could not validate credentials")

    user = UserRepository(db).get_user_by_id(user_id)
    if user is None:
        raise AuthenticationError("Could not validate credentials")
    return user
