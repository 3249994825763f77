"""
JWT validation middleware for bearer tokens.

Tokens are HS256 JWTs signed with JWT_SECRET and carry the user id in the
`id` claim. Issuing tokens for real logins (password or Google) belongs to
the authentication service; `create_access_token` exists so that service
and the tests produce tokens of the same shape.

Usage:
    @router.get("/protected")
    def protected_endpoint(current_user: AuthenticatedUser = Depends(get_current_user)):
        return {"user_id": current_user.id}
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from config import get_settings
from auth.models.schemas import AuthenticatedUser

logger = logging.getLogger("auth.middleware")

security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    """Sign a token for `user_id` with the configured secret and lifetime."""
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="Authentication not configured")

    expire = datetime.now(timezone.utc) + (expires_in or timedelta(days=settings.jwt_expire_days))
    return jwt.encode(
        {"id": user_id, "exp": expire},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def _verify_token(token: str) -> dict:
    """Verify signature and expiry and return the claims."""
    settings = get_settings()

    if not settings.jwt_secret:
        raise HTTPException(status_code=401, detail="Authentication not configured")

    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise HTTPException(status_code=401, detail="Not authorized, token failed")

    return claims


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """
    FastAPI dependency: validate the bearer token and return the caller.
    Raises 401 if the token is missing or invalid.
    """
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    claims = _verify_token(credentials.credentials)
    user_id = claims.get("id")

    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: no id claim")

    return AuthenticatedUser(id=str(user_id))
