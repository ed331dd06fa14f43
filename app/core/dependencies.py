from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from redis.asyncio import Redis
from typing import Optional

from app.core.config import settings
from app.core.exceptions import AppException
from app.core.security import decode_token, TokenPurpose
from app.db.redis import get_redis
from app.models.users import UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_current_role(token: str = Depends(oauth2_scheme)) -> UserRole:
    """
    Reads the role claim of a session token. Only gates the request; the
    workflows validate the token again and load the subject themselves.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token, TokenPurpose.SESSION)
        if payload.is_expired():
            raise credentials_exception
        return UserRole(payload.role)
    except (AppException, ValueError):
        raise credentials_exception


def require_roles(*allowed: UserRole):
    def checker(
            token: str = Depends(oauth2_scheme),
            role: UserRole = Depends(get_current_role),
    ) -> str:
        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return token

    return checker


def rate_limit_dependency(
        requests_limit: int = settings.RATE_LIMIT_REQUESTS,
        time_window: int = settings.RATE_LIMIT_WINDOW_SECONDS,
        scope: str = "default",
):
    """
    Per-IP request counter kept in Redis
    """

    async def rate_limit(
            request: Request,
            redis: Optional[Redis] = Depends(get_redis),
    ):
        if redis is None:
            return

        client_ip = request.client.host if request.client else "unknown"
        key = f"rate_limit:{scope}:{client_ip}"

        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, time_window)

        if count > requests_limit:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests",
            )

    return rate_limit
