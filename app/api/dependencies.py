from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from jose import JWTError

from core.database import get_db
from core.security import decode_token, TOKEN_COOKIE
from models.user import User, UserRole
from core.logger import get_logger
from services.token_blacklist import TokenBlacklistService
from utils.rate_limiter import RateLimiter

logger = get_logger(__name__)

# extracts the token from the authorization header, the token cookie is the fallback

security = HTTPBearer(auto_error=False)


def get_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE)


async def get_current_user(token: Optional[str] = Depends(get_token),
                           db: AsyncSession = Depends(get_db)) -> User:
    credentials_exception = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                                          detail="Unauthorized",
                                          headers={"WWW-Authenticate": "Bearer"}, )
    if not token:
        raise credentials_exception

    try:
        payload = decode_token(token)
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise credentials_exception

    user_id: str = payload.get("sub")
    token_type: str = payload.get("type")

    if user_id is None:
        logger.warning("Token missing 'sub' claim")
        raise credentials_exception

    if token_type != "access":
        logger.warning(f"Invalid token type: {token_type}")
        raise credentials_exception

    if await TokenBlacklistService.is_token_blacklisted(token):
        raise credentials_exception

    try:
        user_uuid = UUID(str(user_id))
    except ValueError:
        logger.warning(f"Token subject is not a user id: {user_id}")
        raise credentials_exception

    # fetch the user from the database
    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning(f"Token for unknown user {user_id}")
        raise credentials_exception
    return user


async def rate_limited_user(current_user: User = Depends(get_current_user)) -> User:
    await RateLimiter.check_rate_limit(str(current_user.id))
    return current_user


def require_role(role: UserRole):
    #builds a dependency that only lets users with the given role through
    async def role_checker(current_user: User = Depends(rate_limited_user)) -> User:
        if current_user.role != role:
            logger.warning(f"User {current_user.id} ({current_user.role.value}) denied {role.value} route")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. {role.value} role required."
            )
        return current_user

    return role_checker


require_manager = require_role(UserRole.MANAGER)
require_developer = require_role(UserRole.DEVELOPER)
