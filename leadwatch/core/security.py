"""
Caller identity for the reporting and notification endpoints.

Authentication happens upstream; the bearer JWT it issues already carries
the user id (``sub``) and role, so no user lookup is done here.
"""
import secrets
from datetime import datetime, UTC, timedelta
from typing import Optional

from fastapi import Depends, Header, HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from starlette import status

from leadwatch.core.config import settings
from leadwatch.models.user import UserRole
from leadwatch.schemas.token import CallerIdentity, TokenData

# HTTP Bearer authentication scheme
security = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a new JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_caller(token: str) -> CallerIdentity:
    """Decode a bearer token into a caller identity; raises 401 on any defect."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = TokenData(
            user_id=int(payload["sub"]),
            role=str(payload.get("role", "")).upper(),
        )
        role = UserRole(token_data.role)
    except (JWTError, KeyError, TypeError, ValueError):
        raise credentials_exception
    return CallerIdentity(user_id=token_data.user_id, role=role)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> CallerIdentity:
    """Dependency resolving the caller from the Authorization header."""
    return decode_caller(credentials.credentials)


# Role Hierarchy Definition
ROLE_HIERARCHY = {
    UserRole.SALES_REP: 1,
    UserRole.ADMIN: 2,
}


def require_role(min_role: UserRole):
    """
    Dependency factory to enforce minimum role requirements.
    """
    async def role_checker(caller: CallerIdentity = Depends(get_current_user)) -> CallerIdentity:
        if ROLE_HIERARCHY.get(caller.role, 0) < ROLE_HIERARCHY[min_role]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Operation forbidden. Required role: {min_role.value}",
            )
        return caller

    return role_checker


def verify_cron_secret(
    x_cron_secret: Optional[str] = Header(default=None, alias="X-Cron-Secret"),
) -> None:
    """Guard for the scan trigger endpoint."""
    if not settings.CRON_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Cron secret not configured",
        )
    if x_cron_secret is None or not secrets.compare_digest(x_cron_secret, settings.CRON_SECRET):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
