import uuid
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from weddinghub.db.session import get_session
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from weddinghub.db.models.admin_user import AdminUser, AppRoleEnum
from weddinghub.core.security import decode_token, is_token_revoked

# HTTPBearer shows a simple "Authorize" button in Swagger UI for the JWT
security = HTTPBearer()


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> AdminUser:
    """
    Resolve the admin behind a bearer access token.
    
    Raises:
        HTTPException: 401 if the token is invalid, revoked or of the wrong
            type; 403 if the account does not hold the admin role
    """
    token = credentials.credentials
    
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    
    if await is_token_revoked(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    try:
        payload = decode_token(token)
    except ValueError:
        raise credentials_exception
    
    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    admin_id: Optional[str] = payload.get("sub")
    if admin_id is None:
        raise credentials_exception

    q = await session.execute(
        select(AdminUser).where(AdminUser.id == _as_uuid(admin_id))
    )
    admin = q.scalars().first()
    if not admin:
        raise credentials_exception
    if admin.role != AppRoleEnum.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return admin


def _as_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
