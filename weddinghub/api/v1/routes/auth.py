"""Admin authentication routes: login, logout and token management."""
from fastapi import APIRouter, Depends, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from weddinghub.schemas import AdminOut, Token, TokenResponse, LoginRequest, RefreshTokenRequest
from weddinghub.services.auth_service import AuthService
from weddinghub.core.rate_limit import limiter
from weddinghub.db.session import get_session
from weddinghub.db.models.admin_user import AdminUser
from weddinghub.auth import get_current_admin, security
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin/auth", tags=["admin-auth"])

def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    """
    Dependency injection for AuthService.
    
    Args:
        session: Database session
        
    Returns:
        AuthService instance
    """
    return AuthService(session)

@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
async def login(
    request: Request, 
    form_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login endpoint returning access and refresh tokens.
    
    Rate limit: 5 requests per minute
    
    Args:
        request: FastAPI request object (for rate limiting)
        form_data: Admin login credentials
        auth_service: Authentication service instance
        
    Returns:
        Access and refresh tokens
        
    Raises:
        HTTPException: If credentials are invalid
    """
    return await auth_service.login(form_data)

@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_access_token(
    request: Request, 
    payload: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Refresh access token using refresh token.
    
    Rate limit: 10 requests per minute
    """
    return await auth_service.refresh_access_token(payload.refresh_token)

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_admin: AdminUser = Depends(get_current_admin),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Revoke the access token used for this request."""
    await auth_service.logout(credentials.credentials)
    return None


@router.get("/me", response_model=AdminOut)
async def get_current_admin_info(current_admin: AdminUser = Depends(get_current_admin)):
    return current_admin
