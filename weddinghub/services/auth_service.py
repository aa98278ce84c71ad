"""Authentication service for the admin dashboard."""
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.schemas import LoginRequest
from weddinghub.db.repositories import get_admin_by_email as db_get_admin_by_email
from weddinghub.core.logging import logger
from weddinghub.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    revoke_token,
    verify_password,
)
from fastapi import HTTPException, status


class AuthService:
    """
    Service layer for admin authentication.

    Handles login, token refresh, and logout. Admin accounts are created out
    of band (see ``create_admin.py``); there is no self-registration.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def login(self, form_data: LoginRequest):
        """
        Authenticate an admin and issue access and refresh tokens.

        Raises:
            HTTPException: 401 if the credentials are invalid
        """
        admin = await db_get_admin_by_email(self.session, form_data.email)
        if not admin or not verify_password(form_data.password, admin.hashed_password):
            logger.info(f"Failed admin login for {form_data.email}")
            raise HTTPException(status_code=401, detail="Invalid email or password. Please try again.")

        token_data = {"sub": str(admin.id), "role": admin.role.value}
        return {
            "access_token": create_access_token(token_data),
            "refresh_token": create_refresh_token(token_data),
            "token_type": "bearer"
        }

    async def refresh_access_token(self, refresh_token: str):
        """
        Issue a new access token from a valid refresh token.

        Raises:
            HTTPException: If the token is invalid or not a refresh token
        """
        try:
            token_data = decode_token(refresh_token)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token"
            )

        if token_data.get("type") != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token type"
            )

        access_token = create_access_token({"sub": token_data["sub"], "role": token_data.get("role")})
        return {
            "access_token": access_token,
            "token_type": "bearer"
        }

    async def logout(self, token: str):
        await revoke_token(token)
