"""
Integration tests for admin authentication endpoints.
Tests login, refresh, logout and token checks with a real database.
"""
import pytest
from httpx import AsyncClient

from weddinghub.core.security import create_access_token


@pytest.mark.integration
@pytest.mark.asyncio
class TestAdminAuthEndpoints:
    """Test admin authentication API endpoints."""
    
    async def test_login_success(self, client: AsyncClient, test_admin):
        response = await client.post(
            "/api/v1/admin/auth/login",
            json={"email": "admin@example.com", "password": "Test123!@#"}
        )
        
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert len(data["access_token"]) > 0
        assert len(data["refresh_token"]) > 0
    
    async def test_login_wrong_password(self, client: AsyncClient, test_admin):
        response = await client.post(
            "/api/v1/admin/auth/login",
            json={"email": "admin@example.com", "password": "WrongPassword123!@#"}
        )
        
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password. Please try again."
    
    async def test_login_unknown_admin(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/admin/auth/login",
            json={"email": "nobody@example.com", "password": "Test123!@#"}
        )
        
        assert response.status_code == 401
    
    async def test_login_short_password_is_a_validation_error(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/admin/auth/login",
            json={"email": "admin@example.com", "password": "12345"}
        )
        
        assert response.status_code == 422
    
    async def test_refresh_token_success(self, client: AsyncClient, admin_refresh_token):
        response = await client.post(
            "/api/v1/admin/auth/refresh",
            json={"refresh_token": admin_refresh_token}
        )
        
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"
    
    async def test_refresh_with_access_token_fails(self, client: AsyncClient, admin_token):
        response = await client.post(
            "/api/v1/admin/auth/refresh",
            json={"refresh_token": admin_token}
        )
        
        assert response.status_code == 401
    
    async def test_refresh_token_invalid(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/admin/auth/refresh",
            json={"refresh_token": "invalid.token.here"}
        )
        
        assert response.status_code == 401
    
    async def test_logout_revokes_token(self, client: AsyncClient, auth_headers, fake_redis):
        response = await client.post("/api/v1/admin/auth/logout", headers=auth_headers)
        assert response.status_code == 204
        
        response = await client.get("/api/v1/admin/auth/me", headers=auth_headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "Token has been revoked"
    
    async def test_logout_without_token(self, client: AsyncClient):
        response = await client.post("/api/v1/admin/auth/logout")
        
        # HTTPBearer answers 403 or 401 depending on the FastAPI release
        assert response.status_code in (401, 403)


@pytest.mark.integration
@pytest.mark.asyncio
class TestProtectedEndpoints:
    
    async def test_me_with_valid_token(self, client: AsyncClient, auth_headers, test_admin):
        response = await client.get("/api/v1/admin/auth/me", headers=auth_headers)
        
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "admin@example.com"
        assert data["role"] == "admin"
        assert "hashed_password" not in data
    
    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/admin/guests",
            headers={"Authorization": "Bearer invalid.token.here"}
        )
        
        assert response.status_code == 401
    
    async def test_refresh_token_cannot_call_endpoints(self, client: AsyncClient, admin_refresh_token):
        response = await client.get(
            "/api/v1/admin/guests",
            headers={"Authorization": f"Bearer {admin_refresh_token}"}
        )
        
        assert response.status_code == 401
    
    async def test_token_for_unknown_admin(self, client: AsyncClient, db_session):
        token = create_access_token({"sub": "8b0e8f4e-3a55-4a38-9d1c-2f0a4b9a6c11", "role": "admin"})
        
        response = await client.get("/api/v1/admin/stats", headers={"Authorization": f"Bearer {token}"})
        
        assert response.status_code == 401
    
    async def test_malformed_subject(self, client: AsyncClient, db_session):
        token = create_access_token({"sub": "not-a-uuid", "role": "admin"})
        
        response = await client.get("/api/v1/admin/stats", headers={"Authorization": f"Bearer {token}"})
        
        assert response.status_code == 401
