"""
Integration tests for the public wedding info endpoints and the websockets.
"""
import os
import uuid
import pytest
from httpx import AsyncClient
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from weddinghub.main import app
from weddinghub.core.security import create_access_token, create_refresh_token
from weddinghub.db.session import get_session
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool


@pytest.mark.integration
@pytest.mark.asyncio
class TestWeddingInfo:
    
    async def test_defaults_without_settings(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/wedding/info")
        
        assert response.status_code == 200
        data = response.json()
        assert data["wedding_date"] == "2026-08-01"
        assert data["form"] == {"enable_dietary": True, "song_request_required": True}
        assert data["weather_location"] == "Kirkwood,Eastern Cape,ZA"
        assert data["weather_url"].startswith("https://www.accuweather.com/")
        assert data["venue_text"] is None
        assert set(data["time_left"]) == {"months", "days", "hours"}
    
    async def test_configured_values(self, client: AsyncClient, make_settings):
        await make_settings(
            wedding_date="2099-12-24",
            enable_dietary="no",
            venue_text="The Old Mill",
            weather_location="Stellenbosch,ZA",
        )
        
        data = (await client.get("/api/v1/wedding/info")).json()
        
        assert data["wedding_date"] == "2099-12-24"
        assert data["form"]["enable_dietary"] is False
        assert data["venue_text"] == "The Old Mill"
        assert data["weather_location"] == "Stellenbosch,ZA"
        assert "Stellenbosch" in data["weather_url"]
        assert data["time_left"]["months"] > 0
    
    async def test_invalid_date_counts_down_nothing(self, client: AsyncClient, make_settings):
        await make_settings(wedding_date="sometime soon")
        
        data = (await client.get("/api/v1/wedding/countdown")).json()
        
        assert data["wedding_date"] is None
        assert data["time_left"] == {"months": 0, "days": 0, "hours": 0}
    
    async def test_past_date_counts_down_nothing(self, client: AsyncClient, make_settings):
        await make_settings(wedding_date="2001-01-01")
        
        data = (await client.get("/api/v1/wedding/countdown")).json()
        
        assert data["wedding_date"] == "2001-01-01"
        assert data["time_left"] == {"months": 0, "days": 0, "hours": 0}
    
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/v1/health")
        
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.fixture
def ws_sessions() -> list:
    """Sessions handed to websocket endpoints, in the order they were opened."""
    return []


@pytest.fixture
def ws_client(ws_sessions):
    """
    Synchronous client for the websocket endpoints.

    The client runs the app on its own event loop, so sessions come from an
    unpooled engine rather than the per-test session. Startup hooks are not run.
    """
    engine = create_async_engine(os.environ["DATABASE_URL"], poolclass=NullPool)
    sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with sessions() as session:
            ws_sessions.append(session)
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.integration
class TestCountdownWebsocket:
    
    def test_pushes_countdown_on_connect(self, ws_client):
        with ws_client.websocket_connect("/ws/countdown") as websocket:
            data = websocket.receive_json()
        
        assert set(data) == {"months", "days", "hours"}
        assert all(value >= 0 for value in data.values())
    
    def test_session_is_released_once_ticking(self, ws_client, ws_sessions):
        with ws_client.websocket_connect("/ws/countdown") as websocket:
            websocket.receive_json()
            assert len(ws_sessions) == 1
            assert ws_sessions[0].in_transaction() is False


@pytest.mark.integration
class TestNotificationsWebsocket:
    
    def test_rejects_invalid_token(self, ws_client):
        with pytest.raises(WebSocketDisconnect) as exc:
            with ws_client.websocket_connect(f"/ws/notifications/{uuid.uuid4()}?token=invalid.token.here"):
                pass
        
        assert exc.value.code == 1008
    
    def test_rejects_token_for_another_admin(self, ws_client):
        token = create_access_token({"sub": str(uuid.uuid4()), "role": "admin"})
        
        with pytest.raises(WebSocketDisconnect) as exc:
            with ws_client.websocket_connect(f"/ws/notifications/{uuid.uuid4()}?token={token}"):
                pass
        
        assert exc.value.code == 1008
    
    def test_rejects_refresh_token(self, ws_client):
        admin_id = str(uuid.uuid4())
        refresh = create_refresh_token({"sub": admin_id, "role": "admin"})
        
        with pytest.raises(WebSocketDisconnect) as exc:
            with ws_client.websocket_connect(f"/ws/notifications/{admin_id}?token={refresh}"):
                pass
        
        assert exc.value.code == 1008
