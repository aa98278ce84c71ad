import asyncio
from fastapi import FastAPI, WebSocket, WebSocketDisconnect, Query, status, APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.api.v1.routes import (
    admin as admin_router,
    auth as auth_router,
    health as health_router,
    invites as invites_router,
    rsvps as rsvps_router,
    wedding as wedding_router,
)
from weddinghub.db.session import engine, Base, get_session
from weddinghub.events.consumer import run_worker
from weddinghub.events.publisher import close_connection
from weddinghub.cache.redis_client import cache
from weddinghub.websocket.manager import manager
from weddinghub.core.config import settings
from weddinghub.core.rate_limit import limiter
from weddinghub.core.security import decode_token, is_token_revoked
from weddinghub.core.logging import logger
from weddinghub.services.countdown import CountdownTicker, TimeLeft
from weddinghub.services.wedding_service import WeddingService
from fastapi.middleware.cors import CORSMiddleware
from weddinghub.middleware.security_headers import SecurityHeadersMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

app = FastAPI(title="WeddingHub")

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(invites_router.router)
api_router.include_router(rsvps_router.router)
api_router.include_router(wedding_router.router)
api_router.include_router(auth_router.router)
api_router.include_router(admin_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)

_background_tasks = set()

@app.on_event("startup")
async def on_startup():
    # Tables are managed by alembic in deployments; create_all covers local runs
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.START_WORKER and settings.EVENTS_ENABLED:
        task = asyncio.create_task(run_worker())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

@app.on_event("shutdown")
async def on_shutdown():
    for task in list(_background_tasks):
        task.cancel()
    await close_connection()
    await cache.close()
    await engine.dispose()

@app.websocket("/ws/notifications/{admin_id}")
async def notifications_endpoint(websocket: WebSocket, admin_id: str, token: str = Query(...)):
    """
    Dashboard notification stream, authenticated with an admin access token.
    Example: ws://localhost:8000/ws/notifications/{admin_id}?token=your_jwt_token
    """
    try:
        payload = decode_token(token)

        if payload.get("type") != "access" or await is_token_revoked(token):
            logger.warning(f"WebSocket connection attempt with unusable token for admin {admin_id}")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        token_admin_id = str(payload.get("sub"))
        if token_admin_id != admin_id or payload.get("role") != "admin":
            logger.warning(f"WebSocket connection attempt: token subject {token_admin_id} does not match admin {admin_id}")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await manager.connect(admin_id, websocket)
        logger.info(f"WebSocket connection established for admin {admin_id}")

        while True:
            # Nothing is expected from the client; this only detects the disconnect
            await websocket.receive_text()

    except ValueError as e:
        logger.warning(f"WebSocket connection rejected for admin {admin_id}: {str(e)}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
    except WebSocketDisconnect:
        await manager.disconnect(admin_id, websocket)
        logger.info(f"WebSocket disconnected for admin {admin_id}")

@app.websocket("/ws/countdown")
async def countdown_endpoint(websocket: WebSocket, session: AsyncSession = Depends(get_session)):
    """Pushes the months/days/hours left until the wedding while the page is open."""
    compute = await WeddingService(session).countdown_source()
    # Only the ticker lives as long as the socket; give the connection back to the pool
    await session.close()
    await websocket.accept()

    async def push(remaining: TimeLeft):
        await websocket.send_json(remaining.as_dict())

    ticker = CountdownTicker(compute, push, interval=settings.COUNTDOWN_REFRESH_SECONDS)
    ticker.start()
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Countdown websocket closed")
    finally:
        await ticker.stop()
