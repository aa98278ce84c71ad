from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict
from weddinghub.db.session import get_session
from weddinghub.core.logging import logger

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=Dict[str, str])
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Health check including a database round trip.

    Returns:
        ``{"status": "healthy"}``, or 503 with ``"degraded"`` when the
        database cannot be reached
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {e}")
        return JSONResponse(status_code=503, content={"status": "degraded"})
    return {"status": "healthy"}
