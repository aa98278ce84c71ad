from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.db.session import get_session
from weddinghub.schemas import CountdownOut, WeddingInfoOut
from weddinghub.services.wedding_service import WeddingService

router = APIRouter(prefix="/wedding", tags=["wedding"])


def get_wedding_service(session: AsyncSession = Depends(get_session)) -> WeddingService:
    return WeddingService(session)


@router.get("/info", response_model=WeddingInfoOut)
async def wedding_info(wedding_service: WeddingService = Depends(get_wedding_service)):
    """Countdown, RSVP form options and the venue/travel texts for the public site."""
    return await wedding_service.info()


@router.get("/countdown", response_model=CountdownOut)
async def wedding_countdown(wedding_service: WeddingService = Depends(get_wedding_service)):
    return await wedding_service.countdown()
