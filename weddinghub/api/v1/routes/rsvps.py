from fastapi import APIRouter, Depends, Request
from weddinghub.schemas import RSVPSubmit, RSVPSubmitResult
from weddinghub.core.rate_limit import limiter
from weddinghub.db.session import get_session
from weddinghub.services.rsvp_service import RSVPService
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/rsvps", tags=["rsvps"])

def get_rsvp_service(session: AsyncSession = Depends(get_session)) -> RSVPService:
    return RSVPService(session)

@router.post("", response_model=RSVPSubmitResult)
@limiter.limit("10/minute")
async def submit_rsvp_endpoint(
    request: Request,
    payload: RSVPSubmit,
    rsvp_service: RSVPService = Depends(get_rsvp_service)
):
    """Store a guest's response. Resubmitting replaces the earlier answer."""
    return await rsvp_service.submit(payload)
