from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.core.rate_limit import limiter
from weddinghub.db.session import get_session
from weddinghub.schemas import InviteGuestOut, InviteLookupRequest
from weddinghub.services.invite_service import InviteResolver
from weddinghub.services.rsvp_service import CODE_REQUIRED

router = APIRouter(prefix="/invites", tags=["invites"])


def get_invite_resolver(session: AsyncSession = Depends(get_session)) -> InviteResolver:
    return InviteResolver(session)


@router.post("/lookup", response_model=InviteGuestOut)
@limiter.limit("10/minute")
async def lookup_invite(
    request: Request,
    payload: InviteLookupRequest,
    resolver: InviteResolver = Depends(get_invite_resolver),
):
    """
    Find the guest an invitation code belongs to.

    Rate limit: 10 requests per minute

    Raises:
        HTTPException: 422 for a blank code, 404 when no guest matches
    """
    guest = await resolver.resolve(payload.code)
    if guest is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=CODE_REQUIRED)
    return guest
