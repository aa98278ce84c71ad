"""Dashboard routes: guest list management, response statistics and wedding settings."""
from typing import Dict, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.auth import get_current_admin
from weddinghub.db.session import get_session
from weddinghub.schemas import (
    GuestCreate,
    GuestOut,
    GuestStats,
    GuestUpdate,
    GuestWithRSVPOut,
    InviteLinkOut,
    SettingsUpdate,
)
from weddinghub.services.guest_service import GuestService
from weddinghub.services.settings_service import SettingsService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(get_current_admin)])


def get_guest_service(session: AsyncSession = Depends(get_session)) -> GuestService:
    return GuestService(session)


def get_settings_service(session: AsyncSession = Depends(get_session)) -> SettingsService:
    return SettingsService(session)


@router.get("/guests", response_model=List[GuestWithRSVPOut])
async def list_guests(
    search: Optional[str] = Query(None, description="Case-insensitive match on the guest name"),
    guest_service: GuestService = Depends(get_guest_service),
):
    return await guest_service.list_guests(search=search)


@router.post("/guests", response_model=GuestOut, status_code=status.HTTP_201_CREATED)
async def create_guest(payload: GuestCreate, guest_service: GuestService = Depends(get_guest_service)):
    """
    Add a guest. Without an explicit ``invite_code`` one is generated.

    Raises:
        HTTPException: 409 if the requested code is already taken
    """
    return await guest_service.create_guest(payload)


@router.get("/stats", response_model=GuestStats)
async def guest_stats(guest_service: GuestService = Depends(get_guest_service)):
    return await guest_service.stats()


@router.get("/guests/{guest_id}", response_model=GuestWithRSVPOut)
async def get_guest(guest_id: UUID, guest_service: GuestService = Depends(get_guest_service)):
    return await guest_service.get_guest(guest_id)


@router.patch("/guests/{guest_id}", response_model=GuestWithRSVPOut)
async def update_guest(
    guest_id: UUID,
    payload: GuestUpdate,
    guest_service: GuestService = Depends(get_guest_service),
):
    return await guest_service.update_guest(guest_id, payload)


@router.delete("/guests/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(guest_id: UUID, guest_service: GuestService = Depends(get_guest_service)):
    """Remove a guest together with their response."""
    await guest_service.delete_guest(guest_id)
    return None


@router.get("/guests/{guest_id}/invite-link", response_model=InviteLinkOut)
async def guest_invite_link(guest_id: UUID, guest_service: GuestService = Depends(get_guest_service)):
    return await guest_service.invite_link(guest_id)


@router.get("/settings", response_model=Dict[str, Optional[str]])
async def get_settings(settings_service: SettingsService = Depends(get_settings_service)):
    return await settings_service.all_settings()


@router.put("/settings", response_model=Dict[str, Optional[str]])
async def update_settings(
    payload: SettingsUpdate,
    settings_service: SettingsService = Depends(get_settings_service),
):
    """
    Write some or all wedding settings; a None value clears the setting.

    Raises:
        HTTPException: 400 when a key is not a known setting
    """
    return await settings_service.update_settings(payload.values)
