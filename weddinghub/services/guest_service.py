"""Guest list management for the admin dashboard."""
import secrets
import uuid
from typing import List, Optional
from urllib.parse import quote
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.core.config import settings
from weddinghub.core.logging import logger
from weddinghub.db.models.guest import Guest
from weddinghub.db.models.rsvp import RSVPStatusEnum
from weddinghub.db.repositories import (
    count_guests as db_count_guests,
    count_rsvps_by_status as db_count_rsvps_by_status,
    create_guest as db_create_guest,
    delete_guest as db_delete_guest,
    get_guest as db_get_guest,
    list_guests as db_list_guests,
    update_guest as db_update_guest,
)
from weddinghub.schemas import GuestCreate, GuestStats, GuestUpdate, InviteLinkOut
from weddinghub.services.invite_service import normalize_code

CODE_ATTEMPTS = 5


def generate_invite_code() -> str:
    """Eight lower-case hex characters, easy to read out over the phone."""
    return secrets.token_hex(4)


def invite_link(invite_code: str) -> str:
    return f"{settings.PUBLIC_SITE_URL.rstrip('/')}/rsvp?code={quote(invite_code)}"


class GuestService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_guests(self, search: Optional[str] = None) -> List[Guest]:
        return await db_list_guests(self.session, search=search)

    async def get_guest(self, guest_id: uuid.UUID) -> Guest:
        guest = await db_get_guest(self.session, guest_id)
        if guest is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
        return guest

    async def create_guest(self, payload: GuestCreate) -> Guest:
        """
        Add a guest to the list.

        A supplied invitation code is normalised and must be unique (409
        otherwise). Without one, a random code is generated, retrying on the
        unlikely collision.
        """
        fields = payload.model_dump(exclude={"invite_code"})
        fields["phone"] = (fields.get("phone") or "").strip() or None
        requested = normalize_code(payload.invite_code)

        attempts = 1 if requested else CODE_ATTEMPTS
        for _ in range(attempts):
            code = requested or generate_invite_code()
            try:
                guest = await db_create_guest(self.session, {**fields, "invite_code": code})
            except IntegrityError:
                await self.session.rollback()
                logger.warning(f"Invite code collision on {code!r}")
                continue
            logger.info(f"Guest added: {guest.id} ({guest.name})")
            return guest

        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invitation code already in use")

    async def update_guest(self, guest_id: uuid.UUID, payload: GuestUpdate) -> Guest:
        guest = await self.get_guest(guest_id)
        fields = payload.model_dump(exclude_unset=True)
        if "invite_code" in fields:
            code = normalize_code(fields["invite_code"])
            if not code:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invitation code cannot be blank")
            fields["invite_code"] = code
        if "name" in fields and fields["name"] is None:
            fields.pop("name")
        try:
            guest = await db_update_guest(self.session, guest, fields)
        except IntegrityError:
            await self.session.rollback()
            if "invite_code" not in fields:
                raise
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invitation code already in use")
        logger.info(f"Guest updated: {guest.id}")
        return await self.get_guest(guest.id)

    async def delete_guest(self, guest_id: uuid.UUID) -> None:
        guest = await self.get_guest(guest_id)
        await db_delete_guest(self.session, guest)
        logger.info(f"Guest removed: {guest_id}")

    async def invite_link(self, guest_id: uuid.UUID) -> InviteLinkOut:
        guest = await self.get_guest(guest_id)
        return InviteLinkOut(invite_code=guest.invite_code, url=invite_link(guest.invite_code))

    async def stats(self) -> GuestStats:
        """Response counts; guests who have not answered count as pending."""
        total = await db_count_guests(self.session)
        counts = await db_count_rsvps_by_status(self.session)
        attending = counts.get(RSVPStatusEnum.attending, 0)
        not_attending = counts.get(RSVPStatusEnum.not_attending, 0)
        maybe = counts.get(RSVPStatusEnum.maybe, 0)
        return GuestStats(
            total=total,
            attending=attending,
            not_attending=not_attending,
            maybe=maybe,
            pending=total - attending - not_attending - maybe,
        )
