"""
RSVP submission: validate a guest's answers and store their single response.
"""
import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, Optional, Set
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.core.logging import logger
from weddinghub.db.models.guest import Guest
from weddinghub.db.models.rsvp import RSVPStatusEnum
from weddinghub.db.repositories import upsert_rsvp as db_upsert_rsvp
from weddinghub.events import publisher
from weddinghub.schemas import (
    FollowUp,
    RSVPFormConfig,
    RSVPOut,
    RSVPSubmit,
    RSVPSubmitResult,
    SubmittableStatus,
)
from weddinghub.services.invite_service import InviteResolver
from weddinghub.services.settings_service import SettingsService

SUBMISSION_FAILED = "Something went wrong. Please try again."
SONG_REQUEST_MISSING = "Please tell us which song will get you on the dance floor."
SUBMISSION_IN_PROGRESS = "Your response is already being sent. Please wait a moment."
CODE_REQUIRED = "Please enter your invitation code."


class SubmissionGuard:
    """
    Remembers which guests have a submission in flight in this process.

    A second submission for the same guest is refused until the first one
    has finished.
    """

    def __init__(self):
        self._in_flight: Set[uuid.UUID] = set()
        self.lock = asyncio.Lock()

    def is_busy(self, guest_id: uuid.UUID) -> bool:
        return guest_id in self._in_flight

    @asynccontextmanager
    async def hold(self, guest_id: uuid.UUID) -> AsyncIterator[None]:
        async with self.lock:
            if guest_id in self._in_flight:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SUBMISSION_IN_PROGRESS)
            self._in_flight.add(guest_id)
        try:
            yield
        finally:
            self._in_flight.discard(guest_id)


submission_guard = SubmissionGuard()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_submission(payload: RSVPSubmit, config: RSVPFormConfig) -> None:
    """
    Raises:
        HTTPException: 422 with a field-level detail when an attending guest
            leaves a required song request empty
    """
    attending = payload.status == SubmittableStatus.attending
    if attending and config.song_request_required and not _clean(payload.message):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": "message", "message": SONG_REQUEST_MISSING},
        )


def build_rsvp_fields(
    guest: Guest,
    payload: RSVPSubmit,
    config: RSVPFormConfig,
    responded_at: datetime,
) -> Dict:
    """
    Column values for the guest's response.

    Every answer that does not apply to this status, guest or configuration is
    written as None so nothing from an earlier submission survives.
    """
    attending = payload.status == SubmittableStatus.attending
    plus_one_name = _clean(payload.plus_one_name) if attending and guest.plus_one_allowed else None
    dietary_notes = _clean(payload.dietary_notes) if attending and config.enable_dietary else None
    return {
        "status": RSVPStatusEnum(payload.status.value),
        "plus_one_name": plus_one_name,
        "dietary_notes": dietary_notes,
        "message": _clean(payload.message),
        "responded_at": responded_at,
    }


class RSVPService:
    def __init__(self, session: AsyncSession, guard: Optional[SubmissionGuard] = None):
        self.session = session
        self.guard = guard or submission_guard

    async def submit(self, payload: RSVPSubmit) -> RSVPSubmitResult:
        """
        Validate and store a guest's response.

        The guest is looked up again from the invitation code, so plus-one
        entitlement always comes from the guest list and never from the client.

        Returns:
            The stored response and whether the guest is attending

        Raises:
            HTTPException: 422 on validation errors, 404 for unknown codes,
                409 while another submission for the guest is in flight,
                500 when the store rejects the write
        """
        config = await SettingsService(self.session).form_config()
        validate_submission(payload, config)

        guest = await InviteResolver(self.session).resolve(payload.invite_code)
        if guest is None:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=CODE_REQUIRED)

        guest_id = guest.id
        fields = build_rsvp_fields(guest, payload, config, datetime.now(timezone.utc))
        async with self.guard.hold(guest_id):
            try:
                rsvp = await db_upsert_rsvp(self.session, guest_id, fields)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"RSVP write failed for guest {guest_id}: {e}")
                raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SUBMISSION_FAILED)

        attending = payload.status == SubmittableStatus.attending
        logger.info(f"RSVP stored for guest {guest.id}: {payload.status.value}")
        await self._notify(guest, rsvp)

        return RSVPSubmitResult(
            attending=attending,
            follow_up=FollowUp.celebration if attending else FollowUp.acknowledgment,
            rsvp=RSVPOut.model_validate(rsvp),
        )

    async def _notify(self, guest: Guest, rsvp) -> None:
        # The response is already committed; a broker outage must not undo that
        try:
            await publisher.publish_event("rsvp.submitted", {
                "type": "rsvp.submitted",
                "rsvp_id": str(rsvp.id),
                "guest_id": str(guest.id),
                "guest_name": guest.name,
                "status": rsvp.status.value,
            })
        except Exception as e:
            logger.warning(f"Could not publish rsvp.submitted for guest {guest.id}: {e}")
