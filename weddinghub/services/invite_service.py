"""Invitation code lookup."""
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.core.logging import logger
from weddinghub.db.models.guest import Guest
from weddinghub.db.repositories import get_guest_by_invite_code as db_get_guest_by_invite_code

INVITE_NOT_FOUND = "We couldn't find your invitation. Please check your code."


def normalize_code(raw: Optional[str]) -> str:
    """Invitation codes are matched trimmed and case-insensitively."""
    return (raw or "").strip().lower()


class InviteResolver:
    """
    Resolves a typed invitation code to the single guest it belongs to.

    Unknown codes and store failures look the same to the caller; the actual
    cause is only written to the log.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, raw_code: Optional[str]) -> Optional[Guest]:
        """
        Args:
            raw_code: Code as the guest typed it

        Returns:
            The guest, or None when the input is blank (no lookup is made)

        Raises:
            HTTPException: 404 with a generic message when no guest can be found
        """
        code = normalize_code(raw_code)
        if not code:
            return None

        try:
            guest = await db_get_guest_by_invite_code(self.session, code)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Invite lookup failed for code {code!r}: {e}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVITE_NOT_FOUND)

        if guest is None:
            logger.info(f"No guest found for invite code {code!r}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVITE_NOT_FOUND)

        return guest
