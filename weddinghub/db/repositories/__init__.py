"""
Repository layer for database operations.

Provides async functions for the guest list, RSVP responses, wedding settings
and admin accounts. Wedding settings reads are cached in Redis.
"""
from sqlalchemy import select, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from weddinghub.db.models.admin_user import AdminUser
from weddinghub.db.models.guest import Guest
from weddinghub.db.models.rsvp import RSVP, RSVPStatusEnum
from weddinghub.db.models.wedding_setting import WeddingSetting
from weddinghub.cache.cache_decorators import cached
from weddinghub.cache.redis_client import cache
from typing import Optional, List, Dict, Iterable
import uuid


def _insert_for(db: AsyncSession):
    """Return the dialect-specific ``insert`` that supports ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise ValueError(f"Upsert is not supported on the {dialect} dialect")


async def get_admin_by_email(db: AsyncSession, email: str) -> Optional[AdminUser]:
    q = select(AdminUser).where(func.lower(AdminUser.email) == email.lower())
    res = await db.execute(q)
    return res.scalars().first()


async def create_admin(db: AsyncSession, email: str, hashed_password: str, full_name: Optional[str] = None) -> AdminUser:
    admin = AdminUser(email=email.lower(), hashed_password=hashed_password, full_name=full_name)
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def get_guest(db: AsyncSession, guest_id: uuid.UUID) -> Optional[Guest]:
    q = (
        select(Guest)
        .options(selectinload(Guest.rsvp))
        .where(Guest.id == guest_id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return res.scalars().first()


async def get_guest_by_invite_code(db: AsyncSession, invite_code: str) -> Optional[Guest]:
    """
    Retrieve the guest holding an invitation code.

    Args:
        db: Database session
        invite_code: Code exactly as stored (already normalised)

    Returns:
        Guest if exactly one row matches, None otherwise
    """
    q = select(Guest).where(Guest.invite_code == invite_code)
    res = await db.execute(q)
    return res.scalars().one_or_none()


async def list_guests(db: AsyncSession, search: Optional[str] = None) -> List[Guest]:
    """
    List guests newest first, each with its RSVP (if any) eagerly loaded.

    Args:
        db: Database session
        search: Optional case-insensitive substring of the guest name
    """
    q = (
        select(Guest)
        .options(selectinload(Guest.rsvp))
        .order_by(Guest.created_at.desc(), Guest.name)
        .execution_options(populate_existing=True)
    )
    if search:
        q = q.where(func.lower(Guest.name).contains(search.strip().lower(), autoescape=True))
    res = await db.execute(q)
    return list(res.scalars().all())


async def create_guest(db: AsyncSession, fields: Dict) -> Guest:
    guest = Guest(**fields)
    db.add(guest)
    await db.commit()
    await db.refresh(guest)
    return guest


async def update_guest(db: AsyncSession, guest: Guest, fields: Dict) -> Guest:
    for name, value in fields.items():
        setattr(guest, name, value)
    await db.commit()
    await db.refresh(guest)
    return guest


async def delete_guest(db: AsyncSession, guest: Guest) -> None:
    # The RSVP is loaded with the guest so the ORM cascade removes it too
    await db.delete(guest)
    await db.commit()


async def count_guests(db: AsyncSession) -> int:
    res = await db.execute(select(func.count(Guest.id)))
    return res.scalar() or 0


async def count_rsvps_by_status(db: AsyncSession) -> Dict[RSVPStatusEnum, int]:
    q = select(RSVP.status, func.count(RSVP.id)).group_by(RSVP.status)
    res = await db.execute(q)
    return {status: count for status, count in res.all()}


async def get_rsvp_for_guest(db: AsyncSession, guest_id: uuid.UUID) -> Optional[RSVP]:
    q = (
        select(RSVP)
        .where(RSVP.guest_id == guest_id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return res.scalars().first()


async def upsert_rsvp(db: AsyncSession, guest_id: uuid.UUID, fields: Dict) -> RSVP:
    """
    Insert the guest's RSVP or overwrite the existing one in a single statement.

    Every column named in ``fields`` is written on both paths, so values from
    an earlier submission never survive a resubmission.

    Args:
        db: Database session
        guest_id: Guest the response belongs to (conflict target)
        fields: Column values for the response

    Returns:
        The RSVP row as stored after the write
    """
    insert = _insert_for(db)
    stmt = insert(RSVP).values(id=uuid.uuid4(), guest_id=guest_id, **fields)
    stmt = stmt.on_conflict_do_update(
        index_elements=["guest_id"],
        set_={**{name: stmt.excluded[name] for name in fields}, "updated_at": func.now()},
    )
    await db.execute(stmt)
    await db.commit()
    return await get_rsvp_for_guest(db, guest_id)


@cached('settings', expire=60)
async def read_settings(db: AsyncSession, keys: tuple) -> Dict[str, Optional[str]]:
    """
    Read the wedding settings whose key is in ``keys``.

    Returns a plain dict (cache friendly); missing keys are simply absent.
    """
    q = select(WeddingSetting.key, WeddingSetting.value).where(WeddingSetting.key.in_(keys))
    res = await db.execute(q)
    return {key: value for key, value in res.all()}


async def write_settings(db: AsyncSession, values: Dict[str, Optional[str]]) -> None:
    insert = _insert_for(db)
    for key, value in values.items():
        stmt = insert(WeddingSetting).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": stmt.excluded["value"], "updated_at": func.now()},
        )
        await db.execute(stmt)
    await db.commit()
    await cache.delete_pattern("settings:*")


async def list_settings(db: AsyncSession, keys: Iterable[str]) -> Dict[str, Optional[str]]:
    """Uncached read used by the admin screens."""
    q = select(WeddingSetting.key, WeddingSetting.value).where(WeddingSetting.key.in_(list(keys)))
    res = await db.execute(q)
    return {key: value for key, value in res.all()}
