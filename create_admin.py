"""
Create the database tables and the dashboard admin account.

Reads ADMIN_EMAIL, ADMIN_PASSWORD and (optionally) ADMIN_NAME from the
environment. Running it again for an existing email does nothing.
"""
import asyncio
import os
import sys
from weddinghub.core.logging import logger
from weddinghub.core.security import hash_password, validate_password
from weddinghub.db.repositories import create_admin, get_admin_by_email
from weddinghub.db.session import AsyncSessionLocal, Base, engine
import weddinghub.db.models  # noqa: F401  registers the tables on Base.metadata


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created")


async def main() -> int:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
        return 1

    try:
        validate_password(password)
    except ValueError as e:
        logger.error(f"Refusing weak admin password: {e}")
        return 1

    await create_tables()

    async with AsyncSessionLocal() as session:
        if await get_admin_by_email(session, email):
            logger.info(f"Admin {email} already exists")
        else:
            admin = await create_admin(session, email, hash_password(password), os.getenv("ADMIN_NAME"))
            logger.info(f"Admin {admin.email} created")

    await engine.dispose()
    return 0

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
