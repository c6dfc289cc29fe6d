"""Account Store: profile, creator and brand records keyed by user id."""
from typing import Optional, Protocol
from uuid import UUID

from ..database import get_connection
from ..models.account import BrandRecord, CreatorRecord, Profile


class AccountStore(Protocol):
    async def get_profile(self, user_id: UUID) -> Optional[Profile]: ...

    async def get_creator(self, user_id: UUID) -> Optional[CreatorRecord]: ...

    async def upsert_creator(self, user_id: UUID, *, tiktok_connected: bool = False) -> None: ...

    async def get_brand(self, user_id: UUID) -> Optional[BrandRecord]: ...

    async def update_profile(self, user_id: UUID, *, onboarding_completed: bool) -> None: ...


async def fetch_profile(conn, user_id: UUID) -> Optional[Profile]:
    row = await conn.fetchrow(
        """SELECT user_id, user_type, organization_name, onboarding_completed
           FROM profiles WHERE user_id = $1""",
        user_id
    )
    return Profile.from_row(row) if row else None


async def fetch_creator(conn, user_id: UUID) -> Optional[CreatorRecord]:
    row = await conn.fetchrow(
        "SELECT user_id, tiktok_connected FROM creators WHERE user_id = $1",
        user_id
    )
    return CreatorRecord.from_row(row) if row else None


async def fetch_brand(conn, user_id: UUID) -> Optional[BrandRecord]:
    row = await conn.fetchrow(
        "SELECT user_id, stripe_customer_id, payment_verified FROM brands WHERE user_id = $1",
        user_id
    )
    return BrandRecord.from_row(row) if row else None


async def ensure_creator(conn, user_id: UUID, *, tiktok_connected: bool = False) -> None:
    """Create the creator row if missing. An existing row is only ever upgraded."""
    if tiktok_connected:
        await conn.execute(
            """INSERT INTO creators (user_id, tiktok_connected)
               VALUES ($1, true)
               ON CONFLICT (user_id) DO UPDATE
               SET tiktok_connected = true, updated_at = NOW()""",
            user_id
        )
    else:
        await conn.execute(
            """INSERT INTO creators (user_id, tiktok_connected)
               VALUES ($1, false)
               ON CONFLICT (user_id) DO NOTHING""",
            user_id
        )


async def set_onboarding_completed(conn, user_id: UUID, completed: bool = True) -> None:
    # Completion is only recorded once an organization name exists.
    await conn.execute(
        """UPDATE profiles
           SET onboarding_completed = $2, updated_at = NOW()
           WHERE user_id = $1
             AND ($2 = false OR organization_name IS NOT NULL)""",
        user_id, completed
    )


class PostgresAccountStore:
    """AccountStore backed by the asyncpg pool."""

    def __init__(self, connection=get_connection):
        self._connection = connection

    async def get_profile(self, user_id: UUID) -> Optional[Profile]:
        async with self._connection() as conn:
            return await fetch_profile(conn, user_id)

    async def get_creator(self, user_id: UUID) -> Optional[CreatorRecord]:
        async with self._connection() as conn:
            return await fetch_creator(conn, user_id)

    async def upsert_creator(self, user_id: UUID, *, tiktok_connected: bool = False) -> None:
        async with self._connection() as conn:
            await ensure_creator(conn, user_id, tiktok_connected=tiktok_connected)

    async def get_brand(self, user_id: UUID) -> Optional[BrandRecord]:
        async with self._connection() as conn:
            return await fetch_brand(conn, user_id)

    async def update_profile(self, user_id: UUID, *, onboarding_completed: bool) -> None:
        async with self._connection() as conn:
            await set_onboarding_completed(conn, user_id, onboarding_completed)
