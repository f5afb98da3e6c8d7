"""
Users API — User Repository (Persistence Gateway)
===================================================

What:  Thin async data access for the `users` table.
Why:   Keeps SQLAlchemy out of UserService; the service speaks in intents
       ("find by id", "update email") and this class maps them to queries.
How:   Wraps an AsyncSession handed in by the caller. Reads return the record
       or None; writes flush immediately so database errors (including the
       email UNIQUE constraint) surface inside the calling operation.

Contract:
    - A missing row is NOT an error: find/update/delete return None
    - Storage faults (connection loss, constraint violations) propagate
    - Transactions are owned by the session's creator (get_db_session)
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Persistence gateway for User records, bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def find_by_id(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(
        self,
        name: str,
        email: str,
        age: int,
        dob: datetime,
        password: str,
    ) -> User:
        """Insert a user; the flush assigns `id`."""
        user = User(name=name, email=email, age=age, dob=dob, password=password)
        self.session.add(user)
        await self._flush()
        return user

    async def update(
        self,
        user_id: int,
        name: str,
        email: str,
        age: int,
        dob: datetime,
    ) -> Optional[User]:
        return await self._update_fields(user_id, name=name, email=email, age=age, dob=dob)

    async def update_name(self, user_id: int, name: str) -> Optional[User]:
        return await self._update_fields(user_id, name=name)

    async def update_email(self, user_id: int, email: str) -> Optional[User]:
        return await self._update_fields(user_id, email=email)

    async def update_password(self, user_id: int, password: str) -> Optional[User]:
        """Store a new password hash. Callers hash first; this never sees plaintext."""
        return await self._update_fields(user_id, password=password)

    async def delete(self, user_id: int) -> Optional[User]:
        """Delete a user and return the removed record, or None if it did not exist."""
        user = await self.find_by_id(user_id)
        if user is None:
            return None
        await self.session.delete(user)
        await self._flush()
        return user

    # ── Internals ─────────────────────────────────────────────────────────

    async def _update_fields(self, user_id: int, **fields) -> Optional[User]:
        user = await self.find_by_id(user_id)
        if user is None:
            return None
        for column, value in fields.items():
            setattr(user, column, value)
        await self._flush()
        return user

    async def _flush(self) -> None:
        """
        Flush pending changes, rolling the session back if the database refuses them.

        After a failed flush the session cannot be used until it is rolled
        back; doing it here leaves get_db_session with a clean session to commit.
        """
        try:
            await self.session.flush()
        except SQLAlchemyError:
            logger.warning("Flush failed for users table; rolling back session")
            await self.session.rollback()
            raise
