"""
Repository tests for users against a real SQLite database.

These tests cover:
- Case-insensitive email lookup
- Conditional support request increment, including concurrent submissions
- Monthly usage reset
"""

import asyncio

import pytest
from sqlalchemy import select

from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository


async def create_teacher(db, email: str, *, used: int = 0, limit: int = 20, additional: int = 0) -> User:
    user = await UserRepository.create(
        db,
        email=email,
        password_hash="hashed",
        first_name="Jamie",
        last_name="Rivera",
        role=UserRole.TEACHER,
        support_requests_limit=limit,
    )
    user.support_requests_used = used
    user.additional_requests = additional
    await db.flush()
    return user


class TestGetByEmail:
    """Tests for UserRepository.get_by_email."""

    @pytest.mark.asyncio
    async def test_ignores_case(self, db_session):
        user = await create_teacher(db_session, "Jamie.Rivera@Lincoln.edu")

        found = await UserRepository.get_by_email(db_session, "  JAMIE.rivera@lincoln.EDU ")

        assert found is not None
        assert found.id == user.id
        assert found.email == "jamie.rivera@lincoln.edu"

    @pytest.mark.asyncio
    async def test_unknown_email(self, db_session):
        await create_teacher(db_session, "jamie@lincoln.edu")

        assert await UserRepository.get_by_email(db_session, "sam@lincoln.edu") is None

    @pytest.mark.asyncio
    async def test_ids_are_uuid_strings(self, db_session):
        user = await create_teacher(db_session, "jamie@lincoln.edu")
        user_id = user.id
        db_session.expire_all()

        found = await UserRepository.get_by_id(db_session, user_id)

        assert isinstance(found.id, str)
        assert len(found.id) == 36


class TestIncrementSupportRequests:
    """Tests for UserRepository.increment_support_requests."""

    @pytest.mark.asyncio
    async def test_consumes_below_limit(self, db_session):
        user = await create_teacher(db_session, "jamie@lincoln.edu", used=5)

        assert await UserRepository.increment_support_requests(db_session, user.id) is True

        await db_session.refresh(user)
        assert user.support_requests_used == 6

    @pytest.mark.asyncio
    async def test_stops_at_limit(self, db_session):
        user = await create_teacher(db_session, "jamie@lincoln.edu", used=19)

        assert await UserRepository.increment_support_requests(db_session, user.id) is True
        assert await UserRepository.increment_support_requests(db_session, user.id) is False

        await db_session.refresh(user)
        assert user.support_requests_used == 20

    @pytest.mark.asyncio
    async def test_additional_requests_extend_limit(self, db_session):
        user = await create_teacher(db_session, "jamie@lincoln.edu", used=20, additional=1)

        assert await UserRepository.increment_support_requests(db_session, user.id) is True
        assert await UserRepository.increment_support_requests(db_session, user.id) is False

    @pytest.mark.asyncio
    async def test_concurrent_submissions_take_last_request_once(self, session_maker):
        async with session_maker() as db:
            user = await create_teacher(db, "jamie@lincoln.edu", used=19)
            await db.commit()
            user_id = user.id

        async def consume() -> bool:
            async with session_maker() as db:
                consumed = await UserRepository.increment_support_requests(db, user_id)
                await db.commit()
                return consumed

        results = await asyncio.gather(consume(), consume())

        assert sorted(results) == [False, True]
        async with session_maker() as db:
            used = (
                await db.execute(select(User.support_requests_used).where(User.id == user_id))
            ).scalar_one()
        assert used == 20


class TestResetSupportRequests:
    """Tests for UserRepository.reset_support_requests."""

    @pytest.mark.asyncio
    async def test_zeroes_every_user(self, db_session):
        await create_teacher(db_session, "a@lincoln.edu", used=7)
        await create_teacher(db_session, "b@lincoln.edu", used=20)
        await create_teacher(db_session, "c@lincoln.edu", used=0)

        reset = await UserRepository.reset_support_requests(db_session)

        assert reset == 2
        db_session.expire_all()
        result = await db_session.execute(select(User.support_requests_used))
        assert set(result.scalars().all()) == {0}
