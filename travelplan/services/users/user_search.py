import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from travelplan.core.config import settings
from travelplan.core.exceptions import store_failure
from travelplan.models.user.user import User
from travelplan.schemas.user.user import UserSearchResponse
from travelplan.stores.invites import InviteStore
from travelplan.stores.trips import TripStore
from travelplan.stores.users import UserStore
from travelplan.utils.mapper import RecordMapper

T = TypeVar("T")


async def _in_own_session(
    session_factory: async_sessionmaker,
    fetch: Callable[[AsyncSession, int], Awaitable[T]],
    trip_id: int,
) -> T:
    # An AsyncSession cannot run two queries at once, so each concurrent fetch gets its own
    async with session_factory() as session:
        return await fetch(session, trip_id)


async def _gather_or_cancel(*coros: Awaitable) -> list:
    """Run fetches concurrently; if one fails the rest are cancelled and awaited before it propagates."""
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let cancelled fetches close their sessions
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def exclude_trip_participants(
    users: List[User],
    member_ids: List[int],
    pending_recipients: List[tuple],
) -> List[User]:
    """Drop users who already belong to the trip or have a pending invite to it."""
    member_set = set(member_ids)
    invited_ids = {receiver_id for receiver_id, _ in pending_recipients if receiver_id is not None}
    invited_emails = {email for _, email in pending_recipients if email}

    return [
        user for user in users
        if user.id not in member_set
        and user.id not in invited_ids
        and user.email not in invited_emails
    ]


async def search_users(
    db: AsyncSession,
    session_factory: async_sessionmaker,
    query: Optional[str],
    trip_id: Optional[int],
    current_user: User,
) -> UserSearchResponse:
    """
    Find people to invite by a case-insensitive match on name or email.

    The result cap applies to the base query; the trip filter runs afterwards
    in-process, so a trip with many members or pending invites can get back
    fewer results than the cap even when more candidates exist.
    """
    text = (query or "").strip()
    if len(text) < settings.USER_SEARCH_MIN_QUERY_LENGTH:
        return UserSearchResponse(users=[])

    async with store_failure("Failed to search users", db):
        users = await UserStore.search(db, text, exclude_user_id=current_user.id, limit=settings.USER_SEARCH_LIMIT)

        if trip_id is not None:
            member_ids, pending_recipients = await _gather_or_cancel(
                _in_own_session(session_factory, TripStore.member_user_ids, trip_id),
                _in_own_session(session_factory, InviteStore.pending_recipients, trip_id),
            )
            users = exclude_trip_participants(users, member_ids, pending_recipients)

    return UserSearchResponse(users=[RecordMapper.user_summary(user) for user in users])
