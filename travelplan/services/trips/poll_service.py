from datetime import datetime
from typing import Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.trips.trip_poll import PollStatus, TripPoll
from travelplan.models.user.user import User
from travelplan.schemas.trip.poll import (
    PollCreate,
    PollListResponse,
    PollOut,
    PollResponse,
    PollUpdate,
    VoteCreate,
    VoteOut,
    VoteResponse,
)
from travelplan.services.trips.trip_access import get_accessible_trip
from travelplan.stores.criteria import Eq
from travelplan.stores.trip_records import PollStore


async def _get_poll(db: AsyncSession, trip_id: int, poll_id: int) -> TripPoll:
    poll = await PollStore.find_in_trip(db, trip_id, poll_id)
    if not poll:
        raise HTTPException(status_code=404, detail="Poll not found")
    return poll


def _require_poll_creator(poll: TripPoll, current_user: User, action: str) -> None:
    if poll.created_by_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only the poll creator can {action} this poll",
        )


async def list_polls(db: AsyncSession, trip_id: int, current_user: User) -> PollListResponse:
    """A trip's polls, newest first. Active polls past their expiry are marked expired on the way out."""
    async with store_failure("Failed to fetch polls", db):
        await get_accessible_trip(db, trip_id, current_user)
        polls = await PollStore.list_for_trip(db, trip_id)
        if await PollStore.expire_due(db, polls, datetime.utcnow()):
            await db.commit()
    return PollListResponse(polls=[PollOut.model_validate(poll) for poll in polls])


async def get_poll(db: AsyncSession, trip_id: int, poll_id: int, current_user: User) -> PollResponse:
    async with store_failure("Failed to fetch poll", db):
        await get_accessible_trip(db, trip_id, current_user)
        poll = await _get_poll(db, trip_id, poll_id)
        if await PollStore.expire_due(db, [poll], datetime.utcnow()):
            await db.commit()
    return PollResponse(poll=PollOut.model_validate(poll))


async def create_poll(db: AsyncSession, trip_id: int, poll_data: PollCreate, current_user: User) -> PollResponse:
    async with store_failure("Failed to create poll", db):
        await get_accessible_trip(db, trip_id, current_user)

        poll = await PollStore.create(
            db,
            trip_id=trip_id,
            question=poll_data.question,
            description=poll_data.description,
            options=poll_data.options,
            expires_at=poll_data.expires_at,
            status=PollStatus.ACTIVE,
            created_by_id=current_user.id,
            created_at=datetime.utcnow(),
        )
        await db.commit()
        poll = await PollStore.find_in_trip(db, trip_id, poll.id)

    logger.info(f"Poll {poll.id} opened on trip {trip_id} by user {current_user.id}")
    return PollResponse(poll=PollOut.model_validate(poll))


async def update_poll(
    db: AsyncSession, trip_id: int, poll_id: int, poll_data: PollUpdate, current_user: User
) -> PollResponse:
    """Creator only. Votes for options the poll no longer offers are dropped."""
    async with store_failure("Failed to update poll", db):
        await get_accessible_trip(db, trip_id, current_user)
        poll = await _get_poll(db, trip_id, poll_id)
        _require_poll_creator(poll, current_user, "update")

        changes = poll_data.changes()
        await PollStore.update(db, poll, changes)
        if "options" in changes:
            await PollStore.drop_votes_outside(db, poll.id, changes["options"])
        await db.commit()
        poll = await PollStore.find_in_trip(db, trip_id, poll_id)

    logger.info(f"Poll {poll_id} on trip {trip_id} updated by user {current_user.id}")
    return PollResponse(poll=PollOut.model_validate(poll))


async def delete_poll(db: AsyncSession, trip_id: int, poll_id: int, current_user: User) -> dict:
    async with store_failure("Failed to delete poll", db):
        await get_accessible_trip(db, trip_id, current_user)
        poll = await _get_poll(db, trip_id, poll_id)
        _require_poll_creator(poll, current_user, "delete")

        await PollStore.delete(db, poll.id)
        await db.commit()

    logger.info(f"Poll {poll_id} on trip {trip_id} deleted by user {current_user.id}")
    return {"message": "Poll deleted successfully"}


async def cast_vote(
    db: AsyncSession, trip_id: int, poll_id: int, vote_data: VoteCreate, current_user: User
) -> Tuple[VoteResponse, bool]:
    """
    Vote on an active poll, or change an earlier vote.

    Returns the vote and whether it is new. A poll found past its expiry is
    marked expired and the vote refused.
    """
    async with store_failure("Failed to submit vote", db):
        await get_accessible_trip(db, trip_id, current_user)
        poll = await _get_poll(db, trip_id, poll_id)

        if poll.status != PollStatus.ACTIVE:
            raise HTTPException(status_code=400, detail="Poll is not active")

        if await PollStore.expire_due(db, [poll], datetime.utcnow()):
            await db.commit()
            raise HTTPException(status_code=400, detail="Poll has expired")

        if vote_data.option not in poll.options:
            raise HTTPException(status_code=400, detail="Invalid vote option")

        vote = await PollStore.find_vote(db, Eq("poll_id", poll.id), Eq("user_id", current_user.id))
        created = vote is None
        try:
            if created:
                vote = await PollStore.add_vote(db, poll.id, current_user.id, vote_data.option)
            else:
                vote.option = vote_data.option
                vote.updated_at = datetime.utcnow()
            await db.commit()
        except IntegrityError:
            # Another request recorded this user's vote first
            await db.rollback()
            raise HTTPException(status_code=409, detail="Vote already recorded, try again")

        vote = await PollStore.find_vote(db, Eq("id", vote.id))

    logger.info(f"User {current_user.id} voted on poll {poll_id}")
    return (
        VoteResponse(
            vote=VoteOut.model_validate(vote),
            message=None if created else "Vote updated successfully",
        ),
        created,
    )


async def remove_vote(db: AsyncSession, trip_id: int, poll_id: int, current_user: User) -> dict:
    """Withdraw the caller's vote. Withdrawing when there is none is not an error."""
    async with store_failure("Failed to remove vote", db):
        await get_accessible_trip(db, trip_id, current_user)
        poll = await _get_poll(db, trip_id, poll_id)

        await PollStore.delete_vote(db, poll.id, current_user.id)
        await db.commit()

    logger.info(f"User {current_user.id} withdrew their vote on poll {poll_id}")
    return {"message": "Vote removed successfully"}
