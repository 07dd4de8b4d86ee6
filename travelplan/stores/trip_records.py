"""
Stores for the planning records that hang off a trip: costs, itinerary
items, tasks and polls.

A record is only ever addressed through its trip, so every lookup takes the
trip id as well as the record id. Relationships the responses need are
loaded eagerly; lazy loads are not available on an AsyncSession.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from travelplan.models.trips.itinerary_item import ItineraryItem
from travelplan.models.trips.trip_cost import TripCost
from travelplan.models.trips.trip_poll import PollStatus, PollVote, TripPoll
from travelplan.models.trips.trip_task import TripTask
from travelplan.stores.criteria import Criterion, Eq, compile_criteria


class TripRecordStore:
    model: Any = None
    order_by: Tuple = ()
    load: Tuple = ()

    @classmethod
    def _select(cls):
        # populate_existing so a re-read after a write sees fresh relationships
        return (
            select(cls.model)
            .options(*cls.load)
            .execution_options(populate_existing=True)
        )

    @classmethod
    async def find_one(cls, db: AsyncSession, *criteria: Criterion):
        result = await db.execute(cls._select().where(compile_criteria(cls.model, criteria)).limit(1))
        return result.scalar_one_or_none()

    @classmethod
    async def find_in_trip(cls, db: AsyncSession, trip_id: int, record_id: int):
        return await cls.find_one(db, Eq("id", record_id), Eq("trip_id", trip_id))

    @classmethod
    async def list_for_trip(cls, db: AsyncSession, trip_id: int, *criteria: Criterion) -> List:
        result = await db.execute(
            cls._select()
            .where(compile_criteria(cls.model, [Eq("trip_id", trip_id), *criteria]))
            .order_by(*cls.order_by)
        )
        return list(result.scalars().all())

    @classmethod
    async def create(cls, db: AsyncSession, **fields):
        record = cls.model(**fields)
        db.add(record)
        await db.flush()
        return record

    @classmethod
    async def update(cls, db: AsyncSession, record, fields: Dict[str, Any]):
        for field, value in fields.items():
            setattr(record, field, value)
        await db.flush()
        return record

    @classmethod
    async def delete(cls, db: AsyncSession, record_id: int) -> bool:
        """Delete by id. Deleting a record that is already gone is a no-op."""
        result = await db.execute(delete(cls.model).where(cls.model.id == record_id))
        return result.rowcount > 0


class CostStore(TripRecordStore):
    model = TripCost
    order_by = (TripCost.date.desc(), TripCost.id.desc())
    load = (selectinload(TripCost.paid_by),)


class ItineraryStore(TripRecordStore):
    model = ItineraryItem
    order_by = (ItineraryItem.start_date.asc().nulls_last(), ItineraryItem.id)
    load = (selectinload(ItineraryItem.created_by),)


class TaskStore(TripRecordStore):
    model = TripTask
    order_by = (TripTask.created_at.desc(), TripTask.id.desc())
    load = (selectinload(TripTask.created_by), selectinload(TripTask.assigned_to))


class PollStore(TripRecordStore):
    model = TripPoll
    order_by = (TripPoll.created_at.desc(), TripPoll.id.desc())
    load = (
        selectinload(TripPoll.created_by),
        selectinload(TripPoll.votes).selectinload(PollVote.user),
    )

    @classmethod
    async def delete(cls, db: AsyncSession, record_id: int) -> bool:
        await db.execute(delete(PollVote).where(PollVote.poll_id == record_id))
        return await super().delete(db, record_id)

    @staticmethod
    async def expire_due(db: AsyncSession, polls: Sequence[TripPoll], now: datetime) -> bool:
        """Mark active polls past their expiry as expired. Returns whether any changed."""
        changed = False
        for poll in polls:
            if poll.status == PollStatus.ACTIVE and poll.expires_at < now:
                poll.status = PollStatus.EXPIRED
                changed = True
        if changed:
            await db.flush()
        return changed

    @staticmethod
    async def find_vote(db: AsyncSession, *criteria: Criterion) -> Optional[PollVote]:
        result = await db.execute(
            select(PollVote)
            .options(selectinload(PollVote.user))
            .where(compile_criteria(PollVote, criteria))
            .execution_options(populate_existing=True)
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def add_vote(db: AsyncSession, poll_id: int, user_id: int, option: str) -> PollVote:
        vote = PollVote(poll_id=poll_id, user_id=user_id, option=option)
        db.add(vote)
        await db.flush()
        return vote

    @staticmethod
    async def delete_vote(db: AsyncSession, poll_id: int, user_id: int) -> bool:
        result = await db.execute(
            delete(PollVote).where(PollVote.poll_id == poll_id, PollVote.user_id == user_id)
        )
        return result.rowcount > 0

    @staticmethod
    async def drop_votes_outside(db: AsyncSession, poll_id: int, options: Sequence[str]) -> int:
        """Remove votes for options a poll no longer offers."""
        result = await db.execute(
            delete(PollVote).where(PollVote.poll_id == poll_id, PollVote.option.not_in(list(options)))
        )
        return result.rowcount
