from typing import Dict, List, NamedTuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travelplan.models.trips.itinerary_item import ItineraryItem
from travelplan.models.trips.trip_cost import TripCost
from travelplan.models.trips.trip_invite import TripInvite
from travelplan.models.trips.trip_member import TripMember
from travelplan.models.trips.trip_model import Trip
from travelplan.models.trips.trip_poll import PollVote, TripPoll
from travelplan.models.trips.trip_task import TripTask
from travelplan.models.user.user import User
from travelplan.models.user.verification_token import VerificationToken
from travelplan.stores.criteria import AnyOf, Criterion, Eq, compile_criteria
from travelplan.stores.invites import addressed_to


class OwnedTripCounts(NamedTuple):
    trip: Trip
    members: int
    costs: int
    tasks: int
    polls: int


def _per_trip_count(model):
    # Correlated against the Trip of the enclosing query
    return select(func.count(model.id)).where(model.trip_id == Trip.id).scalar_subquery()


class AccountDataStore:
    """Everything a user owns or appears in, for export and for account deletion."""

    @staticmethod
    async def count(db: AsyncSession, model, *criteria: Criterion) -> int:
        return await db.scalar(
            select(func.count()).select_from(model).where(compile_criteria(model, criteria))
        )

    @staticmethod
    async def summary(db: AsyncSession, user: User) -> Dict[str, int]:
        count = AccountDataStore.count
        return {
            "trips": await count(db, Trip, Eq("creator_id", user.id)),
            "costs": await count(db, TripCost, Eq("paid_by_id", user.id)),
            "items": await count(db, ItineraryItem, Eq("created_by_id", user.id)),
            "tasks": await count(db, TripTask, Eq("created_by_id", user.id)),
            "assigned_tasks": await count(db, TripTask, Eq("assigned_to_id", user.id)),
            "polls": await count(db, TripPoll, Eq("created_by_id", user.id)),
            "votes": await count(db, PollVote, Eq("user_id", user.id)),
            "sent_invites": await count(db, TripInvite, Eq("sender_id", user.id)),
            "received_invites": await count(db, TripInvite, addressed_to(user.id, user.email)),
        }

    @staticmethod
    async def owned_trips(db: AsyncSession, user_id: int) -> List[OwnedTripCounts]:
        result = await db.execute(
            select(
                Trip,
                _per_trip_count(TripMember),
                _per_trip_count(TripCost),
                _per_trip_count(TripTask),
                _per_trip_count(TripPoll),
            )
            .where(Trip.creator_id == user_id)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        return [OwnedTripCounts(*row) for row in result.all()]

    @staticmethod
    async def purge(db: AsyncSession, user: User) -> None:
        """
        Remove the user and everything that only makes sense with them.

        Records they authored on other people's trips go (polls with their
        votes, tasks, itinerary items, invites); records other members rely on
        are kept and detached (tasks assigned to them, costs they paid). Trips
        they created are deleted with all of their contents. Nothing is
        committed here.
        """
        user_id = user.id
        own_polls = select(TripPoll.id).where(TripPoll.created_by_id == user_id)

        await db.execute(delete(PollVote).where(PollVote.user_id == user_id))
        await db.execute(delete(PollVote).where(PollVote.poll_id.in_(own_polls)))
        await db.execute(delete(TripPoll).where(TripPoll.created_by_id == user_id))

        await db.execute(
            update(TripTask).where(TripTask.assigned_to_id == user_id).values(assigned_to_id=None)
        )
        await db.execute(delete(TripTask).where(TripTask.created_by_id == user_id))
        await db.execute(update(TripCost).where(TripCost.paid_by_id == user_id).values(paid_by_id=None))
        await db.execute(delete(ItineraryItem).where(ItineraryItem.created_by_id == user_id))

        await db.execute(
            delete(TripInvite).where(
                compile_criteria(TripInvite, [AnyOf(Eq("sender_id", user_id), addressed_to(user_id, user.email))])
            )
        )
        await db.execute(delete(TripMember).where(TripMember.user_id == user_id))

        # ORM deletes so each trip's members, invites and planning records go with it
        result = await db.execute(select(Trip).where(Trip.creator_id == user_id))
        for trip in result.scalars().all():
            await db.delete(trip)
        await db.flush()

        await db.execute(delete(VerificationToken).where(VerificationToken.identifier == user.email))
        await db.execute(delete(User).where(User.id == user_id))
