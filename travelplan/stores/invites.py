from datetime import datetime
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from travelplan.models.trips.trip_invite import InviteStatus, TripInvite
from travelplan.models.trips.trip_model import Trip
from travelplan.models.user.user import User
from travelplan.stores.criteria import AnyOf, Criterion, Eq, compile_criteria


def addressed_to(user_id: int, email: str) -> Criterion:
    """Invites whose receiver is the user, by id or by email."""
    return AnyOf(Eq("receiver_id", user_id), Eq("receiver_email", email))


def pending() -> Criterion:
    return Eq("status", InviteStatus.PENDING)


class InviteWithTrip(NamedTuple):
    invite: TripInvite
    trip: Optional[Trip]
    trip_creator: Optional[User]
    sender: Optional[User]


class InviteWithParties(NamedTuple):
    invite: TripInvite
    receiver: Optional[User]
    sender: Optional[User]


_newest_first = (TripInvite.created_at.desc(), TripInvite.id.desc())


class InviteStore:
    @staticmethod
    async def get(db: AsyncSession, invite_id: int) -> Optional[TripInvite]:
        return await db.get(TripInvite, invite_id)

    @staticmethod
    async def find_one(db: AsyncSession, *criteria: Criterion) -> Optional[TripInvite]:
        result = await db.execute(
            select(TripInvite).where(compile_criteria(TripInvite, criteria)).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_many(db: AsyncSession, *criteria: Criterion) -> List[TripInvite]:
        result = await db.execute(
            select(TripInvite).where(compile_criteria(TripInvite, criteria)).order_by(*_newest_first)
        )
        return list(result.scalars().all())

    @staticmethod
    async def find_with_trip_and_sender(db: AsyncSession, *criteria: Criterion) -> List[InviteWithTrip]:
        """
        Invites joined with their trip, the trip's creator and the sender, newest first.

        Outer joins: a row whose trip or sender has vanished comes back with
        None in that slot and it is up to the caller to decide what to do.
        """
        sender = aliased(User, name="sender")
        creator = aliased(User, name="trip_creator")
        result = await db.execute(
            select(TripInvite, Trip, creator, sender)
            .outerjoin(Trip, Trip.id == TripInvite.trip_id)
            .outerjoin(creator, creator.id == Trip.creator_id)
            .outerjoin(sender, sender.id == TripInvite.sender_id)
            .where(compile_criteria(TripInvite, criteria))
            .order_by(*_newest_first)
        )
        return [InviteWithTrip(*row) for row in result.all()]

    @staticmethod
    async def find_with_parties(db: AsyncSession, *criteria: Criterion) -> List[InviteWithParties]:
        """Invites joined with receiver and sender, newest first."""
        sender = aliased(User, name="sender")
        receiver = aliased(User, name="receiver")
        result = await db.execute(
            select(TripInvite, receiver, sender)
            .outerjoin(receiver, receiver.id == TripInvite.receiver_id)
            .outerjoin(sender, sender.id == TripInvite.sender_id)
            .where(compile_criteria(TripInvite, criteria))
            .order_by(*_newest_first)
        )
        return [InviteWithParties(*row) for row in result.all()]

    @staticmethod
    async def pending_recipients(db: AsyncSession, trip_id: int) -> List[Tuple[Optional[int], Optional[str]]]:
        """(receiver_id, receiver_email) of every pending invite on the trip."""
        result = await db.execute(
            select(TripInvite.receiver_id, TripInvite.receiver_email).where(
                compile_criteria(TripInvite, [Eq("trip_id", trip_id), pending()])
            )
        )
        return [(row.receiver_id, row.receiver_email) for row in result.all()]

    @staticmethod
    async def create(
        db: AsyncSession,
        trip_id: int,
        sender_id: int,
        receiver_id: Optional[int] = None,
        receiver_email: Optional[str] = None,
    ) -> TripInvite:
        if (receiver_id is None) == (receiver_email is None):
            raise ValueError("An invite is addressed to exactly one of receiver_id or receiver_email")

        invite = TripInvite(
            trip_id=trip_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            receiver_email=receiver_email,
            status=InviteStatus.PENDING,
            created_at=datetime.utcnow(),
        )
        db.add(invite)
        await db.flush()
        return invite

    @staticmethod
    async def respond(db: AsyncSession, invite: TripInvite, status: InviteStatus, responder_id: int) -> TripInvite:
        """Record the receiver's answer and re-point the invite at their user id."""
        invite.status = status
        invite.receiver_id = responder_id
        invite.receiver_email = None
        invite.responded_at = datetime.utcnow()
        await db.flush()
        return invite

    @staticmethod
    async def delete(db: AsyncSession, invite_id: int) -> bool:
        """Remove an invite. Deleting an invite that is already gone is a no-op."""
        result = await db.execute(delete(TripInvite).where(TripInvite.id == invite_id))
        return result.rowcount > 0
