from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelplan.models.trips.trip_member import TripMember, TripRole
from travelplan.models.trips.trip_model import Trip
from travelplan.models.user.user import User
from travelplan.stores.criteria import AnyOf, Criterion, Eq, HasMember, compile_criteria


def accessible_by(user_id: int) -> Criterion:
    """Trips the user created or is a member of."""
    return AnyOf(Eq("creator_id", user_id), HasMember(user_id))


class TripStore:
    @staticmethod
    async def find_one(db: AsyncSession, *criteria: Criterion) -> Optional[Trip]:
        result = await db.execute(select(Trip).where(compile_criteria(Trip, criteria)).limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    async def find_accessible(db: AsyncSession, trip_id: int, user_id: int) -> Optional[Trip]:
        return await TripStore.find_one(db, Eq("id", trip_id), accessible_by(user_id))

    @staticmethod
    async def find_owned(db: AsyncSession, trip_id: int, user_id: int) -> Optional[Trip]:
        return await TripStore.find_one(db, Eq("id", trip_id), Eq("creator_id", user_id))

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: int) -> List[Tuple[Trip, User]]:
        """Trips visible to the user, newest first, each paired with its creator."""
        result = await db.execute(
            select(Trip, User)
            .join(User, User.id == Trip.creator_id)
            .where(compile_criteria(Trip, [accessible_by(user_id)]))
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        return [(row.Trip, row.User) for row in result.all()]

    @staticmethod
    async def create(
        db: AsyncSession,
        creator_id: int,
        name: str,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Trip:
        trip = Trip(
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            creator_id=creator_id,
        )
        db.add(trip)
        await db.flush()

        # The creator is the trip's owner member
        db.add(TripMember(trip_id=trip.id, user_id=creator_id, role=TripRole.OWNER))
        await db.flush()
        return trip

    @staticmethod
    async def delete(db: AsyncSession, trip: Trip) -> None:
        # ORM delete so members and invites go with the trip
        await db.delete(trip)
        await db.flush()

    @staticmethod
    async def find_member(db: AsyncSession, *criteria: Criterion) -> Optional[TripMember]:
        result = await db.execute(
            select(TripMember).where(compile_criteria(TripMember, criteria)).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def is_member(db: AsyncSession, trip_id: int, user_id: int) -> bool:
        member = await TripStore.find_member(db, Eq("trip_id", trip_id), Eq("user_id", user_id))
        return member is not None

    @staticmethod
    async def member_user_ids(db: AsyncSession, trip_id: int) -> List[int]:
        result = await db.execute(select(TripMember.user_id).where(TripMember.trip_id == trip_id))
        return list(result.scalars().all())

    @staticmethod
    async def list_members(db: AsyncSession, trip_id: int) -> List[Tuple[TripMember, User]]:
        result = await db.execute(
            select(TripMember, User)
            .join(User, User.id == TripMember.user_id)
            .where(TripMember.trip_id == trip_id)
            .order_by(TripMember.joined_at, TripMember.id)
        )
        return [(row.TripMember, row.User) for row in result.all()]

    @staticmethod
    async def add_member(
        db: AsyncSession, trip_id: int, user_id: int, role: TripRole = TripRole.MEMBER
    ) -> TripMember:
        member = TripMember(trip_id=trip_id, user_id=user_id, role=role, joined_at=datetime.utcnow())
        db.add(member)
        await db.flush()
        return member

    @staticmethod
    async def delete_member(db: AsyncSession, member_id: int) -> bool:
        """Remove a membership row. Deleting a row that is already gone is a no-op."""
        result = await db.execute(delete(TripMember).where(TripMember.id == member_id))
        return result.rowcount > 0
