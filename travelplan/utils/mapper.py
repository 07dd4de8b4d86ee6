from typing import Any, Dict, Optional

from travelplan.models.trips.trip_invite import TripInvite
from travelplan.models.trips.trip_model import Trip
from travelplan.models.user.user import User
from travelplan.schemas.trip.trip_schema import TripSummary
from travelplan.schemas.user.user import UserSummary


# Mapping Functions
class RecordMapper:
    @staticmethod
    def user_summary(user: Optional[User]) -> Optional[UserSummary]:
        if user is None:
            return None
        return UserSummary(id=user.id, name=user.name, email=user.email)

    @staticmethod
    def trip_summary(trip: Trip, creator: User) -> TripSummary:
        return TripSummary(
            id=trip.id,
            name=trip.name,
            description=trip.description,
            start_date=trip.start_date,
            end_date=trip.end_date,
            creator=RecordMapper.user_summary(creator),
        )

    @staticmethod
    def invite_fields(invite: TripInvite) -> Dict[str, Any]:
        """Columns of an invite, with the status as its upper-case name."""
        return {
            "id": invite.id,
            "trip_id": invite.trip_id,
            "sender_id": invite.sender_id,
            "receiver_id": invite.receiver_id,
            "receiver_email": invite.receiver_email,
            "status": invite.status.name,
            "created_at": invite.created_at,
        }
