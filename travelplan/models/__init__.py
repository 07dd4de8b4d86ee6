from .user.user import User
from .user.verification_token import VerificationToken
from .trips.trip_model import Trip
from .trips.trip_member import TripMember, TripRole
from .trips.trip_invite import TripInvite, InviteStatus
from .trips.trip_cost import TripCost, CostCategory
from .trips.itinerary_item import ItineraryItem, ItemType
from .trips.trip_task import TripTask, TaskCategory, TaskPriority, TaskStatus
from .trips.trip_poll import TripPoll, PollVote, PollStatus
