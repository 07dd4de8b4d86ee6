# travelplan/routes/__init__.py
from fastapi import APIRouter
from travelplan.routes.auth import auth
from travelplan.routes.trip import trip_routes, trip_member, invitation, costs, itinerary, tasks, polls
from travelplan.routes.invites import invites
from travelplan.routes.users import search, account_data


api_router = APIRouter(prefix="/api")


# Auth routes
api_router.include_router(auth.router)

# Trip routes
api_router.include_router(trip_routes.router)
api_router.include_router(trip_member.router)
api_router.include_router(invitation.router)

# Trip planning
api_router.include_router(costs.router)
api_router.include_router(itinerary.router)
api_router.include_router(tasks.router)
api_router.include_router(polls.router)

# Received invitations
api_router.include_router(invites.router)

# Users
api_router.include_router(search.router)
api_router.include_router(account_data.router)
