from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from travelplan.core.database import get_db, get_session_factory
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.schemas.user.user import UserSearchResponse
from travelplan.services.users.user_search import search_users

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("/search", response_model=UserSearchResponse)
async def search(
    q: Optional[str] = Query(None),
    trip_id: Optional[int] = Query(None, alias="tripId"),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    current_user: User = Depends(get_current_user),
):
    return await search_users(db, session_factory, q, trip_id, current_user)
