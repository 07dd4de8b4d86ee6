from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.core.database import get_db
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.schemas.user.account_data import AccountDataExport, AccountDeletionResponse
from travelplan.services.users.account_data_service import delete_account_data, export_account_data

router = APIRouter(prefix="/user", tags=["Account Data"])

@router.get("/data-deletion", response_model=AccountDataExport)
async def review_account_data(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await export_account_data(db, current_user)

@router.post("/data-deletion", response_model=AccountDeletionResponse)
async def delete_my_account(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await delete_account_data(db, current_user)
