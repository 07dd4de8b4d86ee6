from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.user.user import User
from travelplan.schemas.user.account_data import (
    AccountDataExport,
    AccountDataSummary,
    AccountDeletionResponse,
    AccountProfile,
    DeletedData,
    OwnedTripData,
)
from travelplan.stores.accounts import AccountDataStore


async def export_account_data(db: AsyncSession, current_user: User) -> AccountDataExport:
    """Summarise what is stored about the user, including the trips they created."""
    async with store_failure("Failed to access user data", db):
        summary = await AccountDataStore.summary(db, current_user)
        owned = await AccountDataStore.owned_trips(db, current_user.id)

    return AccountDataExport(
        user=AccountProfile.model_validate(current_user),
        data_summary=AccountDataSummary(**summary),
        trips=[
            OwnedTripData(
                id=row.trip.id,
                name=row.trip.name,
                description=row.trip.description,
                start_date=row.trip.start_date,
                end_date=row.trip.end_date,
                created_at=row.trip.created_at,
                member_count=row.members,
                cost_count=row.costs,
                task_count=row.tasks,
                poll_count=row.polls,
            )
            for row in owned
        ],
    )


async def delete_account_data(db: AsyncSession, current_user: User) -> AccountDeletionResponse:
    """Delete the account and its data in a single transaction."""
    user_id = current_user.id
    async with store_failure("Failed to delete user data", db):
        summary = await AccountDataStore.summary(db, current_user)
        await AccountDataStore.purge(db, current_user)
        await db.commit()

    logger.info(f"User {user_id} deleted their account")
    return AccountDeletionResponse(
        message="Your account and all associated data have been successfully deleted",
        deleted_data=DeletedData(
            trips=summary["trips"],
            costs=summary["costs"],
            items=summary["items"],
            tasks=summary["tasks"],
            polls=summary["polls"],
            invitations=summary["sent_invites"] + summary["received_invites"],
        ),
    )
