from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import BackgroundTasks, HTTPException, status
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.trips.trip_invite import InviteStatus
from travelplan.models.user.user import User
from travelplan.schemas.trip.invite import CreatedInvite, ReceivedInvite, TripInviteCreate, TripInviteOut
from travelplan.services.email_service import send_trip_invitation_email
from travelplan.stores.criteria import AnyOf, Eq
from travelplan.stores.invites import InviteStore, addressed_to, pending
from travelplan.stores.trips import TripStore
from travelplan.stores.users import UserStore
from travelplan.utils.mapper import RecordMapper


async def get_pending_invites(db: AsyncSession, current_user: User) -> List[ReceivedInvite]:
    """Pending invitations addressed to the user by id or by email, newest first."""
    async with store_failure("Failed to fetch invitations", db):
        rows = await InviteStore.find_with_trip_and_sender(
            db, addressed_to(current_user.id, current_user.email), pending()
        )

    invites = []
    for row in rows:
        if row.trip is None or row.trip_creator is None or row.sender is None:
            logger.warning(f"Skipping orphaned invite {row.invite.id}")
            continue
        invites.append(
            ReceivedInvite(
                **RecordMapper.invite_fields(row.invite),
                trip=RecordMapper.trip_summary(row.trip, row.trip_creator),
                sender=RecordMapper.user_summary(row.sender),
            )
        )
    return invites


async def get_trip_invites(db: AsyncSession, trip_id: int, current_user: User) -> List[TripInviteOut]:
    """Every invitation of a trip, whatever its status, for the trip's members."""
    async with store_failure("Failed to fetch invitations", db):
        trip = await TripStore.find_accessible(db, trip_id, current_user.id)
        if not trip:
            raise HTTPException(status_code=404, detail="Trip not found")

        rows = await InviteStore.find_with_parties(db, Eq("trip_id", trip_id))

    invites = []
    for row in rows:
        if row.sender is None:
            logger.warning(f"Skipping invite {row.invite.id} with missing sender")
            continue
        invites.append(
            TripInviteOut(
                **RecordMapper.invite_fields(row.invite),
                receiver=RecordMapper.user_summary(row.receiver),
                sender=RecordMapper.user_summary(row.sender),
            )
        )
    return invites


async def create_trip_invite(
    db: AsyncSession,
    trip_id: int,
    invite_data: TripInviteCreate,
    current_user: User,
    background_tasks: Optional[BackgroundTasks] = None,
) -> CreatedInvite:
    email = str(invite_data.email)

    async with store_failure("Failed to create invitation", db):
        trip = await TripStore.find_accessible(db, trip_id, current_user.id)
        if not trip:
            raise HTTPException(status_code=404, detail="Trip not found")

        invitee = await UserStore.find_by_email(db, email)

        if invitee:
            if await TripStore.is_member(db, trip_id, invitee.id):
                raise HTTPException(status_code=400, detail="User is already a member")
            recipient = AnyOf(Eq("receiver_id", invitee.id), Eq("receiver_email", email))
        else:
            recipient = Eq("receiver_email", email)

        # At most one pending invite per receiver and trip
        if await InviteStore.find_one(db, Eq("trip_id", trip_id), recipient, pending()):
            raise HTTPException(status_code=400, detail="Invitation already sent")

        try:
            invite = await InviteStore.create(
                db,
                trip_id=trip_id,
                sender_id=current_user.id,
                receiver_id=invitee.id if invitee else None,
                receiver_email=None if invitee else email,
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise HTTPException(status_code=500, detail="Failed to create invitation")

        creator = await UserStore.get(db, trip.creator_id)

    logger.info(f"Invite {invite.id} to trip {trip_id} sent by user {current_user.id}")

    email_args = dict(
        invitee_email=email,
        invitee_name=invitee.name if invitee else "Traveler",
        inviter_name=current_user.name or "Someone",
        trip_name=trip.name,
        trip_description=trip.description,
        start_date=trip.start_date,
        end_date=trip.end_date,
        is_new_user=invitee is None,
    )
    if background_tasks is not None:
        background_tasks.add_task(send_trip_invitation_email, **email_args)
    else:
        send_trip_invitation_email(**email_args)

    return CreatedInvite(
        **RecordMapper.invite_fields(invite),
        receiver=RecordMapper.user_summary(invitee),
        sender=RecordMapper.user_summary(current_user),
        trip=RecordMapper.trip_summary(trip, creator),
    )


async def respond_to_invite(db: AsyncSession, invite_id: int, action: str, current_user: User) -> str:
    """Accept or decline a pending invite addressed to the user."""
    async with store_failure("Failed to update invitation", db):
        invite = await InviteStore.find_one(
            db, Eq("id", invite_id), addressed_to(current_user.id, current_user.email), pending()
        )
        if not invite:
            raise HTTPException(status_code=404, detail="Invitation not found")

        if action == "accept":
            if await TripStore.is_member(db, invite.trip_id, current_user.id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="User is already a member of this trip",
                )
            try:
                # Status change and membership land in one commit
                await InviteStore.respond(db, invite, InviteStatus.ACCEPTED, current_user.id)
                await TripStore.add_member(db, invite.trip_id, current_user.id)
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="User is already a member of this trip",
                )
            logger.info(f"Invite {invite_id} accepted by user {current_user.id}")
            return "Invitation accepted"

        await InviteStore.respond(db, invite, InviteStatus.DECLINED, current_user.id)
        await db.commit()

    logger.info(f"Invite {invite_id} declined by user {current_user.id}")
    return "Invitation declined"


async def withdraw_invite(db: AsyncSession, invite_id: int, current_user: User) -> str:
    """Delete an invite the user sent or received."""
    async with store_failure("Failed to delete invitation", db):
        invite = await InviteStore.find_one(
            db,
            Eq("id", invite_id),
            AnyOf(Eq("sender_id", current_user.id), addressed_to(current_user.id, current_user.email)),
        )
        if not invite:
            raise HTTPException(status_code=404, detail="Invitation not found")

        await InviteStore.delete(db, invite.id)
        await db.commit()

    logger.info(f"Invite {invite_id} deleted by user {current_user.id}")
    return "Invitation deleted"


async def delete_trip_invite(db: AsyncSession, trip_id: int, invite_id: int, current_user: User) -> str:
    """
    Delete an invite from a trip's page.

    Checks run in order and each fails on its own: the trip must be visible
    to the user (reported as not found otherwise, so non-members learn
    nothing about the trip), the invite must belong to the trip, and only
    the invite's sender or the trip's creator may delete it.
    """
    async with store_failure("Failed to delete invitation", db):
        trip = await TripStore.find_accessible(db, trip_id, current_user.id)
        if not trip:
            logger.warning(f"Invite deletion on trip {trip_id} masked as not found for user {current_user.id}")
            raise HTTPException(status_code=404, detail="Trip not found")

        invite = await InviteStore.find_one(db, Eq("id", invite_id), Eq("trip_id", trip_id))
        if not invite:
            raise HTTPException(status_code=404, detail="Invitation not found")

        if invite.sender_id != current_user.id and trip.creator_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You don't have permission to delete this invitation",
            )

        await InviteStore.delete(db, invite.id)
        await db.commit()

    logger.info(f"Invite {invite_id} on trip {trip_id} deleted by user {current_user.id}")
    return "Invitation deleted successfully"
