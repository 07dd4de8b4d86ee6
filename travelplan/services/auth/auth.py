from datetime import datetime, timedelta
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.core.config import settings
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.core.security import (
    create_access_token,
    generate_verification_token,
    hash_password,
    verify_password,
)
from travelplan.models.user.user import User
from travelplan.schemas.user.user import SignupRequest, LoginRequest
from travelplan.stores.users import UserStore, VerificationTokenStore


async def register_user(user_data: SignupRequest, db: AsyncSession) -> str:
    """
    Create an unverified account plus its verification token.

    Returns the token so the caller can send the verification email once the
    account is committed.
    """
    if len(user_data.password) < settings.PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long",
        )

    async with store_failure("Internal server error", db):
        if await UserStore.find_by_email(db, user_data.email):
            raise HTTPException(status_code=400, detail="User with this email already exists")

        token = generate_verification_token()
        expires = datetime.utcnow() + timedelta(hours=settings.VERIFICATION_TOKEN_TTL_HOURS)

        try:
            await UserStore.create(
                db,
                name=user_data.name,
                email=user_data.email,
                hashed_password=hash_password(user_data.password),
            )
            await VerificationTokenStore.create(db, identifier=user_data.email, token=token, expires=expires)
            await db.commit()
        except IntegrityError:
            # Lost a race against a concurrent signup with the same email
            await db.rollback()
            raise HTTPException(status_code=400, detail="User with this email already exists")

    logger.info(f"User registered: {user_data.email}")
    return token


async def verify_email(token: str, db: AsyncSession) -> None:
    async with store_failure("Internal server error", db):
        record = await VerificationTokenStore.find(db, token)
        if not record:
            raise HTTPException(status_code=400, detail="Invalid verification token")

        if record.expires < datetime.utcnow():
            await VerificationTokenStore.delete(db, token)
            await db.commit()
            logger.info(f"Expired verification token discarded for {record.identifier}")
            raise HTTPException(status_code=400, detail="Verification token has expired")

        user = await UserStore.find_by_email(db, record.identifier)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        await UserStore.mark_verified(db, user, datetime.utcnow())
        await VerificationTokenStore.delete(db, token)
        await db.commit()

    logger.info(f"Email verified for user {user.id}")


async def login_user(credentials: LoginRequest, db: AsyncSession) -> dict:
    async with store_failure("Internal server error", db):
        user = await UserStore.find_by_email(db, credentials.email)

    if not user or not user.hashed_password or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if user.email_verified is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Please verify your email before signing in",
        )

    return {"access_token": issue_token_for(user), "token_type": "bearer"}


def issue_token_for(user: User) -> str:
    return create_access_token(data={"sub": str(user.id)})
