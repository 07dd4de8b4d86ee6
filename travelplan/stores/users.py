from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelplan.models.user.user import User
from travelplan.models.user.verification_token import VerificationToken
from travelplan.stores.criteria import AnyOf, Contains, Criterion, Eq, Not, compile_criteria


class UserStore:
    @staticmethod
    async def get(db: AsyncSession, user_id: int) -> Optional[User]:
        return await db.get(User, user_id)

    @staticmethod
    async def find_one(db: AsyncSession, *criteria: Criterion) -> Optional[User]:
        result = await db.execute(select(User).where(compile_criteria(User, criteria)).limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
        return await UserStore.find_one(db, Eq("email", email))

    @staticmethod
    async def find_many(db: AsyncSession, *criteria: Criterion, limit: Optional[int] = None) -> List[User]:
        stmt = select(User).where(compile_criteria(User, criteria))
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def search(db: AsyncSession, text: str, exclude_user_id: int, limit: int) -> List[User]:
        """Users whose name or email contains `text`, other than `exclude_user_id`."""
        return await UserStore.find_many(
            db,
            AnyOf(Contains("name", text), Contains("email", text)),
            Not(Eq("id", exclude_user_id)),
            limit=limit,
        )

    @staticmethod
    async def create(db: AsyncSession, name: str, email: str, hashed_password: str) -> User:
        user = User(name=name, email=email, hashed_password=hashed_password, email_verified=None)
        db.add(user)
        await db.flush()
        return user

    @staticmethod
    async def mark_verified(db: AsyncSession, user: User, verified_at: datetime) -> User:
        user.email_verified = verified_at
        await db.flush()
        return user


class VerificationTokenStore:
    @staticmethod
    async def create(db: AsyncSession, identifier: str, token: str, expires: datetime) -> VerificationToken:
        record = VerificationToken(identifier=identifier, token=token, expires=expires)
        db.add(record)
        await db.flush()
        return record

    @staticmethod
    async def find(db: AsyncSession, token: str) -> Optional[VerificationToken]:
        return await db.get(VerificationToken, token)

    @staticmethod
    async def delete(db: AsyncSession, token: str) -> bool:
        """Remove a token. Deleting a token that is already gone is a no-op."""
        result = await db.execute(delete(VerificationToken).where(VerificationToken.token == token))
        return result.rowcount > 0
