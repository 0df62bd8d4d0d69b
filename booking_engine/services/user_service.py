"""User service - Business logic for member records."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from booking_engine.models.user import User
from booking_engine.schemas.user import UserIdentify


class UserService:
    """Service class for user operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get a user by ID."""
        return await self.db.get(User, user_id)

    async def get_user_by_external_id(self, external_id: str) -> User | None:
        """Get a user by identity provider id."""
        result = await self.db.execute(
            select(User).where(User.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def identify_or_create_user(self, user_data: UserIdentify) -> User:
        """Upsert a member from verified identity claims."""
        user = await self.get_user_by_external_id(user_data.external_id)

        if user:
            # Identity provider is the source of truth for name and email
            user.name = user_data.name
            user.email = user_data.email
            if user_data.phone:
                user.phone = user_data.phone
            await self.db.flush()
            await self.db.refresh(user)
            return user

        user = User(**user_data.model_dump())
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user
