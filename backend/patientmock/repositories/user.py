"""User repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from patientmock.models.user import User


class UserRepository:
    """Repository for the demo users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, limit: int, offset: int) -> list[User]:
        """List one window of users ordered by id."""
        result = await self.db.execute(select(User).order_by(User.id).offset(offset).limit(limit))
        return list(result.scalars().all())

    async def get(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def create(self, name: str, email: str) -> User:
        user = User(name=name, email=email)
        self.db.add(user)
        await self.db.flush()
        return user

    async def update(self, user: User, name: str, email: str) -> User:
        user.name = name
        user.email = email
        await self.db.flush()
        return user

    async def delete(self, user: User) -> None:
        await self.db.delete(user)
        await self.db.flush()
