"""SQL User Resolver: author existence checks against the users table."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storedir.core.domain_types import UserId
from storedir.models.user import User


class SqlUserResolver:
    """UserResolver Protocol: id -> exists."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, user_id: UserId) -> bool:
        result = await self.db.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None
