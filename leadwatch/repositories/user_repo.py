"""
User Repository - database operations for users.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadwatch.models.user import User, UserRole


class UserRepository:
    """Repository for User model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_ids_by_roles(self, roles: set[UserRole]) -> list[int]:
        """IDs of every user holding one of ``roles``."""
        result = await self.session.execute(
            select(User.id).where(User.role.in_(list(roles))).order_by(User.id)
        )
        return list(result.scalars().all())
