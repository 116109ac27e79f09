from typing import Optional
from pydantic import BaseModel

from leadwatch.models.user import UserRole


class TokenData(BaseModel):
    """Token payload data schema."""
    user_id: Optional[int] = None
    role: Optional[str] = None


class CallerIdentity(BaseModel):
    """Pre-resolved identity of the user calling a reporting endpoint."""
    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
