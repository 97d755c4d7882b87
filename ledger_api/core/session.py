# ledger_api/core/session.py
"""
Session resolution: turns an opaque credential (session cookie or bearer
token) into the identity and role of the caller.
"""
import uuid
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import Role, User
from .security import decode_access_token

logger = logging.getLogger(__name__)


class UserSession(BaseModel):
    """Resolved identity and role for the current request."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class SessionResolver:
    """
    Identity verification capability, built per request around the request's
    database session. It keeps no state between calls.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve_session(self, credentials: Optional[str]) -> Optional[UserSession]:
        if not credentials:
            return None

        user_id_str = decode_access_token(credentials)
        if not user_id_str:
            return None

        try:
            user_id = uuid.UUID(user_id_str)
        except ValueError:
            logger.warning("Token subject is not a valid user id")
            return None

        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalars().first()
        if user is None or not user.is_active:
            return None

        return UserSession.model_validate(user)
