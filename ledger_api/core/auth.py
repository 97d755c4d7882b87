# ledger_api/core/auth.py

import enum
import uuid
import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, BaseUserManager, UUIDIDMixin
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    CookieTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users import schemas

from sqlalchemy import Column, String, Boolean, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.ext.asyncio import AsyncSession

from .database import Base, get_async_session, utc_now
from .config import settings

logger = logging.getLogger(__name__)

# Audience fastapi-users stamps on every access token it issues
TOKEN_AUDIENCE = ["fastapi-users:auth"]


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


def default_role() -> Role:
    return Role(settings.DEFAULT_USER_ROLE)


# 1. User DB model
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(length=320), unique=True, index=True, nullable=False)
    hashed_password = Column(String(length=1024), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    # Profile fields
    name = Column(String(length=255), nullable=False)
    phone = Column(String(length=50), nullable=True)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=default_role)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    transactions = relationship(
        "Transaction",
        back_populates="user",
    )

    def __repr__(self):
        return f"<User email={self.email} role={self.role}>"


# 2. Pydantic schemas used by the registration router
class UserRead(schemas.BaseUser[uuid.UUID]):
    name: str
    phone: Optional[str] = None
    role: Role
    created_at: datetime


class UserCreate(schemas.BaseUserCreate):
    name: str
    phone: Optional[str] = None


# 3. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} has registered with role {user.role.value}")

    async def on_after_login(self, user: User, request: Optional[Request] = None, response=None):
        logger.info(f"User {user.email} logged in")

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None):
        logger.info(f"Password reset requested for user {user.email}")

    async def on_after_reset_password(self, user: User, request: Optional[Request] = None):
        logger.info(f"Password reset completed for user {user.email}")


# 4. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)


# 5. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


# 6. Authentication: the same JWT is accepted from the session cookie or a bearer header
cookie_transport = CookieTransport(
    cookie_name=settings.SESSION_COOKIE_NAME,
    cookie_max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    cookie_secure=settings.COOKIE_SECURE,
)
bearer_transport = BearerTransport(tokenUrl=f"{settings.API_PREFIX}/auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.SECRET_KEY,
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        token_audience=TOKEN_AUDIENCE,
        algorithm=settings.ALGORITHM,
    )


cookie_backend = AuthenticationBackend(
    name="cookie",
    transport=cookie_transport,
    get_strategy=get_jwt_strategy,
)

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# 7. FastAPI Users instance
fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [cookie_backend, auth_backend])

__all__ = [
    "fastapi_users",
    "auth_backend",
    "cookie_backend",
    "get_user_db",
    "get_user_manager",
    "Role",
    "User",
    "UserRead",
    "UserCreate",
    "UserManager",
]
