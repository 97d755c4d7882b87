# ledger_api/api/v1/routes/auth.py
from fastapi import APIRouter

from ledger_api.core.auth import (
    fastapi_users,
    auth_backend,
    cookie_backend,
    UserRead,
    UserCreate,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Cookie login: sets the session cookie read by the access guard
router.include_router(
    fastapi_users.get_auth_router(cookie_backend),
    prefix="/cookie",
)

# JWT login: returns a bearer token for API clients
router.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/jwt",
)

# Registration (role is assigned server-side)
router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
)
