# ledger_api/api/v1/routes/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_api.api.deps import (
    json_body_schema,
    parse_object_id,
    read_json_body,
    require_admin,
    require_auth,
)
from ledger_api.core.database import get_async_session
from ledger_api.core.errors import NotFound
from ledger_api.core.session import UserSession
from ledger_api.crud.user import get_all_users, update_user_fields
from ledger_api.schemas.user import UserAdminRead, UserAdminUpdate
from ledger_api.utils.validation import validate_user_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["User Management"])

NOT_FOUND = "Usuario no encontrado"

# 1) GET /users/me
@router.get("/me", response_model=UserSession)
async def read_own_session(session: UserSession = Depends(require_auth)):
    """Identity and role of the signed-in caller"""
    return session

# 2) GET /users
@router.get("", response_model=List[UserAdminRead])
async def list_users(
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_admin),
):
    """All registered users, newest first"""
    return await get_all_users(db)

# 3) PUT /users/{user_id}
@router.put(
    "/{user_id}",
    response_model=UserAdminRead,
    openapi_extra=json_body_schema(UserAdminUpdate),
)
async def update_user(
    user_id: str,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_admin),
):
    """
    Update another user's name, role or phone. Only the fields present in the
    body are touched; sending "phone": null clears the phone number.
    """
    user_update = await read_json_body(request, UserAdminUpdate)
    values = validate_user_update(user_update.model_dump(exclude_unset=True))
    user = await update_user_fields(parse_object_id(user_id, NOT_FOUND), values, db)
    if not user:
        raise NotFound(NOT_FOUND)
    logger.info(f"User {user.email} updated by {session.email}: {sorted(values)}")
    return user
