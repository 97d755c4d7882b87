# ledger_api/api/deps.py
from typing import Any, Dict, Optional, Type, TypeVar
import logging
import uuid

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_api.core.config import settings
from ledger_api.core.database import get_async_session
from ledger_api.core.errors import Forbidden, NotFound, Unauthorized, invalid_body
from ledger_api.core.session import SessionResolver, UserSession

logger = logging.getLogger(__name__)

BodyT = TypeVar("BodyT", bound=BaseModel)


def get_session_resolver(db: AsyncSession = Depends(get_async_session)) -> SessionResolver:
    return SessionResolver(db)


def get_request_credentials(request: Request) -> Optional[str]:
    """
    Pull the credential from the places a client may send it:
    - Authorization header (Bearer)
    - Session cookie
    """
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None

    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token and token.startswith("Bearer "):
        token = token[7:]
    return token or None


async def require_auth(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver),
) -> UserSession:
    """
    Guard for routes open to any signed-in user. Resolution failures of any
    kind reject the request with 401.
    """
    credentials = get_request_credentials(request)
    if credentials is None:
        raise Unauthorized()

    try:
        session = await resolver.resolve_session(credentials)
    except Exception as e:
        logger.error(f"Authentication error: {str(e)}")
        raise Unauthorized()

    if session is None:
        raise Unauthorized()

    request.state.user = session
    return session


async def require_admin(session: UserSession = Depends(require_auth)) -> UserSession:
    """Guard for administrator-only routes."""
    if not session.is_admin:
        raise Forbidden()
    return session


def parse_object_id(raw_id: str, not_found_message: str) -> uuid.UUID:
    """Ids that are not even well-formed cannot resolve to a row."""
    try:
        return uuid.UUID(raw_id)
    except ValueError:
        raise NotFound(not_found_message)


async def read_json_body(request: Request, model: Type[BodyT]) -> BodyT:
    """
    Decode and validate the JSON body from inside a handler. The guard has
    already run by then, so a caller without a valid session gets 401/403
    whatever body they sent.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise invalid_body()
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise invalid_body(e.errors())


def json_body_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """OpenAPI requestBody for routes that read their body with read_json_body."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }
