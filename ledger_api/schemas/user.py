# ledger_api/schemas/user.py
from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, field_serializer
import uuid

from ledger_api.core.auth import Role
from ledger_api.schemas.base import CamelModel, as_utc

# Fields returned on GET /users and PUT /users/{id}
class UserAdminRead(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: Role
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_utc(self, value: datetime) -> str:
        return as_utc(value).isoformat()

# Fields accepted on PUT /users/{id}; explicit null for phone clears it
class UserAdminUpdate(BaseModel):
    name: Any = None
    role: Any = None
    phone: Any = None
