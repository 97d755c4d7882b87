# ledger_api/schemas/transaction.py
from typing import Any, Optional
from pydantic import BaseModel, Field, field_serializer
from datetime import datetime
import uuid

from ledger_api.models.transaction import TransactionType
from ledger_api.schemas.base import CamelModel, as_utc

# Request bodies accept any JSON value; field rules live in utils/validation.py
class TransactionCreate(BaseModel):
    concept: Any = Field(None, description="E.g. Venta de producto")
    amount: Any = Field(None, description="Positive number; numeric strings are accepted")
    date: Any = Field(None, description="ISO 8601 date/time of transaction")
    type: Any = Field(None, description="INCOME or EXPENSE")

class TransactionUpdate(BaseModel):
    concept: Any = None
    amount: Any = None
    date: Any = None
    type: Any = None

class TransactionOwner(CamelModel):
    name: str
    email: str

class TransactionRead(CamelModel):
    id: uuid.UUID
    concept: str
    amount: float
    date: datetime
    type: TransactionType
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    user: Optional[TransactionOwner] = None

    @field_serializer("date", "created_at", "updated_at")
    def _serialize_utc(self, value: datetime) -> str:
        return as_utc(value).isoformat()

class MessageResponse(BaseModel):
    message: str
