# ledger_api/api/v1/routes/transactions.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from ledger_api.schemas.transaction import (
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
    MessageResponse,
)
from ledger_api.crud.transaction import (
    create_transaction_for_user,
    get_all_transactions,
    get_transaction_by_id,
    update_transaction,
    delete_transaction,
)
from ledger_api.core.database import get_async_session
from ledger_api.core.errors import NotFound
from ledger_api.core.session import UserSession
from ledger_api.api.deps import (
    json_body_schema,
    parse_object_id,
    read_json_body,
    require_admin,
    require_auth,
)
from ledger_api.utils.validation import validate_transaction_create, validate_transaction_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

NOT_FOUND = "Transacción no encontrada"

# The ledger is shared: any signed-in user may read it, only admins may change it

@router.get("", response_model=List[TransactionRead])
async def read_transactions(
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_auth),
):
    return await get_all_transactions(db)

@router.post(
    "",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=json_body_schema(TransactionCreate),
)
async def create_transaction(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_admin),
):
    tx_in = await read_json_body(request, TransactionCreate)
    values = validate_transaction_create(tx_in.model_dump())
    tx = await create_transaction_for_user(session.id, values, db)
    logger.info(f"Transaction {tx.id} created by {session.email}")
    return tx

@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: str,
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_auth),
):
    tx = await get_transaction_by_id(parse_object_id(transaction_id, NOT_FOUND), db)
    if not tx:
        raise NotFound(NOT_FOUND)
    return tx

@router.put(
    "/{transaction_id}",
    response_model=TransactionRead,
    openapi_extra=json_body_schema(TransactionUpdate),
)
async def update_transaction_endpoint(
    transaction_id: str,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_admin),
):
    tx_in = await read_json_body(request, TransactionUpdate)
    values = validate_transaction_update(tx_in.model_dump(exclude_unset=True))
    tx = await update_transaction(parse_object_id(transaction_id, NOT_FOUND), values, db)
    if not tx:
        raise NotFound(NOT_FOUND)
    logger.info(f"Transaction {transaction_id} updated by {session.email}")
    return tx

@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction_endpoint(
    transaction_id: str,
    db: AsyncSession = Depends(get_async_session),
    session: UserSession = Depends(require_admin),
):
    if not await delete_transaction(parse_object_id(transaction_id, NOT_FOUND), db):
        raise NotFound(NOT_FOUND)
    logger.info(f"Transaction {transaction_id} deleted by {session.email}")
    return {"message": "Transacción eliminada exitosamente"}
