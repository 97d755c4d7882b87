# ledger_api/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc, update, delete
from ledger_api.core.database import utc_now
from ledger_api.models.transaction import Transaction
from typing import Any, Dict, List, Optional
import uuid

async def get_all_transactions(db: AsyncSession) -> List[Transaction]:
    """Every transaction in the ledger with its owner joined, newest first."""
    result = await db.execute(
        select(Transaction).order_by(desc(Transaction.date), desc(Transaction.created_at))
    )
    return result.scalars().unique().all()

async def get_transaction_by_id(transaction_id: uuid.UUID, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(Transaction.id == transaction_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().unique().one_or_none()

async def create_transaction_for_user(user_id: uuid.UUID, values: Dict[str, Any], db: AsyncSession) -> Transaction:
    new_tx = Transaction(**values, user_id=user_id)
    db.add(new_tx)
    await db.commit()
    # Reload through the joined query so the owner is populated
    return await get_transaction_by_id(new_tx.id, db)

async def update_transaction(transaction_id: uuid.UUID, values: Dict[str, Any], db: AsyncSession) -> Optional[Transaction]:
    """Apply a partial update. Returns None when no row has that id."""
    if not values:
        return await get_transaction_by_id(transaction_id, db)

    result = await db.execute(
        update(Transaction)
        .where(Transaction.id == transaction_id)
        .values(**values, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return None
    await db.commit()
    return await get_transaction_by_id(transaction_id, db)

async def delete_transaction(transaction_id: uuid.UUID, db: AsyncSession) -> bool:
    """Returns False when no row has that id."""
    result = await db.execute(
        delete(Transaction)
        .where(Transaction.id == transaction_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return False
    await db.commit()
    return True
