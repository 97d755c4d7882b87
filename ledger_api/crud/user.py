# ledger_api/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc, update
from ledger_api.core.auth import User
from typing import Any, Dict, Optional, List
import uuid

async def get_all_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(desc(User.created_at)))
    return result.scalars().all()

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def update_user_fields(user_id: uuid.UUID, values: Dict[str, Any], db: AsyncSession) -> Optional[User]:
    """Apply a partial update to name/role/phone. Returns None when no row has that id."""
    if not values:
        return await get_user_by_id(user_id, db)

    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return None
    await db.commit()
    return await get_user_by_id(user_id, db)
