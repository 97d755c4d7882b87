#!/usr/bin/env python3
"""
Standalone script to create an administrator for the Finance Ledger API
Usage: python create_admin.py
"""

import asyncio
import getpass
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from fastapi_users.db import SQLAlchemyUserDatabase

from ledger_api.core.config import settings
from ledger_api.core.auth import Role, User, UserManager, UserCreate
from ledger_api.core.database import Base
from ledger_api.models import transaction  # noqa: F401

async def create_admin():
    print("Creating administrator...")

    email = input("Enter admin email: ") or "admin@example.com"
    password = getpass.getpass("Enter admin password: ") or "admin123"
    name = input("Enter full name (optional): ") or "Administrador"

    engine = create_async_engine(settings.DATABASE_URL)
    async_session_maker = async_sessionmaker(engine, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        try:
            user_db = SQLAlchemyUserDatabase(session, User)
            user_manager = UserManager(user_db)

            existing_user = await user_db.get_by_email(email)
            if existing_user:
                if existing_user.role != Role.ADMIN:
                    await user_db.update(existing_user, {"role": Role.ADMIN})
                    print(f"✅ Promoted {email} to ADMIN")
                else:
                    print(f"User with email {email} is already an administrator!")
                return

            admin = await user_manager.create(
                UserCreate(email=email, password=password, name=name, is_verified=True)
            )
            # Registration never lets the client pick a role; set it explicitly here
            admin = await user_db.update(admin, {"role": Role.ADMIN, "is_superuser": True})
            print("✅ Administrator created successfully!")
            print(f"📧 Email: {admin.email}")
            print(f"👤 Name: {admin.name}")
            print(f"🔑 ID: {admin.id}")

        except Exception as e:
            print(f"❌ Error creating administrator: {e}")
        finally:
            await session.close()
            await engine.dispose()

if __name__ == "__main__":
    asyncio.run(create_admin())
