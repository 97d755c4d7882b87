"""
Shared pytest fixtures for the ledger API test suite.

Uses FastAPI TestClient with an isolated temporary SQLite database per test,
so tests never touch the configured database.
"""

import asyncio
import os
from datetime import datetime

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-ledger-suite")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ledger_api.core.auth import Role, User
from ledger_api.core.config import settings
from ledger_api.core.database import Base, get_async_session
from ledger_api.core.security import create_access_token
from ledger_api.main import app
from ledger_api.models.transaction import Transaction, TransactionType

API = settings.API_PREFIX


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger-test.db'}",
        poolclass=NullPool,
    )
    asyncio.run(_create_tables(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def query_counter(engine):
    """Counts every statement sent to the test database."""
    counter = {"count": 0}

    def _count(conn, cursor, statement, parameters, context, executemany):
        counter["count"] += 1

    event.listen(engine.sync_engine, "before_cursor_execute", _count)
    yield counter
    event.remove(engine.sync_engine, "before_cursor_execute", _count)


@pytest.fixture
def client(session_maker):
    async def override_get_async_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_maker):
    def _make(name, email, role=Role.ADMIN, phone=None, created_at=None, is_active=True):
        async def _insert():
            async with session_maker() as session:
                user = User(
                    name=name,
                    email=email,
                    hashed_password="not-a-real-hash",
                    role=role,
                    phone=phone,
                    is_active=is_active,
                )
                if created_at is not None:
                    user.created_at = created_at
                session.add(user)
                await session.commit()
                return user

        return asyncio.run(_insert())

    return _make


@pytest.fixture
def make_transaction(session_maker):
    def _make(owner, concept, amount, date, tx_type):
        async def _insert():
            async with session_maker() as session:
                tx = Transaction(
                    concept=concept,
                    amount=amount,
                    date=date,
                    type=tx_type,
                    user_id=owner.id,
                )
                session.add(tx)
                await session.commit()
                return tx

        return asyncio.run(_insert())

    return _make


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


@pytest.fixture
def admin(make_user):
    return make_user("Ana Admin", "ana@example.com", Role.ADMIN)


@pytest.fixture
def member(make_user):
    return make_user("Mario Usuario", "mario@example.com", Role.USER)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def member_headers(member):
    return bearer(member)


@pytest.fixture
def sample_ledger(admin, make_transaction):
    """Three months of activity, inserted out of date order."""
    return [
        make_transaction(admin, "Venta", 150, datetime(2025, 1, 10), TransactionType.INCOME),
        make_transaction(admin, "Alquiler", 80.5, datetime(2025, 2, 3), TransactionType.EXPENSE),
        make_transaction(admin, "Consultoría", 300, datetime(2025, 2, 20), TransactionType.INCOME),
        make_transaction(admin, "Papelería", 19.5, datetime(2025, 1, 25), TransactionType.EXPENSE),
        make_transaction(admin, "Servicios", 45, datetime(2025, 3, 1), TransactionType.EXPENSE),
    ]
