"""
Shared fixtures for the ledger test-suite.

Every test gets its own SQLite file so that concurrent sessions really hit
separate connections, the way two admin requests would.
"""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ledger_server.core.security import create_access_token
from ledger_server.db import models  # noqa: F401
from ledger_server.infrastructure.database import Base, enable_sqlite_savepoints
from ledger_server.interfaces.http.deps import get_db_session
from ledger_server.main import create_app
from ledger_server.modules.accounts import Account, AccountCreateInput, AccountService


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory) -> FastAPI:
    app = create_app()

    async def get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = get_test_db
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def create_account(session: AsyncSession, username: str, role: str = "owner") -> Account:
    account = await AccountService.with_session(session).create_account(
        AccountCreateInput(
            username=username,
            password="secret123",
            role=role,
            email=f"{username}@example.com",
        )
    )
    await session.commit()
    return account


def auth_headers(account: Account) -> dict[str, str]:
    token = create_access_token(account.id, account.username, account.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def owner(session) -> Account:
    return await create_account(session, "owner1")


@pytest.fixture
async def admin(session) -> Account:
    return await create_account(session, "admin1", role="admin")
