from __future__ import annotations

import os
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from personal_crm.core.config import Settings, get_settings

ROOT = Path(__file__).resolve().parents[1]
TEST_DB_PATH = ROOT / "test.db"
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
get_settings.cache_clear()

from personal_crm.core.db import create_engine, create_session_factory, get_session  # noqa: E402
from personal_crm.core.events import EventBus  # noqa: E402
from personal_crm.core.migrations import run_migrations  # noqa: E402
from personal_crm.services.crm import CrmService  # noqa: E402


@pytest.fixture()
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'crm.db'}")
    await run_migrations(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session


@pytest.fixture()
def events() -> EventBus:
    return EventBus()


@pytest.fixture()
def service(session: AsyncSession, events: EventBus) -> CrmService:
    return CrmService(session, events=events, settings=Settings())


@pytest.fixture()
async def client(engine: AsyncEngine) -> AsyncIterator[AsyncClient]:
    from personal_crm.main import app

    session_factory = create_session_factory(engine)

    async def override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"
