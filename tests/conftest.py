"""Pytest fixtures: a throwaway sqlite database, seeded users and an API client."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from commandcenter.api.v1.auth import create_access_token
from commandcenter.db.base import Base
from commandcenter.db.session import get_db_session
from commandcenter.main import app
from commandcenter.models.user import User
from commandcenter.models.workspace import Workspace, WorkspaceRole, WorkspaceUser


@dataclass
class Account:
    """A seeded user, their workspace and ready-made auth headers."""

    user: User
    workspace: Workspace | None

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(self.user.id)}"}


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


async def make_account(
    db: AsyncSession,
    email: str,
    name: str,
    workspace_slug: str | None = None,
) -> Account:
    user = User(email=email, name=name)
    db.add(user)
    await db.flush()

    workspace = None
    if workspace_slug:
        workspace = Workspace(name=f"{name}'s Workspace", slug=workspace_slug)
        db.add(workspace)
        await db.flush()
        db.add(WorkspaceUser(user_id=user.id, workspace_id=workspace.id, role=WorkspaceRole.OWNER))

    await db.commit()
    return Account(user=user, workspace=workspace)


@pytest.fixture
async def alice(db) -> Account:
    return await make_account(db, "alice@example.com", "Alice", "alice-co")


@pytest.fixture
async def bob(db) -> Account:
    return await make_account(db, "bob@example.com", "Bob", "bob-co")


@pytest.fixture
async def drifter(db) -> Account:
    """Authenticated user without any workspace."""
    return await make_account(db, "drifter@example.com", "Drifter")


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
