import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from teamhub.core.database import get_db, init_db
from teamhub.core.security import create_access_token, get_password_hash
from teamhub.main import app
from teamhub.models.comment import Comment
from teamhub.models.project import Project
from teamhub.models.task import Task
from teamhub.models.team import Team
from teamhub.models.user import User
from teamhub.permissions import Kind, Requester
from teamhub.store import EntityStore

PASSWORD = "secret123"
PASSWORD_HASH = get_password_hash(PASSWORD)

KINDS = {Team: Kind.TEAM, Project: Kind.PROJECT, Task: Kind.TASK, Comment: Kind.COMMENT}


class FakeStore:
    """In-memory lookup by kind and id, for engine tests without a database."""

    def __init__(self, *entities):
        self.entities = {}
        for entity in entities:
            self.put(entity)

    def put(self, entity):
        self.entities[(KINDS[type(entity)], entity.id)] = entity

    def remove(self, entity):
        self.entities.pop((KINDS[type(entity)], entity.id), None)

    async def get(self, kind, entity_id):
        return self.entities.get((kind, entity_id))


def as_requester(user) -> Requester:
    return Requester.from_user(user)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session):
    return EntityStore(session)


@pytest.fixture
def make_user(store):
    async def _make_user(name, role="user"):
        user = User(
            name=name,
            last_name="Tester",
            email=f"{name.lower()}@example.com",
            hashed_password=PASSWORD_HASH,
            role=role,
        )
        return await store.add(user)

    return _make_user


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': str(user.id)})}"}
