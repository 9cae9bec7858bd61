"""Shared fixtures: in-memory database, ASGI client and user helpers."""

import os
from decimal import Decimal
from pathlib import Path

os.environ.setdefault(
    "CONFIG",
    str(Path(__file__).resolve().parents[1] / "resources" / "config" / "test.yaml"),
)

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from kostkelola_backend.core.exceptions import ExternalServiceError
from kostkelola_backend.database import Base, get_db, import_models
from kostkelola_backend.main import app
from kostkelola_backend.modules.auth import crud as auth_crud
from kostkelola_backend.modules.auth.models import RoleSlug
from kostkelola_backend.modules.property_management.schemas import (
    PropertyCreate,
    RoomCreate,
)
from kostkelola_backend.modules.property_management.services import (
    create_property,
    create_room,
)
from kostkelola_backend.modules.realtime import ChangeFeedBroker
from kostkelola_backend.modules.subscriptions.models import SubscriptionPlan
from kostkelola_backend.modules.subscriptions.schemas import SubscriptionAssign
from kostkelola_backend.modules.subscriptions.seed import seed_subscription_plans
from kostkelola_backend.modules.subscriptions.services import assign_subscription

PASSWORD = "s3cret-password"


class RecordingMailer:
    """Keeps sent mails in memory.

    ``fail`` makes every send raise; ``fail_for`` only the listed recipients.
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.fail_for: set[str] = set()
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.fail or to in self.fail_for:
            raise ExternalServiceError("smtp", "send")
        self.sent.append((to, subject, body))


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def broker():
    broker = ChangeFeedBroker()
    app.state.broker = broker
    return broker


@pytest.fixture
def mailer():
    mailer = RecordingMailer()
    app.state.mailer = mailer
    return mailer


@pytest.fixture
async def client(session_factory, broker, mailer):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Create a user straight in the database."""

    async def _make_user(
        email: str, role: RoleSlug = RoleSlug.OWNER, full_name: str | None = None
    ):
        user = await auth_crud.create_user(
            db,
            email=email,
            password=PASSWORD,
            full_name=full_name or email.split("@")[0].title(),
            role=role,
        )
        await db.commit()
        return user

    return _make_user


@pytest.fixture
def login(client):
    """Log an existing user in and return bearer headers."""

    async def _login(email: str, password: str = PASSWORD) -> dict[str, str]:
        response = await client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        token = response.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
def register(client):
    """Self-register an account and return ``(user_id, headers)``."""

    async def _register(email: str, role: str = "owner") -> tuple[int, dict[str, str]]:
        response = await client.post(
            "/api/auth/register",
            json={
                "email": email,
                "password": PASSWORD,
                "full_name": email.split("@")[0].title(),
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        headers = {"Authorization": f"Bearer {response.json()['data']['access_token']}"}
        me = await client.get("/api/auth/me", headers=headers)
        return me.json()["data"]["id"], headers

    return _register


@pytest.fixture
async def plans(db) -> dict[str, SubscriptionPlan]:
    await seed_subscription_plans(db)
    await db.commit()

    result = await db.execute(select(SubscriptionPlan))
    return {plan.name: plan for plan in result.scalars().all()}


@pytest.fixture
def subscribe(db, plans):
    async def _subscribe(user_id: int, plan_name: str = "Pro"):
        return await assign_subscription(
            db, user_id, SubscriptionAssign(plan_id=plans[plan_name].id)
        )

    return _subscribe


@pytest.fixture
async def owner(make_user):
    return await make_user("owner@example.com")


@pytest.fixture
async def kost(db, owner):
    """A property with contact email and one room priced at 1.500.000."""
    property_obj = await create_property(
        db,
        owner.id,
        PropertyCreate(name="Kost Melati", city="Bandung", email="melati@example.com"),
    )
    room = await create_room(
        db, property_obj.id, owner.id, RoomCreate(name="A1", price=Decimal("1500000"))
    )
    return property_obj, room
