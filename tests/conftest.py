"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database (one shared connection
through StaticPool) and an httpx client bound to the app with ``get_db``
pointed at that database. ``factory`` seeds records directly through the
ORM; ``auth`` mints bearer headers for a seeded user.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import itertools  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from crm_backend.core.security import create_access_token, hash_password  # noqa: E402
from crm_backend.db.session import get_db  # noqa: E402
from crm_backend.models import (  # noqa: E402
    Base,
    Client,
    Company,
    Contact,
    Interaction,
    Lead,
    Task,
    User,
    UserRole,
)
from main import app  # noqa: E402

PASSWORD = "s3cret-passw0rd"


@pytest.fixture()
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Factory:
    """Seeds records straight through the ORM and commits each one."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._seq = itertools.count(1)

    async def _save(self, record):
        self.session.add(record)
        await self.session.commit()
        return record

    async def company(self, name: Optional[str] = None) -> Company:
        return await self._save(Company(name=name or f"Company {next(self._seq)}"))

    async def user(
        self,
        company: Optional[Company] = None,
        role: UserRole = UserRole.sales,
        email: Optional[str] = None,
        name: str = "Test User",
    ) -> User:
        return await self._save(
            User(
                name=name,
                email=email or f"user{next(self._seq)}@acme.io",
                hashed_password=hash_password(PASSWORD),
                role=role.value,
                company_id=company.id if company else None,
            )
        )

    async def client(self, company: Company, name: Optional[str] = None, **values) -> Client:
        return await self._save(
            Client(company_id=company.id, name=name or f"Client {next(self._seq)}", **values)
        )

    async def contact(self, client: Client, **values) -> Contact:
        seq = next(self._seq)
        values.setdefault("email", f"contact{seq}@acme.io")
        return await self._save(
            Contact(client_id=client.id, name=f"Doe {seq}", first_name="Jane", **values)
        )

    async def lead(self, client: Client, owner: Optional[User] = None, **values) -> Lead:
        return await self._save(
            Lead(
                client_id=client.id,
                user_id=owner.id if owner else None,
                name=values.pop("name", f"Lead {next(self._seq)}"),
                **values,
            )
        )

    async def interaction(self, lead: Lead, **values) -> Interaction:
        return await self._save(Interaction(lead_id=lead.id, **values))

    async def task(self, interaction: Interaction, assignee: Optional[User] = None, **values) -> Task:
        return await self._save(
            Task(
                interaction_id=interaction.id,
                title=values.pop("title", f"Task {next(self._seq)}"),
                due_date=values.pop("due_date", datetime.now(timezone.utc) + timedelta(days=3)),
                assigned_to=assignee.id if assignee else None,
                **values,
            )
        )


@pytest.fixture()
def factory(db) -> Factory:
    return Factory(db)


@pytest.fixture()
def auth():
    def headers(user: User) -> dict:
        token = create_access_token(subject=user.id, tenant_id=user.company_id, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return headers


@pytest.fixture()
async def tenants(factory):
    """
    Two companies with the same CRM shape:
    tenant A: clients C1, C2; C1 → lead L1 → interaction I1 → tasks T1, T2
    tenant B: one client → lead → interaction → task
    """
    company_a = await factory.company("Tenant A")
    company_b = await factory.company("Tenant B")
    sales_a = await factory.user(company_a, UserRole.sales, email="sales@tenant-a.io")
    admin_a = await factory.user(company_a, UserRole.admin, email="admin@tenant-a.io")
    sales_b = await factory.user(company_b, UserRole.sales, email="sales@tenant-b.io")
    super_admin = await factory.user(None, UserRole.super_admin, email="root@platform.io")

    c1 = await factory.client(company_a, "C1")
    c2 = await factory.client(company_a, "C2")
    l1 = await factory.lead(c1, owner=sales_a, name="L1")
    i1 = await factory.interaction(l1)
    t1 = await factory.task(i1, assignee=sales_a, title="T1")
    t2 = await factory.task(i1, assignee=admin_a, title="T2")

    cb = await factory.client(company_b, "CB")
    lb = await factory.lead(cb, owner=sales_b, name="LB")
    ib = await factory.interaction(lb)
    tb = await factory.task(ib, assignee=sales_b, title="TB")

    return {
        "company_a": company_a,
        "company_b": company_b,
        "sales_a": sales_a,
        "admin_a": admin_a,
        "sales_b": sales_b,
        "super_admin": super_admin,
        "c1": c1,
        "c2": c2,
        "l1": l1,
        "i1": i1,
        "t1": t1,
        "t2": t2,
        "cb": cb,
        "lb": lb,
        "ib": ib,
        "tb": tb,
    }
