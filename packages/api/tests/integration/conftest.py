# This project was developed with assistance from AI tools.
"""Integration test fixtures -- real PostgreSQL, no mocks.

A session-scoped container provides a migrated PostgreSQL instance.
Function-scoped fixtures give each test an isolated DB session with
savepoint rollback so tests don't leak state. Tests that need two
independent connections (version conflicts) use ``committed_seed`` and
are truncated afterwards instead.
"""

import os
from collections import namedtuple

import httpx
import pytest
import pytest_asyncio
from docker.errors import DockerException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

pytestmark = pytest.mark.integration

_DB_PACKAGE = os.path.join(os.path.dirname(__file__), "..", "..", "..", "db")


# ---------------------------------------------------------------------------
# Session-scoped: container + engine + migrations
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def pg_container():
    """Start postgres:16 via testcontainers. Skips when Docker is unreachable."""
    try:
        container = PostgresContainer(
            image="postgres:16",
            username="test",
            password="test",
            dbname="test",
        )
        container.start()
    except DockerException as exc:
        pytest.skip(f"Docker is not available: {exc}")
    yield container
    container.stop()


@pytest.fixture(scope="session")
def db_url(pg_container):
    """Async DB URL for asyncpg."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+asyncpg://test:test@{host}:{port}/test"


@pytest.fixture(scope="session")
def sync_db_url(pg_container):
    """Sync DB URL for Alembic (psycopg2)."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+psycopg2://test:test@{host}:{port}/test"


@pytest.fixture(scope="session")
def _run_migrations(sync_db_url):
    """alembic upgrade head against the container."""
    from alembic import command
    from alembic.config import Config

    os.environ["DATABASE_URL"] = sync_db_url
    alembic_cfg = Config(os.path.join(_DB_PACKAGE, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(_DB_PACKAGE, "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_db_url)
    command.upgrade(alembic_cfg, "head")


@pytest.fixture(scope="session")
def async_engine(db_url, _run_migrations):
    """Async engine pointing at the test container.

    NullPool so no connection outlives the event loop of the test that
    opened it.
    """
    engine = create_async_engine(db_url, echo=False, poolclass=NullPool)
    yield engine


@pytest.fixture(scope="session")
def session_factory(async_engine):
    """Same settings as ``db.database.SessionLocal``, bound to the container."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def _bind_db_module(async_engine, session_factory, monkeypatch):
    """Point db.database globals at the test container.

    Function-scoped and pulled in by the DB fixtures, so a unit-only run
    never starts a container.
    """
    import db.database as db_mod

    monkeypatch.setattr(db_mod, "engine", async_engine)
    monkeypatch.setattr(db_mod, "SessionLocal", session_factory)
    monkeypatch.setattr(db_mod, "db_service", db_mod.DatabaseService(engine=async_engine))


# ---------------------------------------------------------------------------
# Function-scoped: per-test session with savepoint rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(async_engine, _bind_db_module):
    """Per-test DB session with savepoint rollback.

    ``commit()`` inside the code under test releases a savepoint; the outer
    transaction is rolled back when the test ends.
    """
    conn = await async_engine.connect()
    txn = await conn.begin()
    session = AsyncSession(
        bind=conn,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
    )
    yield session
    await session.close()
    await txn.rollback()
    await conn.close()


@pytest.fixture
def client_factory(db_session):
    """Factory returning an async httpx client with dependency overrides."""
    from db import get_db

    from src.main import app
    from src.middleware.auth import get_current_user

    async def _make(user):
        async def _get_db():
            yield db_session

        async def _get_current_user():
            return user

        app.dependency_overrides[get_db] = _get_db
        app.dependency_overrides[get_current_user] = _get_current_user
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    yield _make

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seed data helpers
# ---------------------------------------------------------------------------


class _Ref:
    """Lightweight reference holding an ID and the caller context for it."""

    def __init__(self, id: int, **kwargs):
        self.id = id
        for k, v in kwargs.items():
            setattr(self, k, v)


SeedData = namedtuple("SeedData", ["investor", "founder", "admin", "product"])


def context_for(account):
    """UserContext the auth dependency would build for a stored account."""
    from src.core.auth import build_data_scope
    from src.schemas.auth import UserContext

    return UserContext(
        user_id=account.id,
        role=account.role,
        email=account.email,
        name=account.name,
        username=account.username,
        anonymous_id=account.anonymous_id,
        verification_status=account.verification_status,
        data_scope=build_data_scope(account.role, account.id),
    )


async def _seed(session: AsyncSession) -> SeedData:
    from db import Product, User
    from db.enums import ProductStatus, UserRole, VerificationStatus

    investor = User(
        username="irene",
        email="irene@fund.example",
        name="Irene Investor",
        password_hash="not-a-real-hash",
        role=UserRole.INVESTOR,
        anonymous_id="inv-irene",
        documents={},
        documents_meta={},
    )
    founder = User(
        username="fatima",
        email="fatima@cardiosense.example",
        name="Fatima Founder",
        password_hash="not-a-real-hash",
        role=UserRole.FOUNDER,
        anonymous_id="fnd-fatima",
        verification_status=VerificationStatus.APPROVED,
        documents={},
        documents_meta={},
    )
    admin = User(
        username="ava",
        email="ava@venture-bridge.example",
        name="Ava Admin",
        password_hash="not-a-real-hash",
        role=UserRole.ADMIN,
        anonymous_id="adm-ava",
        documents={},
        documents_meta={},
    )
    session.add_all([investor, founder, admin])
    await session.flush()

    product = Product(
        founder_id=founder.id,
        name="CardioSense",
        category="HealthTech",
        description="Wearable arrhythmia detection",
        tags=["wearables"],
        benefits=[],
        status=ProductStatus.APPROVED,
        interest_count=0,
    )
    session.add(product)
    await session.flush()

    return SeedData(
        investor=_Ref(investor.id, ctx=context_for(investor)),
        founder=_Ref(founder.id, ctx=context_for(founder)),
        admin=_Ref(admin.id, ctx=context_for(admin)),
        product=_Ref(product.id),
    )


@pytest_asyncio.fixture
async def seed_data(db_session):
    """Investor, verified founder, admin and one approved product."""
    return await _seed(db_session)


async def truncate_all(session_factory) -> None:
    async with session_factory() as session:
        await session.execute(
            text(
                "TRUNCATE audit_events, service_requests, mentor_communications, call_requests, "
                "investor_queries, products, users "
                "RESTART IDENTITY CASCADE"
            )
        )
        await session.commit()


@pytest_asyncio.fixture
async def committed_seed(session_factory, _bind_db_module):
    """Seed data committed for real so separate sessions can see it."""
    async with session_factory() as session:
        seed = await _seed(session)
        await session.commit()
    yield seed
    await truncate_all(session_factory)
