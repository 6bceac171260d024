"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sekolah.core.database import Base, get_db
from sekolah.main import create_app

# Import all models to ensure they're registered with Base.metadata
from sekolah.modules.role_permissions.models import (  # noqa: F401
    Permission,
    Role,
    RolePermission,
)
from sekolah.modules.users.models import User
from tests.helpers import bearer, make_rule, make_user


# In-memory SQLite keeps the suite self-contained
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes, ensuring test isolation.
    """
    async_session_factory = sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with async_session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    """Write a small rule file for CLI and seeding tests."""
    path = tmp_path / "rules.yaml"
    path.write_text(
        """
roles:
  - name: guru
    description: Guru mata pelajaran
  - name: WAKA
catalog:
  - {resource: jurnal, action: view, label: Jurnal Guru}
  - {resource: master, action: "tab:siswa", label: Tab Siswa, category: MASTER DATA}
rules:
  - {role: GURU, resource: jurnal, action: manage}
  - {role: GURU, resource: master, action: view, is_allowed: false}
  - {role: WAKA, resource: master, action: view}
  - {role: "*", resource: dashboard, action: view}
""",
        encoding="utf-8",
    )
    return path


# ============================================================
# Users, rules and tokens
# ============================================================


@pytest.fixture
async def guru(db: AsyncSession) -> User:
    """A GURU user with no other roles."""
    return await make_user(db, "GURU", full_name="Budi Guru")


@pytest.fixture
async def admin(db: AsyncSession) -> User:
    """An administrator."""
    return await make_user(db, "admin", full_name="Ani Admin")


@pytest.fixture
async def no_roles(db: AsyncSession) -> User:
    """A user with an empty role string."""
    return await make_user(db, "", full_name="Citra Kosong")


@pytest.fixture
async def guru_rules(db: AsyncSession) -> list[RolePermission]:
    """Rules for the GURU role."""
    return [
        await make_rule(db, "GURU", "jurnal", "manage"),
        await make_rule(db, "GURU", "absensi", "view"),
        await make_rule(db, "GURU", "master", "tab:siswa"),
        await make_rule(db, "WAKA", "rekap_jurnal", "view"),
    ]


@pytest.fixture
def auth_headers(guru: User) -> dict[str, str]:
    """Authorization headers with a valid token for the GURU user."""
    return bearer(guru)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    """Authorization headers with a valid token for the administrator."""
    return bearer(admin)
