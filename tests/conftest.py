import os

# Settings are read at import time, so the environment is prepared first
TEST_DB_URL = os.getenv("TEST_DB_URL", "sqlite+aiosqlite:///./test_ik_proje.db")
os.environ.setdefault("SECRET_KEY", "test_secret_key")
os.environ.setdefault("DATABASE_URL", TEST_DB_URL)
os.environ.setdefault("EMAILS_FROM_EMAIL", "test@example.com")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from unittest.mock import AsyncMock, patch

from app.core.security import create_access_token, get_password_hash
from app.db.redis import get_redis
from app.db.session import get_db
from app.main import app
from app.models.base import Base
from app.models.users import Company, User, UserDetails, UserRole, EntityState
from app.models import membership, assets  # noqa: F401

engine = create_async_engine(TEST_DB_URL, poolclass=NullPool)
TestingSessionLocal = async_sessionmaker(
    engine, expire_on_commit=False, class_=AsyncSession
)

MANAGER_PASSWORD = "manager_pass123"
EMPLOYEE_PASSWORD = "employee_pass123"


@pytest.fixture(scope="function")
async def test_db():
    """Create test database tables before tests and drop them after"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session(test_db):
    """Create a clean database session for each test"""
    async with TestingSessionLocal() as session:
        yield session


async def create_company(db_session, email="acme@example.com", name="Acme", verified=True):
    company = Company(
        sid=Base.generate_sid(),
        name=name,
        email=email,
        password_hash=get_password_hash(MANAGER_PASSWORD),
        is_mail_verified=verified,
    )
    db_session.add(company)
    await db_session.flush()

    manager = User(
        sid=Base.generate_sid(),
        email=email,
        password_hash=get_password_hash(MANAGER_PASSWORD),
        first_name="Ayse",
        last_name="Manager",
        role=UserRole.COMPANY_MANAGER,
        state=EntityState.ACTIVE,
        company_sid=company.sid,
    )
    db_session.add(manager)
    await db_session.commit()
    return company, manager


async def create_employee(db_session, company, email="employee@example.com", first_name="Mehmet"):
    employee = User(
        sid=Base.generate_sid(),
        email=email,
        password_hash=get_password_hash(EMPLOYEE_PASSWORD),
        first_name=first_name,
        last_name="Employee",
        role=UserRole.EMPLOYEE,
        state=EntityState.ACTIVE,
        company_sid=company.sid,
    )
    db_session.add(employee)
    await db_session.flush()
    db_session.add(UserDetails(
        sid=Base.generate_sid(),
        user_sid=employee.sid,
        phone="+90 555 000 00 00",
    ))
    await db_session.commit()
    return employee


@pytest.fixture
async def test_company(db_session):
    """Verified company together with its manager"""
    company, manager = await create_company(db_session)
    return {"company": company, "manager": manager, "password": MANAGER_PASSWORD}


@pytest.fixture
async def unverified_company(db_session):
    company, manager = await create_company(
        db_session, email="pending@example.com", name="Pending", verified=False
    )
    return {"company": company, "manager": manager, "password": MANAGER_PASSWORD}


@pytest.fixture
async def test_employee(db_session, test_company):
    employee = await create_employee(db_session, test_company["company"])
    return {"user": employee, "password": EMPLOYEE_PASSWORD}


@pytest.fixture
def manager_token(test_company):
    manager = test_company["manager"]
    return create_access_token(manager.sid, manager.role.value)


@pytest.fixture
def employee_token(test_employee):
    employee = test_employee["user"]
    return create_access_token(employee.sid, employee.role.value)


@pytest.fixture
async def mock_redis():
    """Mock Redis client"""
    redis_mock = AsyncMock()
    redis_mock.get.return_value = None
    redis_mock.set.return_value = True
    redis_mock.incr.return_value = 1
    redis_mock.expire.return_value = True
    return redis_mock


@pytest.fixture
async def client(db_session, mock_redis):
    """Create test client with mocked dependencies"""

    async def override_get_db():
        yield db_session

    async def override_get_redis():
        yield mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides = {}


@pytest.fixture
def mock_email_service():
    """Mock both mail templates; the identity workflow calls them through the module"""
    with patch("app.services.email.send_verification_email", new_callable=AsyncMock) as verification, \
            patch("app.services.email.send_password_reset_email", new_callable=AsyncMock) as reset:
        verification.return_value = True
        reset.return_value = True
        yield {"verification": verification, "reset": reset}


@pytest.fixture
def mock_media_service():
    with patch("app.services.media.upload_file", new_callable=AsyncMock) as mock:
        mock.return_value = "https://ik-proje.s3.us-east-1.amazonaws.com/uploads/logo.png"
        yield mock
