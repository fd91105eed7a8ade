import pytest
import pytest_asyncio
from datetime import date
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401
from src.adapter.services.security import PasslibPasswordHasher
from src.adapter.services.tax_gateway import MockTaxGateway
from src.depends import get_alert_service, get_session, get_tax_gateway
from src.domain.user import User, UserRole


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database shared by every connection of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def user(db_session):
    """Registered user with role 'user'"""
    user = User(
        name="Ayesha Khan",
        email="ayesha@example.com",
        password_hash=PasslibPasswordHasher().hash("secret123"),
        role=UserRole.USER,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def tax_gateway():
    """Gateway used by the API; tests replace its methods to simulate the gateway"""
    return MockTaxGateway()


@pytest.fixture
def alert_service():
    from unittest.mock import AsyncMock, MagicMock

    service = MagicMock()
    service.send_persistence_failure_alert = AsyncMock(return_value=True)
    return service


@pytest_asyncio.fixture
async def client(db_session, tax_gateway, alert_service):
    """Create test client with database session and gateway overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_tax_gateway] = lambda: tax_gateway
    app.dependency_overrides[get_alert_service] = lambda: alert_service

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def login(client: AsyncClient, email: str, password: str) -> dict:
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    # Requests must authenticate explicitly
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def auth_headers(client, user):
    return await login(client, "ayesha@example.com", "secret123")


@pytest_asyncio.fixture
async def admin_headers(client, db_session):
    admin = User(
        name="Admin",
        email="admin@example.com",
        password_hash=PasslibPasswordHasher().hash("admin-pass"),
        role=UserRole.ADMIN,
    )
    db_session.add(admin)
    await db_session.commit()
    return await login(client, "admin@example.com", "admin-pass")


@pytest.fixture
def draft_payload():
    """2 x 5000 at 18% -> 11800.00"""
    return {
        "seller": {
            "name": "Pak Textile Solutions",
            "address": "123 Textile Ave, Faisalabad",
            "email": "billing@paktextile.com",
            "ntn": "1234567-8",
            "province": "Punjab",
        },
        "buyer": {
            "name": "Lahore Garments",
            "address": "45 Mall Road, Lahore",
            "ntn": "7654321",
            "province": "Punjab",
        },
        "buyer_registration_type": "Registered",
        "issue_date": date(2024, 5, 1).isoformat(),
        "line_items": [
            {
                "description": "Cotton fabric",
                "quantity": "2",
                "unit_price": "5000",
                "hs_code": "5208.1100",
                "rate": "18%",
                "uom": "pcs",
                "sale_type": "Goods at standard rate (default)",
            }
        ],
    }
