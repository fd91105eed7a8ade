from datetime import timedelta
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.alert_service import create_alert_service
from src.adapter.services.security import JoseTokenService, PasslibPasswordHasher
from src.adapter.services.tax_gateway import GatewaySettings, create_tax_gateway
from src.app.services.alert_service import AlertService
from src.app.services.security import PasswordHasher, TokenService
from src.app.services.tax_gateway import TaxGateway

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

gateway_settings = GatewaySettings(
    api_token=ApplicationConfig.FBR_API_TOKEN or None,
    sandbox=ApplicationConfig.FBR_USE_SANDBOX,
    base_url=ApplicationConfig.FBR_BASE_URL,
    timeout_seconds=ApplicationConfig.FBR_TIMEOUT_SECONDS,
)

session_ttl = timedelta(days=ApplicationConfig.SESSION_TTL_DAYS)

_tax_gateway = create_tax_gateway(gateway_settings)
_alert_service = create_alert_service(ApplicationConfig.ALERT_WEBHOOK_URL)
_password_hasher = PasslibPasswordHasher()
_token_service = JoseTokenService(ApplicationConfig.JWT_SECRET, ApplicationConfig.JWT_ALGORITHM)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_tax_gateway() -> TaxGateway:
    return _tax_gateway


def get_alert_service() -> AlertService:
    return _alert_service


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_token_service() -> TokenService:
    return _token_service
