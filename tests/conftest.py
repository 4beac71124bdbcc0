# Standard Library
from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock

# Third-Party Libraries
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# First-Party Libraries
from searchgear.main import app
from searchgear.database import get_db_session
from searchgear.auth.security import get_password_hash, create_access_token
from searchgear.email.dependencies import get_email_sender
from searchgear.email.sender import AbstractEmailSender
from searchgear.quotes.models import BusType, QuoteRequest, QuoteStatus
from searchgear.users.models import User, UserRole

# Importer les modèles pour enregistrer toutes les tables
from searchgear.audit import models as _audit_models  # noqa: F401
from searchgear.bookings import models as _booking_models  # noqa: F401

# URL de base pour la DB en mémoire
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_MESSAGE_ID = "<quotation-test@searchgear.test>"


def future_date(days: int = 30) -> date:
    return date.today() + timedelta(days=days)


# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    # StaticPool : une seule connexion, sinon chaque connexion verrait une base vide
    engine: AsyncEngine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def email_sender() -> AsyncMock:
    """Transport email factice : retourne un Message-ID sans rien envoyer."""
    sender = AsyncMock(spec=AbstractEmailSender)
    sender.send_email.return_value = TEST_MESSAGE_ID
    return sender


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession, email_sender: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la session DB de test et le transport factice."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# --- Fixtures Utilisateur et Authentification ---

async def _create_user(db_session: AsyncSession, email: str, first_name: str, last_name: str, role: UserRole) -> User:
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        password_hash=get_password_hash("testpassword"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def customer_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "juan@example.com", "Juan", "Dela Cruz", UserRole.CUSTOMER)


@pytest_asyncio.fixture(scope="function")
async def other_customer(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "maria@example.com", "Maria", "Santos", UserRole.CUSTOMER)


@pytest_asyncio.fixture(scope="function")
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "admin@example.com", "Ana", "Reyes", UserRole.ADMIN)


def _auth_headers(user: User) -> dict[str, str]:
    access_token = create_access_token(data={"sub": user.id})
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def customer_headers(customer_user: User) -> dict[str, str]:
    return _auth_headers(customer_user)


@pytest.fixture
def other_customer_headers(other_customer: User) -> dict[str, str]:
    return _auth_headers(other_customer)


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return _auth_headers(admin_user)


# --- Fixtures Devis ---

async def _create_quote(db_session: AsyncSession, user: User, **overrides) -> QuoteRequest:
    fields = dict(
        user_id=user.id,
        pickup_location="Manila",
        dropoff_location="Baguio",
        number_of_days=3,
        bus_type=BusType.SEATER_49,
        number_of_passengers=45,
        departure_date=future_date(),
        status=QuoteStatus.PENDING,
    )
    fields.update(overrides)
    quote = QuoteRequest(**fields)
    db_session.add(quote)
    await db_session.commit()
    await db_session.refresh(quote)
    return quote


@pytest_asyncio.fixture(scope="function")
async def pending_quote(db_session: AsyncSession, customer_user: User) -> QuoteRequest:
    return await _create_quote(db_session, customer_user)


@pytest_asyncio.fixture(scope="function")
async def approved_quote(db_session: AsyncSession, customer_user: User) -> QuoteRequest:
    return await _create_quote(
        db_session,
        customer_user,
        status=QuoteStatus.APPROVED,
        estimated_price=Decimal("15000"),
        admin_notes="AC included",
        special_requests="Early pickup",
    )
