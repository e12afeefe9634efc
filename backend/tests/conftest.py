"""Pytest fixtures for TradeMatch tests.

Provides reusable test fixtures for:
- In-memory match store and recording notification sink (engine tests)
- File-backed SQLite session factory with all tables created (store/API tests)
- Buyer and seller users, buy requests and product listings
- Authenticated test clients with JWT tokens

Usage:
    def test_list_matches(buyer_client, pending_match):
        response = buyer_client.get("/api/v1/matches")
        assert response.status_code == 200
"""

import sys
import os
from pathlib import Path

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("STORE_TIMEOUT_SECONDS", "5")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))
sys.path.insert(0, str(Path(__file__).parent))

from models.base import Base
from models.user import User
from models.product import Product
from models.buy_request import BuyRequest
from models.match import Match
from models.enums import Category, Urgency
from auth.jwt import create_access_token
from database import build_engine, get_db as database_get_db, get_session_factory
from fixtures.memory_store import InMemoryMatchStore, RecordingSink


# =============================================================================
# ENGINE FIXTURES (no database)
# =============================================================================

@pytest.fixture
def memory_store() -> InMemoryMatchStore:
    """Empty in-memory store implementing MatchStorePort."""
    return InMemoryMatchStore()


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Notification sink that records every emitted intent."""
    return RecordingSink()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def session_factory(tmp_path) -> Generator[sessionmaker, None, None]:
    """Session factory bound to a fresh SQLite file with all tables created.

    A file database (rather than :memory:) gives each session its own
    connection, the same way the store behaves against PostgreSQL.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'tradematch.db'}", timeout_seconds=5)
    Base.metadata.create_all(bind=engine)

    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Session used by tests to seed and inspect rows."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def _create_user(db_session: Session, email: str, is_verified: bool = False, status: str = "ACTIVE") -> User:
    user = User(
        email=email,
        first_name="Test",
        last_name="User",
        business_name=f"{email.split('@')[0].title()} Trading PLC",
        is_verified=is_verified,
        status=status,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def buyer(db_session: Session) -> User:
    """Create a buyer user."""
    return _create_user(db_session, "buyer@test.com")


@pytest.fixture(scope="function")
def seller(db_session: Session) -> User:
    """Create a verified seller user."""
    return _create_user(db_session, "seller@test.com", is_verified=True)


@pytest.fixture(scope="function")
def outsider(db_session: Session) -> User:
    """Create a user who is party to nothing."""
    return _create_user(db_session, "outsider@test.com")


@pytest.fixture(scope="function")
def teff_request(db_session: Session, buyer: User) -> BuyRequest:
    """Active agricultural buy request with budget and quantity."""
    buy_request = BuyRequest(
        user_id=buyer.id,
        category=Category.AGRICULTURAL_PRODUCTS.value,
        title="White teff grain",
        description="Need premium white teff grain for export",
        max_budget=1000,
        quantity=500,
        unit="kg",
        location="Addis Ababa",
        urgency=Urgency.NORMAL.value,
    )
    db_session.add(buy_request)
    db_session.commit()
    db_session.refresh(buy_request)
    return buy_request


@pytest.fixture(scope="function")
def teff_listing(db_session: Session, seller: User) -> Product:
    """Active agricultural listing that satisfies teff_request."""
    product = Product(
        user_id=seller.id,
        category=Category.AGRICULTURAL_PRODUCTS.value,
        title="White teff grain",
        description="Premium white teff grain, export quality",
        price=900,
        currency="ETB",
        quantity=600,
        unit="kg",
        location="Bahir Dar",
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture(scope="function")
def pending_match(db_session: Session, teff_request: BuyRequest, teff_listing: Product) -> Match:
    """PENDING match between teff_request and teff_listing."""
    match = Match(
        buy_request_id=teff_request.id,
        product_id=teff_listing.id,
        buyer_id=teff_request.user_id,
        seller_id=teff_listing.user_id,
        ai_score=85,
        match_reason="Excellent match! White teff grain matches your agricultural products requirement.",
        status="PENDING",
    )
    db_session.add(match)
    db_session.commit()
    db_session.refresh(match)
    return match


# =============================================================================
# API CLIENT FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def app(session_factory: sessionmaker):
    """FastAPI app wired to the test database."""
    from main import app as fastapi_app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[database_get_db] = override_get_db
    fastapi_app.dependency_overrides[get_session_factory] = lambda: session_factory

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


def _client_for(app, user: User) -> TestClient:
    token = create_access_token(user_id=user.id, email=user.email)
    client = TestClient(app)
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    """Unauthenticated test client."""
    return TestClient(app)


@pytest.fixture(scope="function")
def buyer_client(app, buyer: User) -> TestClient:
    """Test client authenticated as the buyer."""
    return _client_for(app, buyer)


@pytest.fixture(scope="function")
def seller_client(app, seller: User) -> TestClient:
    """Test client authenticated as the seller."""
    return _client_for(app, seller)


@pytest.fixture(scope="function")
def outsider_client(app, outsider: User) -> TestClient:
    """Test client authenticated as a user with no matches."""
    return _client_for(app, outsider)
