import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_loyalty.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import itertools
import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from loyalty_api.database import get_db
from loyalty_api.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from loyalty_api.models import Base, Customer, CustomerStatus, Reward, RewardStatus, Tenant
from loyalty_api.services.earning_service import EarningService
# Import FastAPI app AFTER model imports
from loyalty_api.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_phone_numbers = itertools.count(5550000)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(customer_id: int | str = 1, expired: bool = False) -> str:
    """
    Generate a signed access token for testing.

    Args:
        customer_id: Customer ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": str(customer_id), "exp": exp, "iat": datetime.now(UTC)}

    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def bearer(customer: Customer) -> dict:
    """Authorization headers for a customer"""
    return {"Authorization": f"Bearer {create_test_token(customer.id)}"}


@pytest.fixture
def tenant_factory(db_session):
    def _create(name: str = "Corner Cafe", is_active: bool = True) -> Tenant:
        tenant = Tenant(name=name, is_active=is_active)
        db_session.add(tenant)
        db_session.commit()
        db_session.refresh(tenant)
        return tenant

    return _create


@pytest.fixture
def customer_factory(db_session):
    def _create(
        first_name: str = "Dana",
        last_name: str = "Reyes",
        status: CustomerStatus = CustomerStatus.ACTIVE,
        password_hash: str = "not-a-real-hash",
        phone: str | None = None,
    ) -> Customer:
        customer = Customer(
            phone=phone or f"+1{next(_phone_numbers)}",
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            status=status,
        )
        db_session.add(customer)
        db_session.commit()
        db_session.refresh(customer)
        return customer

    return _create


@pytest.fixture
def reward_factory(db_session):
    def _create(
        tenant_id: int,
        points_required: int = 100,
        name: str = "Free Coffee",
        status: RewardStatus = RewardStatus.ACTIVE,
        description: str = "Any size, any roast",
    ) -> Reward:
        reward = Reward(
            tenant_id=tenant_id,
            name=name,
            description=description,
            points_required=points_required,
            status=status,
            redemption_count=0,
        )
        db_session.add(reward)
        db_session.commit()
        db_session.refresh(reward)
        return reward

    return _create


@pytest.fixture
def earn(db_session):
    """Credit points through the earning engine"""

    def _earn(tenant: Tenant, customer: Customer, points: int, description: str = "In-store purchase"):
        return EarningService(db_session).record_earning(tenant.id, customer.id, points, description)

    return _earn


@pytest.fixture
def tenant(tenant_factory):
    return tenant_factory()


@pytest.fixture
def customer(customer_factory):
    return customer_factory()


@pytest.fixture
def auth_headers(customer):
    """Authorization headers for the default customer"""
    return bearer(customer)
