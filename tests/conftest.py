import os

# Point the application at SQLite before any app module reads settings
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.repositories.product_repository import SqlAlchemyProductRepository
from app.services.product_service import ProductService


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def lenient_client():
    """Test client that returns 500 responses instead of re-raising server errors."""
    Base.metadata.create_all(bind=engine)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def service(db_session):
    """Product service bound to a test database session."""
    return ProductService(SqlAlchemyProductRepository(db_session))


@pytest.fixture
def make_product(client):
    """Factory creating a product through the REST API and returning the response body."""
    def _make(**overrides):
        payload = {"name": "Widget", "description": "A widget", "price": 9.99, "stock": 5}
        payload.update(overrides)
        response = client.post("/api/v1/products", json=payload)
        assert response.status_code == 200, response.text
        return response.json()
    return _make
