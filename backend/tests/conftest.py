import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from config import settings
from database import MEMORY_DATABASE_URL, get_db, init_db, make_engine
from main import app
from models.product import Product
from seed import seed_database

USER_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def session_factory():
    """
    Fresh in-memory database per test, with the catalog and admin seeded.
    """
    engine = make_engine(MEMORY_DATABASE_URL)
    init_db(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        seed_database(db)
    finally:
        db.close()

    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def fast_payments(monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_DELAY_SECONDS", 0)
    monkeypatch.setattr(settings, "PAYMENT_SUCCESS_RATE", 1.0)


@pytest.fixture(scope="function")
def make_client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield lambda: TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(make_client):
    return make_client()


@pytest.fixture(scope="function")
def user_client(make_client):
    """A client holding the session cookie of a freshly registered shopper."""
    c = make_client()
    response = c.post("/api/auth/register", json={
        "name": "Siti Rahma",
        "email": "siti@example.com",
        "password": USER_PASSWORD,
    })
    assert response.status_code == 201, response.text
    return c


@pytest.fixture(scope="function")
def admin_client(make_client):
    c = make_client()
    response = c.post("/api/auth/login", json={
        "email": settings.ADMIN_EMAIL,
        "password": settings.ADMIN_PASSWORD,
    })
    assert response.status_code == 200, response.text
    return c


@pytest.fixture
def stocked_product(db_session):
    return (
        db_session.query(Product)
        .filter(Product.is_pre_order == False)  # noqa: E712
        .order_by(Product.name)
        .first()
    )


@pytest.fixture
def pre_order_product(db_session):
    return (
        db_session.query(Product)
        .filter(Product.is_pre_order == True)  # noqa: E712
        .order_by(Product.name)
        .first()
    )


@pytest.fixture
def checkout_payload():
    """Builds a valid checkout body; keyword arguments override fields."""
    def build(**overrides):
        payload = {
            "customerName": "Siti Rahma",
            "customerEmail": "siti@example.com",
            "customerPhone": "081234567890",
            "shippingAddress": "Jl. Melati No. 5",
            "shippingCity": "Jakarta",
            "shippingPostalCode": "12345",
            "shippingCountry": "Indonesia",
            "shippingType": "express",
        }
        payload.update(overrides)
        return payload
    return build
