"""
Shared test fixtures: SQLite test database, test client, material catalog.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

# Set DATABASE_URL before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from printquote.database import Base, get_db
from printquote.main import app
from printquote.costing import Material, MaterialCatalog


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    """Enforce FK constraints, which SQLite leaves off by default."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog():
    """Small in-memory catalog: PLA 20 €/kg, PETG 28 €/kg, TPU 35 €/kg."""
    return MaterialCatalog([
        Material(id="pla", name="PLA", price_per_kg=20.0),
        Material(id="petg", name="PETG", price_per_kg=28.0),
        Material(id="tpu", name="TPU", price_per_kg=35.0),
    ])


@pytest.fixture
def pla_id(client):
    """Create PLA (20 €/kg) through the API and return its id."""
    resp = client.post("/api/materials/", json={"name": "PLA", "price_per_kg": 20.0})
    assert resp.status_code == 200
    return resp.json()["id"]
