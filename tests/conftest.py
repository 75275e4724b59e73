import os
from datetime import date, timedelta

import pytest

# Set testing environment before the application settings are loaded
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from clinicqueue.main import app
from clinicqueue.core.database import get_db, Base

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def next_monday() -> date:
    """A Monday strictly after today, so none of its slots are in the past."""
    today = date.today()
    return today + timedelta(days=7 - today.weekday())

# Test data
test_provider_data = {
    "first_name": "Ada",
    "last_name": "Osei",
    "license_number": "LIC-1001",
    "specialty": "Family Medicine",
    "provider_type": "doctor"
}

test_patient_data = {
    "first_name": "Test",
    "last_name": "Patient",
    "date_of_birth": "1990-05-17",
    "gender": "female",
    "phone_number": "555-0100"
}

@pytest.fixture
def clinic(client):
    """A provider working Mondays 09:00-17:00 and one registered patient."""
    provider = client.post("/api/v1/providers", json=test_provider_data).json()
    patient = client.post("/api/v1/patients", json=test_patient_data).json()
    schedule = client.post(
        f"/api/v1/providers/{provider['id']}/schedules",
        json={"day_of_week": 0, "start_time": "09:00:00", "end_time": "17:00:00"}
    ).json()
    return {"provider": provider, "patient": patient, "schedule": schedule}
