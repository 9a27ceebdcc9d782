import os
import copy
from datetime import datetime, timedelta

# Point settings at an in-memory database before the application is imported
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENVIRONMENT"] = "development"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import cuore.models  # noqa: F401
from cuore.api import deps
from cuore.core.config import settings
from cuore.db.base import Base
from cuore.onboarding_scoring.tables import RISK_HISTORY_OPTIONS


PARENT_DIABETES = RISK_HISTORY_OPTIONS[0][1]

VALID_PAYLOAD = {
    "m2": {"age": 40, "gender": "male", "height_cm": 175, "weight_kg": 70, "waist_cm": 34},
    "m3": {"selectedOptions": [PARENT_DIABETES], "other_conditions": ""},
    "m4": {"smoking": "Never", "alcohol": "Never"},
    "m5": {
        "min_exercise_per_week": "75 to 150 min",
        "fruits_veg": "Daily",
        "processed_food": "Rarely",
        "high_fiber": "Often",
    },
    "m6": {
        "sleep_hours": "Between 7 to 8 hours",
        "problems_overwhelming": "Sometimes",
        "enjoyable": "Never",
        "felt_nervous": "Often",
    },
    "m7": {},
}

SUPPLIED_BIOMARKERS = {
    "o2_sat": 98,
    "pulse": 72,
    "bp_upper": 118,
    "bp_lower": 78,
    "bs_f": 92,
    "bs_am": 130,
    "HDL": 55,
    "LDL": 100,
    "Trig": 120,
    "HsCRP": 12,
    "hscrp_unit": "mg/dl",
}


@pytest.fixture
def payload():
    """A valid submission with biomarkers withheld (imputation path)."""
    return copy.deepcopy(VALID_PAYLOAD)


@pytest.fixture
def payload_with_biomarkers():
    data = copy.deepcopy(VALID_PAYLOAD)
    data["m7"] = dict(SUPPLIED_BIOMARKERS)
    return data


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    """Strictly increasing fake clock."""
    state = {"now": datetime(2026, 1, 1, 8, 0, 0)}

    def tick():
        state["now"] = state["now"] + timedelta(minutes=5)
        return state["now"]

    return tick


@pytest.fixture
def client(engine):
    from cuore.main import app

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_token(user_id: str) -> str:
    return jwt.encode({"sub": user_id}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


@pytest.fixture
def auth_headers():
    def _headers(user_id: str = "user-1"):
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _headers
