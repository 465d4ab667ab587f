import os

# Must be set before localstay.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from localstay import models  # noqa: F401
from localstay.db import Base, get_db
from localstay.main import app


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
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def guide_data():
    return {
        "name": "  Ravi Oraon ",
        "bio": "Born near Netarhat, Ravi leads sunrise treks and tribal village walks.",
        "specializations": ["trekking", "tribal culture"],
        "languages": ["Hindi", "English", "Kurukh"],
        "experience": "8 years",
        "location": {"district": "Latehar"},
        "pricing": {"halfDay": 800, "fullDay": 1500},
    }


@pytest.fixture
def homestay_data():
    return {
        "title": " Sal Forest Cottage ",
        "description": "A mud-walled cottage at the edge of the sal forest, with home-cooked Santhali meals.",
        "location": {"address": "Village Bhandra, Netarhat Road", "district": "Latehar"},
        "pricing": {"basePrice": 1800},
        "capacity": {"guests": 4, "bedrooms": 2, "beds": 2, "bathrooms": 1},
    }
