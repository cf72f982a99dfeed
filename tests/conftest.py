import pytest
import os
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app.database import Base, get_db
from app.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """
    Fresh schema per test. Services commit and roll back on their own, so
    tests cannot be isolated inside one outer transaction.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def make_instructor(db_session):
    """Factory creating persisted instructors."""
    from app.models.instructor import Instructor

    def _make(name="Jane Doe", **kwargs):
        instructor = Instructor(name=name, nationality=kwargs.pop("nationality", "American"), **kwargs)
        db_session.add(instructor)
        db_session.commit()
        return instructor
    return _make

@pytest.fixture(scope="function")
def make_leave(db_session):
    """Factory creating persisted leave records (approved PTO by default)."""
    from app.models.staff_leave import StaffLeave

    def _make(instructor, start_date=date(2025, 3, 1), **kwargs):
        leave = StaffLeave(
            instructor_id=instructor.id,
            leave_type=kwargs.pop("leave_type", "PTO"),
            start_date=start_date,
            end_date=kwargs.pop("end_date", start_date),
            status=kwargs.pop("status", "Approved"),
            pto_days=kwargs.pop("pto_days", 0),
            rr_days=kwargs.pop("rr_days", 0),
            **kwargs
        )
        db_session.add(leave)
        db_session.commit()
        return leave
    return _make

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
