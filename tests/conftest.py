"""
Pytest configuration and fixtures for Campus Events tests.

Provides shared fixtures for:
- In-memory SQLite engine with foreign keys enforced
- Test database sessions
- Factories for users, colleges, locations, RSOs and events
"""

import os
from datetime import date, time

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ["CAMPUS_EVENTS_DATABASE_URL"] = "sqlite:///:memory:"

from models import Base
from models.event import EventType
from schemas.event import EventCreate
from schemas.identity import Identity, Role
from utils.college_manager import CollegeManager
from utils.event_manager import EventManager
from utils.location_manager import LocationManager
from utils.rso_manager import RsoManager
from utils.user_manager import UserManager


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite
    # This must be set for each connection
    def _fk_pragma_on_connect(dbapi_con, con_record):
        dbapi_con.execute("pragma foreign_keys=ON")

    event.listen(engine, "connect", _fk_pragma_on_connect)

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine,
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest.fixture
def make_user(db):
    """Factory for users; returns the user's Identity."""
    _counter = [0]

    def _create(role=Role.STUDENT, college_id=None):
        _counter[0] += 1
        model = UserManager(db).create_user(
            username=f"user{_counter[0]}",
            email=f"user{_counter[0]}@example.edu",
            role=role,
            college_id=college_id,
        )
        return Identity(
            user_id=model.user_id, role=Role(model.role), college_id=model.college_id
        )
    return _create


@pytest.fixture
def super_admin(make_user):
    return make_user(role=Role.SUPER_ADMIN)


@pytest.fixture
def make_college(db, super_admin):
    _counter = [0]

    def _create(name=None):
        _counter[0] += 1
        return CollegeManager(db).create_college(
            name=name or f"College {_counter[0]}",
            location="Orlando, FL",
            actor=super_admin,
        )
    return _create


@pytest.fixture
def college(make_college):
    return make_college("University of Central Florida")


@pytest.fixture
def location(db):
    return LocationManager(db).create_location(
        name="Student Union", address="12715 Pegasus Dr", latitude=28.6016, longitude=-81.2005
    )


@pytest.fixture
def admin(make_user, college):
    return make_user(role=Role.ADMIN, college_id=college.college_id)


@pytest.fixture
def student(make_user, college):
    return make_user(role=Role.STUDENT, college_id=college.college_id)


@pytest.fixture
def make_rso(db, college):
    _counter = [0]

    def _create(actor, college_id=None, name=None):
        _counter[0] += 1
        return RsoManager(db).create_rso(
            name=name or f"RSO {_counter[0]}",
            college_id=college_id or college.college_id,
            actor=actor,
        )
    return _create


@pytest.fixture
def make_event(db, college, location):
    """Factory for events created through EventManager."""
    _counter = [0]

    def _create(actor, event_type=EventType.PUBLIC, rso_id=None, college_id=None,
                event_date=None):
        _counter[0] += 1
        request = EventCreate(
            name=f"Event {_counter[0]}",
            description="Test event",
            date=event_date or date(2026, 11, 3),
            time=time(18, 0),
            location_id=location.location_id,
            college_id=college_id or college.college_id,
            event_type=event_type,
            rso_id=rso_id,
            contact_email="events@example.edu",
        )
        return EventManager(db).create_event(request, actor)
    return _create
