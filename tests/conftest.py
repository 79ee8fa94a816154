"""Shared test fixtures."""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from attendance_tracker.core.database import get_session, set_sqlite_pragma
from attendance_tracker.main import app
from attendance_tracker.models import AttendanceRecord, Member, Service


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Enforce foreign keys so cascades behave as in production
    sa_event.listen(engine, "connect", set_sqlite_pragma)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="jane")
def jane_fixture(session: Session) -> Member:
    """Create a sample member."""
    member = Member(full_name="Jane Doe", email="jane@example.com")
    session.add(member)
    session.commit()
    session.refresh(member)
    return member


@pytest.fixture(name="john")
def john_fixture(session: Session) -> Member:
    """Create a second member."""
    member = Member(full_name="John Smith", phone_number="555-0100")
    session.add(member)
    session.commit()
    session.refresh(member)
    return member


@pytest.fixture(name="sunday_service")
def sunday_service_fixture(session: Session) -> Service:
    """Create a sample service."""
    service = Service(name="Sunday Service", service_date=date(2024, 1, 7))
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@pytest.fixture(name="midweek_service")
def midweek_service_fixture(session: Session) -> Service:
    """Create a second service on a later date."""
    service = Service(
        name="Midweek Prayer",
        description="Wednesday evening",
        service_date=date(2024, 1, 10),
    )
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@pytest.fixture(name="marked_attendance")
def marked_attendance_fixture(
    session: Session, jane: Member, john: Member, sunday_service: Service, midweek_service: Service
) -> list[AttendanceRecord]:
    """Record Jane at both services and John at the Sunday service."""
    records = [
        AttendanceRecord(
            member_id=jane.id,
            service_id=sunday_service.id,
            service_date=sunday_service.service_date,
        ),
        AttendanceRecord(
            member_id=john.id,
            service_id=sunday_service.id,
            service_date=sunday_service.service_date,
        ),
        AttendanceRecord(
            member_id=jane.id,
            service_id=midweek_service.id,
            service_date=midweek_service.service_date,
        ),
    ]
    for record in records:
        session.add(record)
    session.commit()
    return records
