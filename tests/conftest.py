import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

from datetime import date, time  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from cleanbook.auth import CurrentUser, create_access_token  # noqa: E402
from cleanbook.database import Base, get_db  # noqa: E402
from cleanbook.main import app  # noqa: E402
from cleanbook.models import Booking, Service, User  # noqa: E402

SERVICE_DAY = date(2030, 6, 3)


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
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def services(db_session):
    """Standard catalog keyed by service name"""
    catalog = [
        Service(name="Basic House Cleaning", base_price=100.0, duration_hours=2, service_type="residential"),
        Service(name="Deep House Cleaning", base_price=180.0, duration_hours=4, service_type="residential"),
        Service(name="Office Cleaning", base_price=150.0, duration_hours=3, service_type="commercial"),
    ]
    db_session.add_all(catalog)
    db_session.commit()
    return {s.name: s for s in catalog}


@pytest.fixture
def customer(db_session):
    user = User(
        email="jane@example.com", first_name="Jane", last_name="Doe", phone="+15555550100", role="client"
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_customer(db_session):
    user = User(email="bob@example.com", first_name="Bob", last_name="Stone", role="client")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    user = User(email="admin@example.com", first_name="Ada", last_name="Admin", role="admin")
    db_session.add(user)
    db_session.commit()
    return user


def as_current(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, role=user.role)


def auth_headers(user: User) -> dict:
    token = create_access_token({"user_id": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_booking(db_session):
    """Insert a booking directly, bypassing pricing and conflict checks"""

    def _make(service: Service, user=None, **overrides) -> Booking:
        fields = {
            "user_id": user.id if user else None,
            "service_id": service.id,
            "scheduled_date": SERVICE_DAY,
            "scheduled_time": time(10, 0),
            "address": "12 Palm Way, Miami, FL 33101",
            "square_meters": 50,
            "total_price": 107.0,
            "status": "pending",
        }
        if user is None:
            fields.update(
                is_guest_booking=True,
                guest_name="Gus Guest",
                guest_email="gus@example.com",
                guest_phone="+15555550111",
            )
        fields.update(overrides)
        booking = Booking(**fields)
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
