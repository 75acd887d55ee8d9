"""
Shared pytest fixtures.

Puts app/ on sys.path (the application imports its modules by top-level name)
and points the engine at an in-memory SQLite database before anything from
the application is imported.
"""
import os
import sys
from datetime import timedelta
from pathlib import Path

import pytest

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

app_dir = str(Path(__file__).resolve().parent.parent / "app")
if app_dir not in sys.path:
    sys.path.insert(0, app_dir)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from main import app  # noqa: E402
from database.init import Base, engine, get_db  # noqa: E402
from database.models import Hotel, RoomType  # noqa: E402
from enums.user_role import UserRole  # noqa: E402
from schemas.auth_schema import UserCreate  # noqa: E402
from services.auth_service import create_user  # noqa: E402
from utils.dates import utcnow  # noqa: E402
from utils.dependencies import create_user_token  # noqa: E402

TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """A clean schema and a session bound to it for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, email, role=UserRole.USER, name="Test User"):
    payload = UserCreate(name=name, email=email, password="secret123")
    return create_user(payload, db, role=role)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def guest(db):
    return make_user(db, "guest@example.com", name="Guest User")


@pytest.fixture
def other_guest(db):
    return make_user(db, "other@example.com", name="Other Guest")


@pytest.fixture
def owner(db):
    return make_user(db, "owner@example.com", UserRole.HOTEL_OWNER, name="Hotel Owner")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", UserRole.ADMIN, name="Admin User")


@pytest.fixture
def hotel(db, owner):
    hotel = Hotel(
        name="Sea View Resort",
        city="Goa",
        address="1 Beach Road",
        owner_id=owner.id,
        free_cancel_days=7,
        cancellation_policy="Free cancellation up to 7 days before check-in",
    )
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    return hotel


def make_room(db, hotel, total_rooms=5, base_price=1000.0, room_type="Double", **extra):
    room = RoomType(
        hotel_id=hotel.id,
        room_type=room_type,
        capacity_adults=2,
        base_price=base_price,
        total_rooms=total_rooms,
        available_rooms=total_rooms,
        **extra,
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@pytest.fixture
def room(db, hotel):
    return make_room(db, hotel)


def stay(days_from_now=10, nights=3):
    check_in = (utcnow() + timedelta(days=days_from_now)).replace(microsecond=0)
    return check_in, check_in + timedelta(days=nights)


def booking_payload(hotel, rooms, days_from_now=10, nights=3):
    """Request body for POST /bookings; rooms is a list of (room, quantity)."""
    check_in, check_out = stay(days_from_now, nights)
    return {
        "hotel_id": hotel.id,
        "rooms": [{"room_id": r.id, "quantity": q} for r, q in rooms],
        "guest_details": {
            "first_name": "Asha",
            "last_name": "Rao",
            "email": "asha@example.com",
            "phone": "9876543210",
            "number_of_guests": 2,
        },
        "check_in_date": check_in.isoformat(),
        "check_out_date": check_out.isoformat(),
    }
