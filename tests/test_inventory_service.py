import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from conftest import TestingSession, make_room, make_user
from database.init import Base
from database.models import Hotel, RoomType
from enums.user_role import UserRole
from schemas.room_schema import RoomUpdate
from services.inventory_service import InventoryService
from services.room_service import RoomService
from utils.exceptions import (
    InsufficientInventoryError,
    InventoryInvariantError,
    ValidationError,
)

inventory = InventoryService()
room_service = RoomService()


def test_reserve_decrements_available(db, room):
    inventory.reserve(db, room.id, 2)
    db.commit()

    assert room.available_rooms == 3
    assert room.total_rooms == 5


def test_reserve_can_take_the_last_room(db, room):
    inventory.reserve(db, room.id, 5)
    db.commit()
    assert room.available_rooms == 0


def test_reserve_more_than_available_fails_without_change(db, room):
    with pytest.raises(InsufficientInventoryError, match="Only 5 rooms available"):
        inventory.reserve(db, room.id, 6)
    db.commit()
    assert room.available_rooms == 5


def test_reserve_rejects_inactive_or_deleted_rooms(db, hotel):
    inactive = make_room(db, hotel, is_active=False)
    with pytest.raises(InsufficientInventoryError):
        inventory.reserve(db, inactive.id, 1)


def test_quantity_must_be_positive(db, room):
    with pytest.raises(ValidationError):
        inventory.reserve(db, room.id, 0)
    with pytest.raises(ValidationError):
        inventory.release(db, room.id, 0)


def test_release_returns_rooms(db, room):
    inventory.reserve(db, room.id, 3)
    inventory.release(db, room.id, 2)
    db.commit()
    assert room.available_rooms == 4


def test_release_past_total_is_an_invariant_breach(db, room):
    with pytest.raises(InventoryInvariantError):
        inventory.release(db, room.id, 1)
    db.rollback()
    assert room.available_rooms == 5


def test_reserve_all_is_all_or_nothing(db, hotel):
    first = make_room(db, hotel, total_rooms=5)
    second = make_room(db, hotel, total_rooms=1, room_type="Suite")

    with pytest.raises(InsufficientInventoryError):
        inventory.reserve_all(db, [(first.id, 2), (second.id, 2)])
    db.commit()

    assert first.available_rooms == 5
    assert second.available_rooms == 1


def test_sequential_reservations_never_oversell(db, room):
    inventory.reserve(db, room.id, 3)
    db.commit()
    with pytest.raises(InsufficientInventoryError, match="Only 2 rooms available"):
        inventory.reserve(db, room.id, 3)
    inventory.reserve(db, room.id, 2)
    db.commit()
    assert room.available_rooms == 0


def test_resize_keeps_rooms_sold_since_the_row_was_loaded(db, room):
    # A second session sells 2 rooms after this session loaded the row
    other = TestingSession()
    try:
        inventory.reserve(other, room.id, 2)
        other.commit()
    finally:
        other.close()
    assert room.available_rooms == 5

    room_service.update_room(db, room, RoomUpdate(total_rooms=6))

    assert room.total_rooms == 6
    assert room.available_rooms == 4


def test_resize_below_booked_rooms_is_rejected(db, room):
    inventory.reserve(db, room.id, 3)
    db.commit()

    with pytest.raises(ValidationError, match="below the 3 already booked"):
        inventory.resize(db, room.id, 2)
    db.rollback()

    assert room.total_rooms == 5
    assert room.available_rooms == 2


def test_resize_can_shrink_to_exactly_the_booked_rooms(db, room):
    inventory.reserve(db, room.id, 3)
    inventory.resize(db, room.id, 3)
    db.commit()

    assert room.total_rooms == 3
    assert room.available_rooms == 0


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessions on a file database, each with its own connection."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'inventory.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()


def test_racing_reservations_sell_the_last_room_once(file_session_factory):
    with file_session_factory() as setup:
        owner = make_user(setup, "racer@example.com", UserRole.HOTEL_OWNER)
        hotel = Hotel(name="Hill Lodge", city="Ooty", address="2 Ridge Road", owner_id=owner.id)
        setup.add(hotel)
        setup.commit()
        room_id = make_room(setup, hotel, total_rooms=1).id

    start = threading.Barrier(2)
    outcomes = []

    def book():
        session = file_session_factory()
        try:
            start.wait()
            inventory.reserve(session, room_id, 1)
            session.commit()
            outcomes.append("reserved")
        except InsufficientInventoryError:
            session.rollback()
            outcomes.append("rejected")
        finally:
            session.close()

    threads = [threading.Thread(target=book) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["rejected", "reserved"]
    with file_session_factory() as check:
        assert check.get(RoomType, room_id).available_rooms == 0
