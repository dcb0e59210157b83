"""
Two submissions racing for one slot on a file-backed SQLite database.

Both requests are held right after their overlap check so that, without a
write lock taken before the read, both would go on to insert.
"""

from datetime import date, timedelta
from decimal import Decimal
import threading
from typing import Callable, List

import pytest
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import BookingConflictException
from app.database import Base, build_engine
from app.models import ClassBooking, PrivateClass, Room, RoomBooking
from app.models.booking import ACTIVE_BOOKING_STATUSES
from app.schemas.booking import BookingCreate
from app.schemas.class_booking import ClassBookingCreate
from app.services.booking_service import RoomBookingService
from app.services.class_booking_service import ClassBookingService
from app.services.reservation_service import ReservationService

# How long the first request waits for the second at the overlap check
HOLD_SECONDS = 1.0


@pytest.fixture
def file_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'studio.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(file_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=file_engine, expire_on_commit=False)


@pytest.fixture
def hold_after_overlap_check(monkeypatch):
    """Make each submission wait for the other once its overlap check passed."""
    barrier = threading.Barrier(2, timeout=HOLD_SECONDS)
    original = ReservationService._ensure_slot_free

    def checked_then_wait(self, *args, **kwargs):
        original(self, *args, **kwargs)
        try:
            barrier.wait()
        except threading.BrokenBarrierError:
            pass

    monkeypatch.setattr(ReservationService, "_ensure_slot_free", checked_then_wait)


def _race(session_factory, submit: Callable) -> List[str]:
    results: List[str] = []
    lock = threading.Lock()

    def worker(user_id: str) -> None:
        session = session_factory()
        try:
            submit(session, user_id)
            outcome = "ok"
        except BookingConflictException:
            outcome = "conflict"
        except Exception as exc:  # surfaced through the assertion below
            outcome = repr(exc)
        finally:
            session.close()
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(f"user-{n}",)) for n in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=15)
    return sorted(results)


@pytest.mark.integration
class TestConcurrentSubmissions:
    def test_only_one_room_booking_wins(self, session_factory, hold_after_overlap_check) -> None:
        with session_factory() as setup:
            room = Room(name="Studio B", type="rehearsal", capacity=5, hourly_rate=Decimal("30.00"))
            setup.add(room)
            setup.commit()
            room_id = room.id

        booking_date = date.today() + timedelta(days=3)
        request = BookingCreate(
            room_id=room_id, booking_date=booking_date, start_time="10:00", end_time="11:00"
        )

        results = _race(
            session_factory,
            lambda session, user_id: RoomBookingService(session).create_booking(user_id, request),
        )

        assert results == ["conflict", "ok"]
        with session_factory() as check:
            active = (
                check.query(RoomBooking)
                .filter(
                    RoomBooking.room_id == room_id,
                    RoomBooking.status.in_(ACTIVE_BOOKING_STATUSES),
                )
                .count()
            )
        assert active == 1

    def test_only_one_class_booking_wins(self, session_factory, hold_after_overlap_check) -> None:
        with session_factory() as setup:
            private_class = PrivateClass(
                instructor_name="Sam Reed",
                instrument="drums",
                lesson_rate=Decimal("45.00"),
                duration_minutes=60,
            )
            setup.add(private_class)
            setup.commit()
            class_id = private_class.id

        request = ClassBookingCreate(
            class_id=class_id, booking_date=date.today() + timedelta(days=3), start_time="10:00"
        )

        results = _race(
            session_factory,
            lambda session, user_id: ClassBookingService(session).create_booking(user_id, request),
        )

        assert results == ["conflict", "ok"]
        with session_factory() as check:
            assert check.query(ClassBooking).filter(ClassBooking.class_id == class_id).count() == 1
