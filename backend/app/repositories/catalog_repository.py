# backend/app/repositories/catalog_repository.py
"""
Catalog repositories: rooms (with image galleries) and private classes.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Query, Session, selectinload

from ..models.private_class import PrivateClass
from ..models.room import Room
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class RoomRepository(BaseRepository[Room]):
    def __init__(self, db: Session):
        super().__init__(db, Room)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Room.images))

    def list_available(self) -> List[Room]:
        """Bookable rooms ordered by type, then name."""
        query = self._build_query().filter(Room.is_available.is_(True)).order_by(Room.type, Room.name)
        return self._execute_query(query)

    def lock_for_booking(self, room_id: str) -> Optional[Room]:
        """
        Load a room and lock its row until the transaction ends.

        Concurrent bookings of the same room queue up behind this lock, so the
        overlap check and the insert that follows behave as one step.
        SQLite has no row locks; there the engine opens every transaction with
        BEGIN IMMEDIATE (see ``enable_sqlite_write_locking``), which holds the
        database write lock instead.
        """
        query = self._build_query().filter(Room.id == room_id)
        if self.dialect_name != "sqlite":
            query = query.with_for_update()
        return self._execute_first(query)


class PrivateClassRepository(BaseRepository[PrivateClass]):
    def __init__(self, db: Session):
        super().__init__(db, PrivateClass)

    def list_available(self) -> List[PrivateClass]:
        """Bookable classes ordered by instrument, then instructor."""
        query = (
            self._build_query()
            .filter(PrivateClass.is_available.is_(True))
            .order_by(PrivateClass.instrument, PrivateClass.instructor_name)
        )
        return self._execute_query(query)

    def lock_for_booking(self, class_id: str) -> Optional[PrivateClass]:
        """Load a class and lock its row until the transaction ends (see RoomRepository)."""
        query = self._build_query().filter(PrivateClass.id == class_id)
        if self.dialect_name != "sqlite":
            query = query.with_for_update()
        return self._execute_first(query)
