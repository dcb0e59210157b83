# backend/app/services/catalog_service.py
"""
Catalog Service: read-only listing of rooms and private classes.
"""

import logging
from typing import List, NoReturn, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, RepositoryException, ServiceException
from ..models.private_class import PrivateClass
from ..models.room import Room
from ..repositories.catalog_repository import PrivateClassRepository, RoomRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class CatalogService(BaseService):
    def __init__(
        self,
        db: Session,
        room_repository: Optional[RoomRepository] = None,
        class_repository: Optional[PrivateClassRepository] = None,
    ):
        super().__init__(db)
        self.room_repository = room_repository or RoomRepository(db)
        self.class_repository = class_repository or PrivateClassRepository(db)

    def _store_failure(self, operation: str, exc: RepositoryException) -> NoReturn:
        self.logger.error(f"{operation} failed: {exc}")
        raise ServiceException(f"{operation} failed", code="STORE_FAILURE") from exc

    @BaseService.measure_operation("list_rooms")
    def list_rooms(self) -> List[Room]:
        try:
            return self.room_repository.list_available()
        except RepositoryException as exc:
            self._store_failure("Listing rooms", exc)

    @BaseService.measure_operation("get_room")
    def get_room(self, room_id: str) -> Room:
        """A bookable room with its images ordered for display."""
        try:
            room = self.room_repository.get_by_id(room_id)
        except RepositoryException as exc:
            self._store_failure("Loading room", exc)
        if room is None or not room.is_available:
            raise NotFoundException("Room not found", code="ROOM_NOT_FOUND")
        return room

    @BaseService.measure_operation("list_classes")
    def list_classes(self) -> List[PrivateClass]:
        try:
            return self.class_repository.list_available()
        except RepositoryException as exc:
            self._store_failure("Listing classes", exc)

    @BaseService.measure_operation("get_class")
    def get_class(self, class_id: str) -> PrivateClass:
        try:
            private_class = self.class_repository.get_by_id(class_id)
        except RepositoryException as exc:
            self._store_failure("Loading class", exc)
        if private_class is None or not private_class.is_available:
            raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")
        return private_class
