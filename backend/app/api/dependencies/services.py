# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.availability_service import AvailabilityService
from ...services.booking_service import RoomBookingService
from ...services.catalog_service import CatalogService
from ...services.class_booking_service import ClassBookingService
from .database import get_db


def get_room_booking_service(db: Session = Depends(get_db)) -> RoomBookingService:
    return RoomBookingService(db)


def get_class_booking_service(db: Session = Depends(get_db)) -> ClassBookingService:
    return ClassBookingService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_availability_service(
    db: Session = Depends(get_db),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> AvailabilityService:
    """
    Get availability service instance.

    Args:
        db: Database session
        catalog_service: Catalog service used to resolve the room or class

    Returns:
        AvailabilityService instance
    """
    return AvailabilityService(db, catalog_service=catalog_service)
