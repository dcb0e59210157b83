# backend/app/routes/v1/classes.py
"""
Private class catalog routes - API v1

Endpoints:
    GET / - Bookable classes ordered by instrument
    GET /{class_id} - Class details
    GET /{class_id}/availability - Start slots for a date
"""

import asyncio
from datetime import date
import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_availability_service, get_catalog_service
from ...core.exceptions import DomainException
from ...schemas.availability import ClassAvailabilityResponse
from ...schemas.catalog import PrivateClassResponse
from ...services.availability_service import AvailabilityService
from ...services.catalog_service import CatalogService
from .bookings import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["classes-v1"])


@router.get("", response_model=List[PrivateClassResponse])
async def list_classes(
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[PrivateClassResponse]:
    try:
        classes = await asyncio.to_thread(catalog_service.list_classes)
        return [PrivateClassResponse.model_validate(item) for item in classes]
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{class_id}",
    response_model=PrivateClassResponse,
    responses={404: {"description": "Class not found"}},
)
async def get_class(
    class_id: str,
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> PrivateClassResponse:
    try:
        private_class = await asyncio.to_thread(catalog_service.get_class, class_id)
        return PrivateClassResponse.model_validate(private_class)
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{class_id}/availability",
    response_model=ClassAvailabilityResponse,
    responses={404: {"description": "Class not found"}},
)
async def get_class_availability(
    class_id: str,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> ClassAvailabilityResponse:
    """Start slots where the whole lesson fits on the given date."""
    try:
        result = await asyncio.to_thread(
            availability_service.get_class_availability, class_id, target_date
        )
        return ClassAvailabilityResponse(**result)
    except DomainException as e:
        handle_domain_exception(e)
