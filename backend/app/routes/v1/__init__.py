# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import bookings, class_bookings, classes, health, rooms

__all__ = [
    "bookings",
    "class_bookings",
    "classes",
    "health",
    "rooms",
]
