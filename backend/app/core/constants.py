"""Application-wide constants for the studio booking API."""

from __future__ import annotations

BRAND_NAME = "Studio Booking"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Rooms, private lessons, availability and booking receipts for the studio."
API_VERSION = "1.0.0"

# Booking hours (24h clock); the last slot lands exactly on the closing hour
DEFAULT_OPEN_HOUR = 9
DEFAULT_CLOSE_HOUR = 22
DEFAULT_SLOT_STEP_MINUTES = 30

# Text constraints
MAX_NOTES_LENGTH = 1000
MAX_RECEIPT_REF_LENGTH = 2048

# Query limits
DEFAULT_QUERY_LIMIT = 50
MAX_QUERY_LIMIT = 200

# Development origins; production origins come from settings.allowed_origins
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
