# backend/app/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from .core.config import is_running_tests, settings
from .core.constants import ALLOWED_ORIGINS, API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes.v1 import (
    bookings as bookings_v1,
    class_bookings as class_bookings_v1,
    classes as classes_v1,
    health as health_v1,
    rooms as rooms_v1,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)
# Register unified error envelope handlers
register_error_handlers(app)

_allowed_origins = settings.allowed_origins or ALLOWED_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s allow_credentials=%s", _allowed_origins, True)
app.add_middleware(PrometheusMiddleware)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

# Mount v1 routes
api_v1.include_router(health_v1.router)
api_v1.include_router(rooms_v1.router, prefix="/rooms")
api_v1.include_router(classes_v1.router, prefix="/classes")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(class_bookings_v1.router, prefix="/class-bookings")

app.include_router(api_v1)
app.include_router(health_v1.metrics_router)
