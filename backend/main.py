"""FastAPI application entry point."""
import os

# Claim timestamps are taken in UTC; pin the process zone before anything caches it
os.environ['TZ'] = 'UTC'

import time

if hasattr(time, "tzset"):
    time.tzset()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
from contextlib import asynccontextmanager
from datetime import datetime, UTC

from backend.config import get_settings
from backend.logging_config import configure_logging
from backend.version import APP_VERSION
from backend.routers import router as food_router, health
from backend.schemas.base import to_json_payload
from backend.utils.exceptions import MealTrackerException

settings = get_settings()
api_logger = configure_logging(settings)
logger = logging.getLogger(__name__)

DEFAULT_DEV_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """Log the effective configuration on startup."""
    database = settings.database_url.split('@')[-1] if '@' in settings.database_url else 'SQLite'
    logger.info("=" * 60)
    logger.info(f"Meal Tracker API v{APP_VERSION} starting ({settings.environment})")
    logger.info(f"Database: {database}")
    logger.info(f"Event: {settings.event_name}, export timezone {settings.export_timezone}")
    logger.info(f"Server clock (UTC): {datetime.now(UTC)}")
    logger.info("=" * 60)

    try:
        yield
    finally:
        logger.info("Meal Tracker API stopped")


app = FastAPI(
    title="Meal Tracker API",
    description="Breakfast, lunch and dinner claims for event participants",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(MealTrackerException)
async def meal_tracker_exception_handler(request: Request, exc: MealTrackerException):
    """Turn typed service errors into ``{"success": false, "detail": code, ...}`` bodies.

    Storage failures keep their details in the log and answer with a generic message.
    """
    where = f"{request.method} {request.url.path}"
    content = {"success": False, "detail": exc.code}

    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {where}: {exc.message}")
        content["message"] = "Server error, please try again"
    else:
        logger.info(f"{exc.code} on {where}: {exc.message}")
        content["message"] = exc.message
        content.update(to_json_payload(exc.context))

    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies field by field."""
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")

    errors = [
        {
            "field": " -> ".join(str(part) for part in error.get("loc", [])[1:]) or "body",
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "unknown"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"success": False, "detail": "Request validation failed", "errors": errors},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Write a START and a COMPLETE/EXCEPTION line per request to the API log."""
    started = time.perf_counter()
    client_ip = request.client.host if request.client else "unknown"
    label = f"{request.method} {request.url.path}"

    api_logger.info(f">> START | {label} | IP: {client_ip}")
    if request.query_params:
        api_logger.info(f">> QUERY | {label} | {request.query_params}")

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed = time.perf_counter() - started
        api_logger.error(f"<< EXCEPTION | {label} | {str(e)[:100]} | {elapsed:.3f}s")
        raise

    elapsed = time.perf_counter() - started
    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    api_logger.log(level, f"<< COMPLETE | {label} | Status: {response.status_code} | {elapsed:.3f}s")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or DEFAULT_DEV_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(food_router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "message": "Meal Tracker API",
        "event": settings.event_name,
        "version": APP_VERSION,
        "docs": "/docs",
    }
