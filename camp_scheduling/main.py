# camp_scheduling/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from camp_scheduling.api.v1.api import api_router
from camp_scheduling.core.config import settings
from camp_scheduling.core.exceptions import SchedulingError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Camp scheduling service starting up...")
    yield
    logger.info("Camp scheduling service shutting down...")


app = FastAPI(
    title="Camp Scheduling Service",
    version="1.0.0",
    description="""
        Capacity-bounded availability slots and bookings for camps.

        ## Features

        * **Availability Slots**: One-off and recurring bookable windows
        * **Bookings**: Race-free seat claims, cancellation and rescheduling
        * **Recurrence Patterns**: Expand patterns into concrete camp sessions
        * **Schedules**: Weekly running times with per-date exceptions

        ## Authentication

        All endpoints require JWT authentication via the `Authorization: Bearer <token>` header.
        """,
    lifespan=lifespan,
)

origins = [
    "http://localhost:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchedulingError)
async def handle_scheduling_error(request: Request, error: SchedulingError) -> JSONResponse:
    """Classified failures answer with their own status and a stable code."""
    logger.info(
        f"{request.method} {request.url.path} rejected: {error.error_code}",
        extra={"error_code": error.error_code, "details": error.details},
    )
    return JSONResponse(
        status_code=error.status_code,
        content={
            "error_code": error.error_code,
            "message": error.message,
            "details": error.details,
        },
    )


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, error: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database error: {type(error).__name__}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=error,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error_code": "STORE_ERROR",
            "message": "Database operation failed. Please try again.",
            "details": {},
        },
    )


app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Camp Scheduling Service is running"}
