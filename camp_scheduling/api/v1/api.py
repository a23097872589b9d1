# camp_scheduling/api/v1/api.py

from fastapi import APIRouter
from camp_scheduling.api.v1.endpoints import (
    availability_slots,
    bookings,
    camp_sessions,
    recurrence_patterns,
    schedules,
)

# Main router for the v1 API; mounted under /api/v1 by main.py.
api_router = APIRouter()

api_router.include_router(availability_slots.router)
api_router.include_router(bookings.router)
api_router.include_router(recurrence_patterns.router)
api_router.include_router(camp_sessions.router)
api_router.include_router(schedules.router)
