"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from mentor_booking.api.v1 import bookings, directory, health, ledger

api_router = APIRouter()

# Health check
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"],
)

# Booking
api_router.include_router(
    bookings.router,
    prefix="/bookings",
    tags=["bookings"],
)

# Directory
api_router.include_router(
    directory.mentors_router,
    prefix="/mentors",
    tags=["mentors"],
)

api_router.include_router(
    directory.students_router,
    prefix="/students",
    tags=["students"],
)

# Ledger
api_router.include_router(
    ledger.appointments_router,
    prefix="/appointments",
    tags=["appointments"],
)

api_router.include_router(
    ledger.payments_router,
    prefix="/payments",
    tags=["payments"],
)
