"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from wedbook.api.v1 import bookings, reports

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Reports
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
