"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from cinebook.api.routes import auth, movies, theaters, bookings, reports

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(movies.router)
api_router.include_router(theaters.router)
api_router.include_router(bookings.router)
api_router.include_router(reports.router)
