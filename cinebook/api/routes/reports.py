"""
Administrative reporting endpoints. All of them require the admin role.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from cinebook.api.deps import get_report_service, require_admin
from cinebook.schemas.common import ApiResponse, ok
from cinebook.schemas.report import (
    DashboardOverview,
    MovieBookingStats,
    RevenueReport,
    TheaterBookingStats,
    UserAnalytics,
    UserBookingSummary,
)
from cinebook.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"], dependencies=[Depends(require_admin)])


@router.get("/bookings/movies", response_model=ApiResponse[list[MovieBookingStats]])
async def bookings_by_movie(reports: ReportService = Depends(get_report_service)):
    return ok("Movie booking report generated", await reports.bookings_by_movie())


@router.get("/bookings/theaters", response_model=ApiResponse[list[TheaterBookingStats]])
async def bookings_by_theater(reports: ReportService = Depends(get_report_service)):
    return ok("Theater booking report generated", await reports.bookings_by_theater())


@router.get("/bookings/users/{user_id}", response_model=ApiResponse[list[UserBookingSummary]])
async def user_bookings(user_id: int, reports: ReportService = Depends(get_report_service)):
    return ok("User booking summary generated", await reports.user_booking_summary(user_id))


@router.get("/revenue", response_model=ApiResponse[RevenueReport])
async def revenue(
    start_date: datetime,
    end_date: datetime,
    reports: ReportService = Depends(get_report_service),
):
    return ok("Revenue report generated", await reports.revenue_report(start_date, end_date))


@router.get("/popular/movies", response_model=ApiResponse[list[MovieBookingStats]])
async def popular_movies(
    limit: int = Query(10, ge=1, le=50),
    reports: ReportService = Depends(get_report_service),
):
    return ok("Popular movies retrieved", await reports.popular_movies(limit))


@router.get("/popular/theaters", response_model=ApiResponse[list[TheaterBookingStats]])
async def popular_theaters(
    limit: int = Query(10, ge=1, le=50),
    reports: ReportService = Depends(get_report_service),
):
    return ok("Popular theaters retrieved", await reports.popular_theaters(limit))


@router.get("/users/analytics", response_model=ApiResponse[UserAnalytics])
async def user_analytics(reports: ReportService = Depends(get_report_service)):
    return ok("User analytics generated", await reports.user_analytics())


@router.get("/dashboard", response_model=ApiResponse[DashboardOverview])
async def dashboard(reports: ReportService = Depends(get_report_service)):
    return ok("Dashboard overview generated", await reports.dashboard())
