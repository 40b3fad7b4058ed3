"""Admin console endpoints (ADMIN or STAFF only)."""

import logging
import time
from datetime import datetime

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from suvidha.api.errors import AppError, InternalError, success_response
from suvidha.api.schemas import (
    MAX_ID,
    MeterReadingResponse,
    Pagination,
    RejectReadingRequest,
)
from suvidha.models.user import User
from suvidha.services import get_async_session
from suvidha.services.activity_service import ActivityService
from suvidha.services.auth_service import require_staff
from suvidha.services.dashboard_service import DashboardService
from suvidha.services.filters import (
    ConnectionFilter,
    GrievanceFilter,
    PaymentFilter,
    ReadingFilter,
)
from suvidha.services.localizer import Localizer, get_localizer
from suvidha.services.meter_reading_service import MeterReadingService
from suvidha.services.payment_report_service import PaymentReportService
from suvidha.services.usage_service import UsageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _log_debug(endpoint: str, start_time: float, staff: User, **kwargs) -> None:
    """Log an admin request with timing and caller at DEBUG level."""
    duration_ms = int((time.time() - start_time) * 1000)
    extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug(
        "admin.%s: user_id=%s role=%s %sduration_ms=%d",
        endpoint,
        staff.id,
        staff.role.value,
        f"{extra} " if extra else "",
        duration_ms,
    )


# Meter readings


@router.get("/meter-readings")
async def list_meter_readings(
    status: str | None = None,
    service_type: str | None = Query(None, alias="serviceType"),  # noqa: B008
    page: int | None = None,
    limit: int | None = None,
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    List meter readings for review, newest reading date first.

    Raises:
        400: Unknown status or service type
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        filters = ReadingFilter.from_query(status, service_type, page, limit)
        readings, total = await MeterReadingService(session).list_readings(filters)
        _log_debug("meter_readings", start_time, staff, count=len(readings), total=total)
        return success_response(
            data=[MeterReadingResponse.model_validate(r) for r in readings],
            pagination=Pagination.build(filters.page, filters.limit, total),
        )

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/meter-readings: {e}", exc_info=True)
        raise InternalError() from e


@router.post("/meter-readings/{reading_id}/verify")
async def verify_meter_reading(
    reading_id: int = Path(ge=1, le=MAX_ID),  # noqa: B008
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    localizer: Localizer = Depends(get_localizer),  # noqa: B008
) -> dict:
    """
    Verify a PENDING reading; it becomes the connection's new baseline.

    Raises:
        400: Reading id out of range
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        404: Reading not found
        409: Reading already verified or rejected
        500: Server error
    """
    start_time = time.time()
    try:
        reading = await MeterReadingService(session).verify_reading(reading_id, staff.id)
        _log_debug("verify", start_time, staff, reading_id=reading_id)
        return success_response(
            data=MeterReadingResponse.model_validate(reading),
            message=localizer.t("messages.reading_verified"),
        )

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in POST /admin/meter-readings/{reading_id}/verify: {e}", exc_info=True)
        raise InternalError() from e


@router.post("/meter-readings/{reading_id}/reject")
async def reject_meter_reading(
    reading_id: int = Path(ge=1, le=MAX_ID),  # noqa: B008
    body: RejectReadingRequest | None = Body(None),  # noqa: B008
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    localizer: Localizer = Depends(get_localizer),  # noqa: B008
) -> dict:
    """
    Reject a PENDING reading with an optional reason.

    Raises:
        400: Reading id out of range
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        404: Reading not found
        409: Reading already verified or rejected
        500: Server error
    """
    start_time = time.time()
    try:
        reason = body.reason if body else None
        reading = await MeterReadingService(session).reject_reading(
            reading_id, staff.id, reason=reason
        )
        _log_debug("reject", start_time, staff, reading_id=reading_id)
        return success_response(
            data=MeterReadingResponse.model_validate(reading),
            message=localizer.t("messages.reading_rejected"),
        )

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in POST /admin/meter-readings/{reading_id}/reject: {e}", exc_info=True)
        raise InternalError() from e


# Activity, payments and usage


@router.get("/activities")
async def list_activities(
    limit: int | None = None,
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    localizer: Localizer = Depends(get_localizer),  # noqa: B008
) -> dict:
    """
    Recent readings, payments and grievances merged into one feed.

    Raises:
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        activities = await ActivityService(session).get_recent_activities(localizer, limit)
        _log_debug("activities", start_time, staff, count=len(activities))
        return success_response(data=activities)

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/activities: {e}", exc_info=True)
        raise InternalError() from e


@router.get("/payments")
async def list_payments(
    status: str | None = None,
    service_type: str | None = Query(None, alias="serviceType"),  # noqa: B008
    limit: int | None = None,
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    Recent payments plus today / week / month statistics.

    Raises:
        400: Unknown status or service type
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        filters = PaymentFilter.from_query(status, service_type, limit)
        page = await PaymentReportService(session).get_payments_page(filters)
        _log_debug("payments", start_time, staff, count=len(page.payments))
        return success_response(data=page)

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/payments: {e}", exc_info=True)
        raise InternalError() from e


@router.get("/service-usage")
async def get_service_usage(
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    Today's per-service reading counts, revenue and waste grievances.

    Raises:
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        usage = await UsageService(session).get_service_usage()
        _log_debug("service_usage", start_time, staff)
        return success_response(data=usage)

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/service-usage: {e}", exc_info=True)
        raise InternalError() from e


# Dashboard, lists and reports


@router.get("/dashboard")
async def get_dashboard(
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    Headline counters, active services per type and the five latest grievances.

    Raises:
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        dashboard = await DashboardService(session).get_dashboard()
        _log_debug("dashboard", start_time, staff)
        return success_response(data=dashboard)

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/dashboard: {e}", exc_info=True)
        raise InternalError() from e


@router.get("/grievances")
async def list_grievances(
    status: str | None = None,
    service_type: str | None = Query(None, alias="serviceType"),  # noqa: B008
    page: int | None = None,
    limit: int | None = None,
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    List grievances, newest first, with pagination.

    Raises:
        400: Unknown status or service type
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        filters = GrievanceFilter.from_query(status, service_type, page, limit)
        grievances, total = await DashboardService(session).list_grievances(filters)
        _log_debug("grievances", start_time, staff, count=len(grievances), total=total)
        return success_response(
            data=grievances,
            pagination=Pagination.build(filters.page, filters.limit, total),
        )

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/grievances: {e}", exc_info=True)
        raise InternalError() from e


@router.get("/connections")
async def list_connections(
    search: str | None = None,
    status: str | None = None,
    service_type: str | None = Query(None, alias="serviceType"),  # noqa: B008
    page: int | None = None,
    limit: int | None = None,
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    List connections with owner details and bill/reading counts.

    `search` matches connection number, meter number, owner name or phone.

    Raises:
        400: Unknown status or service type
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        filters = ConnectionFilter.from_query(search, status, service_type, page, limit)
        connections, total = await DashboardService(session).list_connections(filters)
        _log_debug("connections", start_time, staff, count=len(connections), total=total)
        return success_response(
            data=connections,
            pagination=Pagination.build(filters.page, filters.limit, total),
        )

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/connections: {e}", exc_info=True)
        raise InternalError() from e


@router.get("/reports")
async def get_report(
    report_type: str | None = Query(None, alias="type"),  # noqa: B008
    start_date: datetime | None = Query(None, alias="startDate"),  # noqa: B008
    end_date: datetime | None = Query(None, alias="endDate"),  # noqa: B008
    staff: User = Depends(require_staff),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> dict:
    """
    Grouped report for payments, grievances or connections.

    Raises:
        400: Unknown report type or malformed date
        401: Missing or invalid token
        403: Caller is not ADMIN or STAFF
        500: Server error
    """
    start_time = time.time()
    try:
        report = await DashboardService(session).get_report(report_type, start_date, end_date)
        _log_debug("reports", start_time, staff, type=report_type, groups=len(report.report))
        return success_response(data=report)

    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in GET /admin/reports: {e}", exc_info=True)
        raise InternalError() from e


__all__ = ["router"]
