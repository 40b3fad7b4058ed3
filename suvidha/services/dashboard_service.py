"""Admin console queries: dashboard, grievance and connection lists, reports."""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from suvidha.api.errors import ValidationError
from suvidha.api.schemas import (
    ConnectionItem,
    ConnectionOwner,
    Dashboard,
    DashboardStats,
    GrievanceItem,
    Report,
    ReportPeriod,
)
from suvidha.models.bill import Bill
from suvidha.models.enums import (
    ConnectionStatus,
    GrievanceStatus,
    PaymentStatus,
    ReadingStatus,
    UserRole,
)
from suvidha.models.grievance import Grievance
from suvidha.models.meter_reading import MeterReading
from suvidha.models.payment import Payment
from suvidha.models.service_connection import ServiceConnection
from suvidha.models.user import User
from suvidha.services.filters import ConnectionFilter, GrievanceFilter
from suvidha.services.locale_service import (
    from_minor_units,
    local_now,
    start_of_day,
    to_minor_units,
    to_utc,
)

logger = logging.getLogger(__name__)

RECENT_GRIEVANCES = 5
DEFAULT_REPORT_DAYS = 30
REPORT_TYPES = ("payments", "grievances", "connections")

OPEN_GRIEVANCE_STATUSES = (GrievanceStatus.SUBMITTED, GrievanceStatus.IN_PROGRESS)


class DashboardService:
    """Read-only aggregate queries for ADMIN/STAFF users."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _count(self, model, *conditions) -> int:
        stmt = select(func.count(model.id)).where(*conditions)
        return (await self.session.execute(stmt)).scalar_one()

    # Dashboard

    async def get_dashboard(self, now: datetime | None = None) -> Dashboard:
        """Headline counters plus the five most recent grievances."""
        today = to_utc(start_of_day(now or local_now()))

        total_users = await self._count(User, User.role == UserRole.CITIZEN)
        total_connections = await self._count(
            ServiceConnection, ServiceConnection.status == ConnectionStatus.ACTIVE
        )
        pending_grievances = await self._count(
            Grievance, Grievance.status.in_(OPEN_GRIEVANCE_STATUSES)
        )
        pending_readings = await self._count(
            MeterReading, MeterReading.status == ReadingStatus.PENDING
        )

        payment_rows = (
            await self.session.execute(
                select(Payment.amount).where(
                    Payment.status == PaymentStatus.SUCCESS, Payment.created_at >= today
                )
            )
        ).scalars().all()
        today_minor = sum(to_minor_units(amount) for amount in payment_rows)

        active_rows = (
            await self.session.execute(
                select(ServiceConnection.service_type, func.count(ServiceConnection.id))
                .where(ServiceConnection.status == ConnectionStatus.ACTIVE)
                .group_by(ServiceConnection.service_type)
            )
        ).all()

        recent = (
            await self.session.execute(
                select(Grievance)
                .options(selectinload(Grievance.user))
                .order_by(desc(Grievance.created_at), desc(Grievance.id))
                .limit(RECENT_GRIEVANCES)
            )
        ).scalars().all()

        return Dashboard(
            stats=DashboardStats(
                total_users=total_users,
                total_connections=total_connections,
                pending_grievances=pending_grievances,
                pending_readings=pending_readings,
                today_payments=len(payment_rows),
                today_payments_amount=float(from_minor_units(today_minor)),
                active_services={service.value: count for service, count in active_rows},
            ),
            recent_grievances=[GrievanceItem.model_validate(g) for g in recent],
        )

    # Lists

    async def list_grievances(self, filters: GrievanceFilter) -> tuple[list[GrievanceItem], int]:
        """Page of grievances, newest first, with the total matching count."""
        conditions = []
        if filters.status is not None:
            conditions.append(Grievance.status == filters.status)
        if filters.service_type is not None:
            conditions.append(Grievance.service_type == filters.service_type)

        stmt = (
            select(Grievance)
            .options(selectinload(Grievance.user))
            .where(*conditions)
            .order_by(desc(Grievance.created_at), desc(Grievance.id))
            .offset(filters.offset)
            .limit(filters.limit)
        )
        grievances = (await self.session.execute(stmt)).scalars().all()
        total = await self._count(Grievance, *conditions)
        return [GrievanceItem.model_validate(g) for g in grievances], total

    async def list_connections(
        self, filters: ConnectionFilter
    ) -> tuple[list[ConnectionItem], int]:
        """Page of connections with owner details and bill/reading counts.

        `search` matches connection number, meter number, owner name or phone,
        case-insensitively.
        """
        conditions = []
        if filters.status is not None:
            conditions.append(ServiceConnection.status == filters.status)
        if filters.service_type is not None:
            conditions.append(ServiceConnection.service_type == filters.service_type)
        if filters.search:
            term = filters.search
            conditions.append(
                or_(
                    ServiceConnection.connection_no.icontains(term, autoescape=True),
                    ServiceConnection.meter_no.icontains(term, autoescape=True),
                    User.name.icontains(term, autoescape=True),
                    User.phone.icontains(term, autoescape=True),
                )
            )

        bill_count = (
            select(func.count(Bill.id))
            .where(Bill.connection_id == ServiceConnection.id)
            .correlate(ServiceConnection)
            .scalar_subquery()
        )
        reading_count = (
            select(func.count(MeterReading.id))
            .where(MeterReading.connection_id == ServiceConnection.id)
            .correlate(ServiceConnection)
            .scalar_subquery()
        )

        stmt = (
            select(
                ServiceConnection,
                bill_count.label("bill_count"),
                reading_count.label("reading_count"),
            )
            .join(User, ServiceConnection.user_id == User.id)
            .options(selectinload(ServiceConnection.user))
            .where(*conditions)
            .order_by(desc(ServiceConnection.created_at), desc(ServiceConnection.id))
            .offset(filters.offset)
            .limit(filters.limit)
        )
        rows = (await self.session.execute(stmt)).all()

        count_stmt = (
            select(func.count(ServiceConnection.id))
            .join(User, ServiceConnection.user_id == User.id)
            .where(*conditions)
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        items = [
            ConnectionItem(
                id=connection.id,
                service_type=connection.service_type,
                connection_no=connection.connection_no,
                meter_no=connection.meter_no,
                address=connection.address,
                status=connection.status,
                created_at=connection.created_at,
                user=ConnectionOwner.model_validate(connection.user),
                bill_count=bills,
                reading_count=readings,
            )
            for connection, bills, readings in rows
        ]
        return items, total

    # Reports

    async def _payments_report(self, start: datetime, end: datetime) -> list[dict[str, Any]]:
        stmt = select(Payment.status, Payment.amount).where(
            Payment.created_at >= start, Payment.created_at <= end
        )
        counts: dict[PaymentStatus, int] = defaultdict(int)
        totals: dict[PaymentStatus, int] = defaultdict(int)
        for status, amount in (await self.session.execute(stmt)).all():
            counts[status] += 1
            totals[status] += to_minor_units(amount)

        return [
            {
                "status": status.value,
                "count": counts[status],
                "totalAmount": float(from_minor_units(totals[status])),
            }
            for status in sorted(counts, key=lambda s: s.value)
        ]

    async def _grouped_report(self, model, start: datetime, end: datetime) -> list[dict[str, Any]]:
        stmt = (
            select(model.service_type, model.status, func.count(model.id))
            .where(model.created_at >= start, model.created_at <= end)
            .group_by(model.service_type, model.status)
            .order_by(model.service_type, model.status)
        )
        return [
            {"serviceType": service_type.value, "status": status.value, "count": count}
            for service_type, status, count in (await self.session.execute(stmt)).all()
        ]

    async def get_report(
        self,
        report_type: str | None,
        start: datetime | None = None,
        end: datetime | None = None,
        now: datetime | None = None,
    ) -> Report:
        """Grouped counts for one entity over [start, end].

        Args:
            report_type: payments, grievances or connections
            start: Window start (default: 30 days before `end`)
            end: Window end (default: now)

        Raises:
            ValidationError: Unknown report type
        """
        if report_type not in REPORT_TYPES:
            raise ValidationError("Invalid report type", code="invalid_report_type")

        end = to_utc(end or now or local_now())
        start = to_utc(start) if start else end - timedelta(days=DEFAULT_REPORT_DAYS)

        if report_type == "payments":
            rows = await self._payments_report(start, end)
        elif report_type == "grievances":
            rows = await self._grouped_report(Grievance, start, end)
        else:
            rows = await self._grouped_report(ServiceConnection, start, end)

        logger.debug("report %s %s..%s: %d groups", report_type, start, end, len(rows))
        return Report(type=report_type, period=ReportPeriod(start=start, end=end), report=rows)


__all__ = ["DashboardService", "REPORT_TYPES"]
