"""Per-service usage rollup for the current local day."""

import logging
from collections import Counter
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from suvidha.api.schemas import ServiceUsage, ServiceUsageEntry
from suvidha.models.bill import Bill
from suvidha.models.enums import PaymentStatus, ServiceType
from suvidha.models.grievance import Grievance
from suvidha.models.meter_reading import MeterReading
from suvidha.models.payment import Payment
from suvidha.models.service_connection import ServiceConnection
from suvidha.services.locale_service import (
    day_bounds,
    from_minor_units,
    local_now,
    to_minor_units,
    to_utc,
)

logger = logging.getLogger(__name__)

# Grievance categories folded into the synthetic WASTE bucket
WASTE_GRIEVANCE_SOURCES = (ServiceType.MUNICIPAL, ServiceType.WATER)


def whole_rupees(minor: int) -> int:
    """Round a paise total to whole rupees (half up)."""
    return int(from_minor_units(minor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class UsageService:
    """Builds the five-bucket service usage summary."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _count_by_service(self, model, start: datetime, end: datetime) -> Counter:
        stmt = (
            select(model.service_type, func.count(model.id))
            .where(model.created_at >= start, model.created_at < end)
            .group_by(model.service_type)
        )
        rows = (await self.session.execute(stmt)).all()
        return Counter({service_type: count for service_type, count in rows})

    async def _revenue_by_service(self, start: datetime, end: datetime) -> Counter:
        stmt = (
            select(ServiceConnection.service_type, Payment.amount)
            .join(Bill, Payment.bill_id == Bill.id)
            .join(ServiceConnection, Bill.connection_id == ServiceConnection.id)
            .where(
                Payment.status == PaymentStatus.SUCCESS,
                Payment.created_at >= start,
                Payment.created_at < end,
            )
        )
        revenue: Counter = Counter()
        for service_type, amount in (await self.session.execute(stmt)).all():
            revenue[service_type] += to_minor_units(amount)
        return revenue

    async def get_service_usage(self, now: datetime | None = None) -> ServiceUsage:
        """Today's readings, revenue and grievances per service.

        Args:
            now: Aware "current" time in the server timezone (defaults to now)
        """
        start, end = day_bounds(now or local_now())
        start, end = to_utc(start), to_utc(end)

        readings = await self._count_by_service(MeterReading, start, end)
        revenue = await self._revenue_by_service(start, end)
        grievances = await self._count_by_service(Grievance, start, end)

        def entry(service_type: ServiceType) -> ServiceUsageEntry:
            return ServiceUsageEntry(
                count=readings[service_type],
                revenue=whole_rupees(revenue[service_type]),
            )

        waste_count = sum(grievances[s] for s in WASTE_GRIEVANCE_SOURCES)
        logger.debug(
            "service usage %s..%s: readings=%s grievances=%s",
            start,
            end,
            dict(readings),
            dict(grievances),
        )

        return ServiceUsage(
            ELECTRICITY=entry(ServiceType.ELECTRICITY),
            GAS=entry(ServiceType.GAS),
            WATER=entry(ServiceType.WATER),
            MUNICIPAL=entry(ServiceType.MUNICIPAL),
            WASTE=ServiceUsageEntry(count=waste_count, revenue=0),
        )


__all__ = ["UsageService", "whole_rupees"]
