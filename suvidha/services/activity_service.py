"""Recent activity feed for the admin dashboard.

Merges the newest meter readings, successful payments and grievances into one
list. The three sources are read independently (not in one snapshot), so the
feed is eventually consistent, which is fine for a dashboard. Any failing read
fails the whole feed.
"""

import logging

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from suvidha.api.schemas import ActivityItem
from suvidha.models.bill import Bill
from suvidha.models.enums import PaymentStatus
from suvidha.models.grievance import Grievance
from suvidha.models.meter_reading import MeterReading
from suvidha.models.payment import Payment
from suvidha.services.filters import clamp_limit
from suvidha.services.locale_service import ensure_aware, format_amount, format_number
from suvidha.services.localizer import Localizer

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
WEB_KIOSK = "WEB"


class ActivityService:
    """Builds the combined activity feed."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _recent_readings(self, limit: int) -> list[MeterReading]:
        stmt = (
            select(MeterReading)
            .options(selectinload(MeterReading.user))
            .order_by(desc(MeterReading.created_at))
            .limit(limit)
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def _recent_payments(self, limit: int) -> list[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.status == PaymentStatus.SUCCESS)
            .options(
                selectinload(Payment.user),
                selectinload(Payment.bill).selectinload(Bill.connection),
            )
            .order_by(desc(Payment.created_at))
            .limit(limit)
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def _recent_grievances(self, limit: int) -> list[Grievance]:
        stmt = (
            select(Grievance)
            .options(selectinload(Grievance.user))
            .order_by(desc(Grievance.created_at))
            .limit(limit)
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def get_recent_activities(
        self, localizer: Localizer, limit: int | None = None
    ) -> list[ActivityItem]:
        """Return at most `limit` activities, newest first.

        Args:
            localizer: Request locale used for descriptions and amounts
            limit: Maximum number of items (default 10, clamped to 1..100)
        """
        limit = clamp_limit(limit, DEFAULT_LIMIT, MAX_LIMIT)
        language = localizer.language

        readings = await self._recent_readings(limit)
        payments = await self._recent_payments(limit)
        grievances = await self._recent_grievances(limit)

        activities = [
            ActivityItem(
                id=reading.id,
                type="METER_READING",
                description=localizer.t(
                    "activity.meter_reading", reading=format_number(reading.reading, language)
                ),
                user=reading.user.name,
                kiosk_id=WEB_KIOSK,
                timestamp=ensure_aware(reading.created_at),
                service_type=reading.service_type,
            )
            for reading in readings
        ]
        activities.extend(
            ActivityItem(
                id=payment.id,
                type="PAYMENT",
                description=localizer.t(
                    "activity.payment", amount=format_amount(payment.amount, language)
                ),
                user=payment.user.name,
                kiosk_id=payment.kiosk_id or WEB_KIOSK,
                timestamp=ensure_aware(payment.created_at),
                service_type=payment.bill.connection.service_type,
            )
            for payment in payments
        )
        activities.extend(
            ActivityItem(
                id=grievance.id,
                type="GRIEVANCE",
                description=localizer.t(
                    "activity.grievance", category=grievance.category, subject=grievance.subject
                ),
                user=grievance.user.name,
                kiosk_id=grievance.kiosk_id or WEB_KIOSK,
                timestamp=ensure_aware(grievance.created_at),
                service_type=grievance.service_type,
            )
            for grievance in grievances
        )

        activities.sort(key=lambda item: item.timestamp, reverse=True)
        logger.debug(
            "activities: readings=%d payments=%d grievances=%d limit=%d",
            len(readings),
            len(payments),
            len(grievances),
            limit,
        )
        return activities[:limit]


__all__ = ["ActivityService"]
