"""Payment listing and time-windowed payment statistics for the admin console."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from suvidha.api.schemas import (
    PaymentBill,
    PaymentBillConnection,
    PaymentItem,
    PaymentsPage,
    PaymentStats,
    PaymentUser,
)
from suvidha.models.bill import Bill
from suvidha.models.enums import PaymentStatus
from suvidha.models.payment import Payment
from suvidha.services.filters import PaymentFilter
from suvidha.services.locale_service import (
    ensure_aware,
    from_minor_units,
    local_now,
    start_of_day,
    start_of_month,
    to_minor_units,
)

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    """Running total for one time window, in paise."""

    since: datetime
    total_minor: int = 0
    count: int = 0

    def add(self, created_at: datetime, amount_minor: int) -> None:
        if created_at >= self.since:
            self.total_minor += amount_minor
            self.count += 1

    @property
    def total(self) -> float:
        return float(from_minor_units(self.total_minor))


def compute_payment_stats(
    payments: Iterable[tuple[Decimal, datetime]], now: datetime
) -> PaymentStats:
    """Aggregate successful payments into today / last 7 days / month-to-date windows.

    Args:
        payments: (amount, created_at) pairs of SUCCESS payments
        now: Aware "current" time in the server timezone

    Returns:
        PaymentStats with totals summed in integer paise
    """
    today = start_of_day(now)
    today_window = _Window(since=today)
    week_window = _Window(since=today - timedelta(days=7))
    month_window = _Window(since=start_of_month(now))

    for amount, created_at in payments:
        created = ensure_aware(created_at)
        minor = to_minor_units(amount)
        for window in (today_window, week_window, month_window):
            window.add(created, minor)

    return PaymentStats(
        today_total=today_window.total,
        today_count=today_window.count,
        week_total=week_window.total,
        week_count=week_window.count,
        month_total=month_window.total,
        month_count=month_window.count,
    )


def _to_item(payment: Payment) -> PaymentItem:
    bill = payment.bill
    connection = bill.connection if bill else None
    user = payment.user
    return PaymentItem(
        id=payment.id,
        amount=float(payment.amount),
        method=payment.method.value,
        status=payment.status.value,
        transaction_id=payment.transaction_id or f"TXN-{payment.id:08d}",
        receipt_no=payment.receipt_no or "",
        paid_at=ensure_aware(payment.paid_at).isoformat() if payment.paid_at else "",
        created_at=payment.created_at,
        user=PaymentUser(
            name=(user.name if user else None) or "Unknown",
            phone=(user.phone if user else None) or "N/A",
        ),
        bill=PaymentBill(
            bill_no=(bill.bill_no if bill else None) or "N/A",
            service_type=connection.service_type.value if connection else "UNKNOWN",
            connection=PaymentBillConnection(
                connection_no=(connection.connection_no if connection else None) or "N/A"
            ),
        ),
    )


class PaymentReportService:
    """Read-only payment queries for the admin console."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_payments(self, filters: PaymentFilter) -> list[PaymentItem]:
        """Newest payments matching the status filter, capped at filters.limit.

        The service-type filter is applied after the capped query, so a page may
        hold fewer than `limit` items.
        """
        stmt = (
            select(Payment)
            .options(
                selectinload(Payment.user),
                selectinload(Payment.bill).selectinload(Bill.connection),
            )
            .order_by(desc(Payment.created_at), desc(Payment.id))
            .limit(filters.limit)
        )
        if filters.status is not None:
            stmt = stmt.where(Payment.status == filters.status)

        payments = (await self.session.execute(stmt)).scalars().all()

        if filters.service_type is not None:
            payments = [
                p
                for p in payments
                if p.bill is not None
                and p.bill.connection is not None
                and p.bill.connection.service_type == filters.service_type
            ]

        return [_to_item(p) for p in payments]

    async def get_stats(self, now: datetime | None = None) -> PaymentStats:
        """Payment stats over every SUCCESS payment, windowed in process."""
        stmt = select(Payment.amount, Payment.created_at).where(
            Payment.status == PaymentStatus.SUCCESS
        )
        rows = (await self.session.execute(stmt)).all()
        return compute_payment_stats(((row[0], row[1]) for row in rows), now or local_now())

    async def get_payments_page(
        self, filters: PaymentFilter, now: datetime | None = None
    ) -> PaymentsPage:
        payments = await self.list_payments(filters)
        stats = await self.get_stats(now)
        logger.debug("payments: count=%d filters=%s", len(payments), filters)
        return PaymentsPage(payments=payments, stats=stats)


__all__ = ["PaymentReportService", "compute_payment_stats"]
