"""Unit tests for payment statistics windows."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from suvidha.services.payment_report_service import compute_payment_stats

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestComputePaymentStats:
    """Today / last 7 days / month-to-date windows."""

    def test_windows(self):
        payments = [
            (Decimal("100.10"), NOW - timedelta(hours=2)),  # today
            (Decimal("200.20"), NOW - timedelta(days=3)),  # this week
            (Decimal("300.30"), NOW - timedelta(days=10)),  # this month only
            (Decimal("400.40"), datetime(2026, 2, 20, tzinfo=timezone.utc)),  # last month
        ]

        stats = compute_payment_stats(payments, NOW)

        assert (stats.today_total, stats.today_count) == (100.10, 1)
        assert (stats.week_total, stats.week_count) == (300.30, 2)
        assert (stats.month_total, stats.month_count) == (600.60, 3)

    def test_cents_do_not_drift(self):
        payments = [(0.1, NOW), (0.2, NOW)]

        stats = compute_payment_stats(payments, NOW)

        assert stats.today_total == 0.3

    def test_naive_timestamps_treated_as_utc(self):
        naive_midnight = datetime(2026, 3, 15, 0, 0)

        stats = compute_payment_stats([(Decimal("5"), naive_midnight)], NOW)

        assert stats.today_count == 1

    def test_empty(self):
        stats = compute_payment_stats([], NOW)

        assert stats.model_dump(by_alias=True) == {
            "todayTotal": 0.0,
            "todayCount": 0,
            "weekTotal": 0.0,
            "weekCount": 0,
            "monthTotal": 0.0,
            "monthCount": 0,
        }
