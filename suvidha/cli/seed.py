"""CLI entry point for seeding the database with demo data.

Creates a demo citizen with electricity, water and gas connections, a staff
admin, a few bills, a successful payment, a grievance and a verified baseline
reading, then prints bearer tokens for both users.

Usage:
    python -m suvidha.cli.seed
    suvidha-seed

Exit Codes:
    0 - Success: Database seeded (or already seeded)
    1 - Failure: Error encountered; transaction rolled back

Logging:
    INFO level logs to both stdout and logs/seed.log
"""

import asyncio
import logging
import sys
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suvidha.config import get_settings
from suvidha.models import (
    Base,
    Bill,
    BillStatus,
    ConnectionStatus,
    Grievance,
    GrievancePriority,
    GrievanceStatus,
    MeterReading,
    Payment,
    PaymentMethod,
    PaymentStatus,
    ReadingStatus,
    ServiceConnection,
    ServiceType,
    SubmittedBy,
    User,
    UserRole,
    utcnow,
)
from suvidha.services.auth_service import HmacTokenVerifier
from suvidha.services.logging import setup_server_logging

logger = logging.getLogger(__name__)

DEMO_CITIZEN_PHONE = "9876543210"
DEMO_ADMIN_PHONE = "9999999999"
DEMO_ADDRESS = "123 Gandhi Road, New Delhi"


async def seed_demo_data(session: AsyncSession) -> tuple[User, User]:
    """Insert the demo data set unless the demo citizen already exists.

    Returns:
        (citizen, admin) users
    """
    existing = await session.execute(
        select(User).where(User.phone.in_([DEMO_CITIZEN_PHONE, DEMO_ADMIN_PHONE]))
    )
    users = {user.phone: user for user in existing.scalars().all()}
    if DEMO_CITIZEN_PHONE in users and DEMO_ADMIN_PHONE in users:
        logger.info("Demo data already present, skipping inserts")
        return users[DEMO_CITIZEN_PHONE], users[DEMO_ADMIN_PHONE]

    citizen = User(
        phone=DEMO_CITIZEN_PHONE,
        name="Demo User",
        email="demo@suvidha.gov.in",
        role=UserRole.CITIZEN,
        language="en",
        is_verified=True,
    )
    admin = User(
        phone=DEMO_ADMIN_PHONE,
        name="Kiosk Admin",
        email="admin@suvidha.gov.in",
        role=UserRole.ADMIN,
        language="en",
        is_verified=True,
    )
    session.add_all([citizen, admin])
    await session.flush()
    logger.info(f"Created users: {citizen.name} ({citizen.phone}), {admin.name} ({admin.phone})")

    electricity = ServiceConnection(
        user_id=citizen.id,
        service_type=ServiceType.ELECTRICITY,
        connection_no="ELEC-2024-001234",
        meter_no="MTR-98765",
        address=DEMO_ADDRESS,
        status=ConnectionStatus.ACTIVE,
    )
    water = ServiceConnection(
        user_id=citizen.id,
        service_type=ServiceType.WATER,
        connection_no="WATER-2024-005678",
        meter_no="WTR-54321",
        address=DEMO_ADDRESS,
        status=ConnectionStatus.ACTIVE,
    )
    gas = ServiceConnection(
        user_id=citizen.id,
        service_type=ServiceType.GAS,
        connection_no="GAS-2024-009012",
        address=DEMO_ADDRESS,
        status=ConnectionStatus.ACTIVE,
    )
    session.add_all([electricity, water, gas])
    await session.flush()
    logger.info("Created 3 service connections")

    def bill(connection, bill_no, amount, due, status, units=None, paid=Decimal("0")):
        return Bill(
            connection_id=connection.id,
            user_id=citizen.id,
            bill_no=bill_no,
            bill_date=date(2024, 1, 1),
            period_from=date(2024, 1, 1),
            period_to=date(2024, 1, 31),
            due_date=due,
            units_consumed=units,
            amount=amount,
            total_amount=amount,
            amount_paid=paid,
            status=status,
        )

    paid_bill = bill(
        electricity,
        "BILL-ELEC-2023-0012",
        Decimal("2100.00"),
        date(2024, 1, 15),
        BillStatus.PAID,
        units=Decimal("210"),
        paid=Decimal("2100.00"),
    )
    session.add_all(
        [
            bill(
                electricity,
                "BILL-ELEC-2024-0001",
                Decimal("2450.00"),
                date(2024, 2, 15),
                BillStatus.UNPAID,
                units=Decimal("245"),
            ),
            bill(
                water,
                "BILL-WATER-2024-0001",
                Decimal("850.00"),
                date(2024, 2, 20),
                BillStatus.UNPAID,
                units=Decimal("15000"),
            ),
            bill(
                gas,
                "BILL-GAS-2024-0001",
                Decimal("1200.00"),
                date(2024, 2, 10),
                BillStatus.OVERDUE,
            ),
            paid_bill,
        ]
    )
    await session.flush()
    logger.info("Created 4 bills")

    session.add(
        Payment(
            bill_id=paid_bill.id,
            user_id=citizen.id,
            amount=Decimal("2100.00"),
            method=PaymentMethod.UPI,
            status=PaymentStatus.SUCCESS,
            transaction_id="TXN-DEMO-0001",
            receipt_no="RCP-DEMO-0001",
            kiosk_id="KIOSK-DEL-001",
            paid_at=utcnow(),
        )
    )

    session.add(
        Grievance(
            user_id=citizen.id,
            connection_id=electricity.id,
            ticket_no="GRV-2024-000001",
            service_type=ServiceType.ELECTRICITY,
            category="Power Outage",
            subject="Frequent power cuts in sector 5",
            description=(
                "We are experiencing frequent power cuts lasting 2-3 hours daily "
                "for the past week."
            ),
            priority=GrievancePriority.HIGH,
            status=GrievanceStatus.IN_PROGRESS,
        )
    )

    now = utcnow()
    session.add(
        MeterReading(
            connection_id=electricity.id,
            user_id=citizen.id,
            service_type=ServiceType.ELECTRICITY,
            reading=Decimal("120.00"),
            previous_reading=Decimal("0"),
            consumption=Decimal("120.00"),
            submitted_by=SubmittedBy.STAFF,
            status=ReadingStatus.VERIFIED,
            is_verified=True,
            verified_by=admin.id,
            verified_at=now,
            notes="Initial reading",
            reading_date=now,
        )
    )

    await session.commit()
    logger.info("Created payment, grievance and baseline reading")
    return citizen, admin


async def main() -> int:
    """
    Main entry point for the seed CLI.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    setup_server_logging(log_file="logs/seed.log")
    try:
        logger.info("Starting database seed...")

        from suvidha.services import AsyncSessionLocal, async_engine

        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with AsyncSessionLocal() as session:
            citizen, admin = await seed_demo_data(session)

        settings = get_settings()
        verifier = HmacTokenVerifier(settings.auth_secret, settings.token_max_age_seconds)
        print(f"Citizen token ({citizen.phone}): {verifier.issue(citizen.id, citizen.role)}")
        print(f"Admin token   ({admin.phone}): {verifier.issue(admin.id, admin.role)}")

        await async_engine.dispose()
        logger.info("Seed completed")
        return 0

    except KeyboardInterrupt:
        logger.warning("Seed interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Seed failed: {e}", exc_info=True)
        return 1


def run() -> None:
    """Console script wrapper."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
