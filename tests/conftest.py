"""Pytest configuration: test settings, per-test SQLite databases and seed data."""

import os

# Set test settings BEFORE any imports from suvidha
# (the session factory and settings are created at import time)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_suvidha.db")
os.environ.setdefault("AUTH_SECRET", "test-secret")
os.environ.setdefault("DEFAULT_LANGUAGE", "en")

from datetime import date, datetime, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from suvidha.api.app import app  # noqa: E402
from suvidha.config import get_settings  # noqa: E402
from suvidha.models import (  # noqa: E402
    Base,
    Bill,
    BillStatus,
    ConnectionStatus,
    Grievance,
    GrievanceStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    ServiceConnection,
    ServiceType,
    User,
    UserRole,
    utcnow,
)
from suvidha.services import get_async_session  # noqa: E402
from suvidha.services.auth_service import HmacTokenVerifier  # noqa: E402


def seed_world(session: Session, now: datetime | None = None) -> SimpleNamespace:
    """Insert a small data set (two citizens, admin, staff, connections, bills,
    payments, grievances) and return the created IDs.

    Works with a plain sync Session, or through AsyncSession.run_sync.
    """
    now = now or utcnow()

    citizen = User(phone="9876543210", name="Demo User", role=UserRole.CITIZEN, is_verified=True)
    other = User(phone="9123456780", name="Other Citizen", role=UserRole.CITIZEN)
    admin = User(phone="9999999999", name="Kiosk Admin", role=UserRole.ADMIN)
    staff = User(phone="9888888888", name="Field Staff", role=UserRole.STAFF)
    session.add_all([citizen, other, admin, staff])
    session.flush()

    electricity = ServiceConnection(
        user_id=citizen.id,
        service_type=ServiceType.ELECTRICITY,
        connection_no="ELEC-2024-001234",
        meter_no="MTR-98765",
        address="123 Gandhi Road",
        status=ConnectionStatus.ACTIVE,
    )
    water = ServiceConnection(
        user_id=citizen.id,
        service_type=ServiceType.WATER,
        connection_no="WATER-2024-005678",
        meter_no="WTR-54321",
        address="123 Gandhi Road",
        status=ConnectionStatus.ACTIVE,
    )
    foreign = ServiceConnection(
        user_id=other.id,
        service_type=ServiceType.GAS,
        connection_no="GAS-2024-777777",
        address="9 Nehru Marg",
        status=ConnectionStatus.PENDING,
    )
    session.add_all([electricity, water, foreign])
    session.flush()

    def bill(connection, bill_no, amount):
        return Bill(
            connection_id=connection.id,
            user_id=connection.user_id,
            bill_no=bill_no,
            bill_date=date(2024, 1, 1),
            due_date=date(2024, 2, 15),
            period_from=date(2024, 1, 1),
            period_to=date(2024, 1, 31),
            amount=amount,
            total_amount=amount,
            status=BillStatus.UNPAID,
        )

    elec_bill = bill(electricity, "BILL-ELEC-2024-0001", Decimal("2450.00"))
    water_bill = bill(water, "BILL-WATER-2024-0001", Decimal("850.00"))
    session.add_all([elec_bill, water_bill])
    session.flush()

    paid = Payment(
        bill_id=elec_bill.id,
        user_id=citizen.id,
        amount=Decimal("2450.00"),
        method=PaymentMethod.UPI,
        status=PaymentStatus.SUCCESS,
        kiosk_id="KIOSK-DEL-001",
        paid_at=now,
        created_at=now,
    )
    failed = Payment(
        bill_id=water_bill.id,
        user_id=citizen.id,
        amount=Decimal("850.00"),
        method=PaymentMethod.CARD,
        status=PaymentStatus.FAILED,
        transaction_id="TXN-CARD-42",
        receipt_no="RCP-42",
        created_at=now - timedelta(minutes=5),
    )
    session.add_all([paid, failed])

    outage = Grievance(
        user_id=citizen.id,
        connection_id=electricity.id,
        ticket_no="GRV-2024-000001",
        service_type=ServiceType.ELECTRICITY,
        category="Power Outage",
        subject="Frequent power cuts",
        status=GrievanceStatus.IN_PROGRESS,
        created_at=now - timedelta(minutes=10),
    )
    pressure = Grievance(
        user_id=citizen.id,
        connection_id=water.id,
        ticket_no="GRV-2024-000002",
        service_type=ServiceType.WATER,
        category="Low Pressure",
        subject="No water after 9 AM",
        status=GrievanceStatus.SUBMITTED,
        kiosk_id="KIOSK-DEL-002",
        created_at=now - timedelta(minutes=20),
    )
    session.add_all([outage, pressure])
    session.commit()

    return SimpleNamespace(
        citizen_id=citizen.id,
        other_id=other.id,
        admin_id=admin.id,
        staff_id=staff.id,
        electricity_id=electricity.id,
        water_id=water.id,
        foreign_id=foreign.id,
        elec_bill_id=elec_bill.id,
        water_bill_id=water_bill.id,
        paid_payment_id=paid.id,
        failed_payment_id=failed.id,
    )


@pytest.fixture
def token_verifier() -> HmacTokenVerifier:
    """Verifier sharing the application's secret."""
    settings = get_settings()
    return HmacTokenVerifier(settings.auth_secret, settings.token_max_age_seconds)


@pytest_asyncio.fixture
async def async_session(tmp_path):
    """Async session bound to a fresh SQLite file database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'integration.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def api_db(tmp_path):
    """Seeded SQLite file database wired into the app via get_async_session."""
    db_file = tmp_path / "contract.db"

    sync_engine = create_engine(f"sqlite:///{db_file}")
    Base.metadata.create_all(sync_engine)
    with Session(sync_engine) as session:
        ids = seed_world(session)
    sync_engine.dispose()

    # NullPool: TestClient may run each request on a different event loop
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", poolclass=NullPool)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    yield ids
    app.dependency_overrides.pop(get_async_session, None)


@pytest.fixture
def client(api_db) -> TestClient:
    """Create FastAPI test client over the seeded database."""
    return TestClient(app)


@pytest.fixture
def auth_headers(api_db, token_verifier):
    """Factory: Authorization headers for a seeded user by name."""

    roles = {
        "citizen": (api_db.citizen_id, UserRole.CITIZEN),
        "other": (api_db.other_id, UserRole.CITIZEN),
        "admin": (api_db.admin_id, UserRole.ADMIN),
        "staff": (api_db.staff_id, UserRole.STAFF),
    }

    def _headers(who: str) -> dict[str, str]:
        user_id, role = roles[who]
        return {"Authorization": f"Bearer {token_verifier.issue(user_id, role)}"}

    return _headers


@pytest.fixture
def seed(async_session):
    """Factory: seed the integration database, optionally as of a fixed time."""

    async def _seed(now: datetime | None = None) -> SimpleNamespace:
        return await async_session.run_sync(seed_world, now)

    return _seed


@pytest_asyncio.fixture
async def world(seed) -> SimpleNamespace:
    """Seed data set inside the integration database."""
    return await seed()
