"""Service for the meter reading submission and verification workflow.

Readings are created PENDING by the owning citizen. ADMIN/STAFF move a PENDING
reading exactly once to VERIFIED or REJECTED. The baseline for a new submission
is the connection's most recent VERIFIED reading (0 when there is none).
"""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from suvidha.api.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from suvidha.models import utcnow
from suvidha.models.enums import ReadingStatus, SubmittedBy
from suvidha.models.meter_reading import MeterReading
from suvidha.models.service_connection import ServiceConnection
from suvidha.services.audit_service import AuditService
from suvidha.services.filters import ReadingFilter

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
_CENT = Decimal("0.01")

VERIFIED_NOTE = "Reading verified by admin"
REJECTED_NOTE = "Reading rejected by admin"

USER_READINGS_LIMIT = 100

# Exclusive upper bound; 10 integer digits fit Numeric(12, 2)
MAX_READING = Decimal("1e10")


def _invalid_reading() -> ValidationError:
    return ValidationError("Reading must be a non-negative number", code="invalid_reading")


def parse_reading_value(raw: int | float | str) -> Decimal:
    """Parse a submitted meter value into a two-decimal Decimal.

    Raises:
        ValidationError: Value is not a finite, non-negative number below
            MAX_READING (the reading columns are Numeric(12, 2))
    """
    if isinstance(raw, bool):
        raise _invalid_reading()
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as e:
        raise _invalid_reading() from e

    if not value.is_finite() or value < 0 or value >= MAX_READING:
        raise _invalid_reading()

    try:
        value = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise _invalid_reading() from e

    # 9999999999.995 rounds up to the bound
    if value >= MAX_READING:
        raise _invalid_reading()
    return value


class MeterReadingService:
    """Service for submitting, listing and verifying meter readings."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _with_details(self):
        return select(MeterReading).options(
            selectinload(MeterReading.connection),
            selectinload(MeterReading.user),
        )

    async def get_reading(self, reading_id: int) -> MeterReading | None:
        """Get reading by ID with connection/user display fields loaded (fresh from the DB)."""
        stmt = (
            self._with_details()
            .where(MeterReading.id == reading_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_verified_reading(self, connection_id: int) -> MeterReading | None:
        """Get the baseline reading: latest VERIFIED reading of a connection.

        Args:
            connection_id: Service connection ID

        Returns:
            Latest verified MeterReading or None if the connection has none
        """
        stmt = (
            select(MeterReading)
            .where(
                MeterReading.connection_id == connection_id,
                MeterReading.status == ReadingStatus.VERIFIED,
            )
            .order_by(desc(MeterReading.reading_date), desc(MeterReading.id))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_owned_connection(self, user_id: int, connection_id: int) -> ServiceConnection:
        connection = await self.session.get(ServiceConnection, connection_id)
        if connection is None:
            raise NotFoundError("Connection not found", code="connection_not_found")
        if connection.user_id != user_id:
            logger.warning(
                "Connection ownership mismatch: connection_id=%s owner=%s caller=%s",
                connection_id,
                connection.user_id,
                user_id,
            )
            raise ForbiddenError()
        return connection

    async def submit_reading(
        self,
        user_id: int,
        connection_id: int | None,
        reading: int | float | str | None,
        photo_url: str | None = None,
    ) -> MeterReading:
        """Create a PENDING reading for a connection owned by the caller.

        Args:
            user_id: Authenticated caller
            connection_id: Connection the reading belongs to
            reading: Raw meter value (number or numeric string)
            photo_url: Optional meter photo reference

        Returns:
            Created MeterReading with connection/user loaded

        Raises:
            ValidationError: Missing fields or non-numeric reading
            NotFoundError: Connection does not exist
            ForbiddenError: Connection belongs to another user
        """
        blank_reading = isinstance(reading, str) and not reading.strip()
        if connection_id is None or reading is None or blank_reading:
            raise ValidationError("Connection ID and reading are required", code="missing_fields")

        value = parse_reading_value(reading)
        connection = await self._get_owned_connection(user_id, connection_id)

        baseline = await self.get_latest_verified_reading(connection_id)
        previous_value = baseline.reading if baseline else ZERO

        meter_reading = MeterReading(
            connection_id=connection.id,
            user_id=user_id,
            service_type=connection.service_type,
            reading=value,
            previous_reading=previous_value,
            consumption=value - previous_value,
            submitted_by=SubmittedBy.CITIZEN,
            photo_url=photo_url or None,
            status=ReadingStatus.PENDING,
            is_verified=False,
            reading_date=utcnow(),
        )
        self.session.add(meter_reading)
        await self.session.flush()  # Ensure ID is assigned

        AuditService.reading_event(
            self.session,
            meter_reading.id,
            "submit",
            actor_id=user_id,
            changes={
                "connection_id": connection.id,
                "reading": str(value),
                "previous_reading": str(previous_value),
            },
        )
        await self.session.commit()

        logger.info(
            "Meter reading submitted: id=%s connection_id=%s reading=%s consumption=%s",
            meter_reading.id,
            connection.id,
            value,
            meter_reading.consumption,
        )
        return await self.get_reading(meter_reading.id)

    async def _transition(
        self,
        reading_id: int,
        actor_id: int,
        new_status: ReadingStatus,
        notes: str,
        now: datetime | None = None,
    ) -> MeterReading:
        """Move a PENDING reading to a terminal status with a single guarded UPDATE.

        Raises:
            NotFoundError: Reading does not exist
            ConflictError: Reading is already VERIFIED or REJECTED
        """
        stamped_at = now or utcnow()
        stmt = (
            update(MeterReading)
            .where(
                MeterReading.id == reading_id,
                MeterReading.status == ReadingStatus.PENDING,
            )
            .values(
                status=new_status,
                is_verified=new_status is ReadingStatus.VERIFIED,
                verified_by=actor_id,
                verified_at=stamped_at,
                notes=notes,
                updated_at=stamped_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            await self.session.rollback()
            existing = await self.get_reading(reading_id)
            if existing is None:
                raise NotFoundError("Meter reading not found", code="reading_not_found")
            logger.warning(
                "Refusing %s on reading %s: already %s",
                new_status.value,
                reading_id,
                existing.status.value,
            )
            raise ConflictError(
                f"Meter reading has already been {existing.status.value}",
                code="reading_already_processed",
                status=existing.status.value,
            )

        AuditService.reading_event(
            self.session,
            reading_id,
            "verify" if new_status is ReadingStatus.VERIFIED else "reject",
            actor_id=actor_id,
            changes={"status": new_status.value, "notes": notes},
        )
        await self.session.commit()

        logger.info("Meter reading %s %s by user %s", reading_id, new_status.value, actor_id)
        return await self.get_reading(reading_id)

    async def verify_reading(
        self, reading_id: int, actor_id: int, now: datetime | None = None
    ) -> MeterReading:
        """Mark a PENDING reading VERIFIED; it becomes the connection's new baseline."""
        return await self._transition(
            reading_id, actor_id, ReadingStatus.VERIFIED, VERIFIED_NOTE, now=now
        )

    async def reject_reading(
        self,
        reading_id: int,
        actor_id: int,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> MeterReading:
        """Mark a PENDING reading REJECTED; the citizen must submit a new one."""
        notes = reason.strip() if reason and reason.strip() else REJECTED_NOTE
        return await self._transition(
            reading_id, actor_id, ReadingStatus.REJECTED, notes, now=now
        )

    async def list_readings(self, filters: ReadingFilter) -> tuple[list[MeterReading], int]:
        """List readings for the admin console, newest reading date first.

        Returns:
            (page of readings, total matching count)
        """
        conditions = []
        if filters.status is not None:
            conditions.append(MeterReading.status == filters.status)
        if filters.service_type is not None:
            conditions.append(MeterReading.service_type == filters.service_type)

        stmt = (
            self._with_details()
            .where(*conditions)
            .order_by(desc(MeterReading.reading_date), desc(MeterReading.id))
            .offset(filters.offset)
            .limit(filters.limit)
        )
        result = await self.session.execute(stmt)
        readings = list(result.scalars().all())

        count_stmt = select(func.count(MeterReading.id)).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        return readings, total

    async def list_user_readings(
        self, user_id: int, connection_id: int | None = None
    ) -> list[MeterReading]:
        """List the caller's own readings, optionally for one connection they own."""
        stmt = self._with_details().where(MeterReading.user_id == user_id)
        if connection_id is not None:
            await self._get_owned_connection(user_id, connection_id)
            stmt = stmt.where(MeterReading.connection_id == connection_id)

        stmt = stmt.order_by(desc(MeterReading.reading_date), desc(MeterReading.id)).limit(
            USER_READINGS_LIMIT
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


__all__ = ["MeterReadingService", "parse_reading_value"]
