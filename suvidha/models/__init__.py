"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class BaseModel:
    """Base model with common timestamp fields."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


# Import models to register them with Base (after Base is defined)
# This must be after Base declaration to avoid circular imports
from suvidha.models.enums import (  # noqa: E402
    BillStatus,
    ConnectionStatus,
    GrievancePriority,
    GrievanceStatus,
    PaymentMethod,
    PaymentStatus,
    ReadingStatus,
    ServiceType,
    SubmittedBy,
    UserRole,
)
from suvidha.models.user import User  # noqa: E402
from suvidha.models.service_connection import ServiceConnection  # noqa: E402
from suvidha.models.meter_reading import MeterReading  # noqa: E402
from suvidha.models.bill import Bill  # noqa: E402
from suvidha.models.payment import Payment  # noqa: E402
from suvidha.models.grievance import Grievance  # noqa: E402
from suvidha.models.audit_log import AuditLog  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "utcnow",
    "User",
    "UserRole",
    "ServiceConnection",
    "ServiceType",
    "ConnectionStatus",
    "MeterReading",
    "ReadingStatus",
    "SubmittedBy",
    "Bill",
    "BillStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Grievance",
    "GrievancePriority",
    "GrievanceStatus",
    "AuditLog",
]
