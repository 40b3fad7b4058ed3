"""Enumerations shared by the ORM models and API schemas."""

from enum import Enum


class UserRole(str, Enum):
    """Role of a user account."""

    CITIZEN = "CITIZEN"
    ADMIN = "ADMIN"
    STAFF = "STAFF"


class ServiceType(str, Enum):
    """Utility domain a connection, reading or grievance belongs to."""

    ELECTRICITY = "ELECTRICITY"
    GAS = "GAS"
    WATER = "WATER"
    MUNICIPAL = "MUNICIPAL"


class ConnectionStatus(str, Enum):
    """Lifecycle status of a service connection."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    DISCONNECTED = "DISCONNECTED"


class ReadingStatus(str, Enum):
    """Verification status of a meter reading.

    PENDING is the only non-terminal state.
    """

    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not ReadingStatus.PENDING


class SubmittedBy(str, Enum):
    """Who keyed in a meter reading."""

    CITIZEN = "CITIZEN"
    STAFF = "STAFF"


class BillStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    PARTIAL = "PARTIAL"


class PaymentMethod(str, Enum):
    UPI = "UPI"
    CARD = "CARD"
    NET_BANKING = "NET_BANKING"
    WALLET = "WALLET"
    CASH = "CASH"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class GrievancePriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class GrievanceStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"
    REJECTED = "REJECTED"


__all__ = [
    "UserRole",
    "ServiceType",
    "ConnectionStatus",
    "ReadingStatus",
    "SubmittedBy",
    "BillStatus",
    "PaymentMethod",
    "PaymentStatus",
    "GrievancePriority",
    "GrievanceStatus",
]
