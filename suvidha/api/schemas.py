"""Pydantic request and response schemas.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from suvidha.models.enums import (
    ConnectionStatus,
    GrievancePriority,
    GrievanceStatus,
    ReadingStatus,
    ServiceType,
    SubmittedBy,
)
from suvidha.services.locale_service import ensure_aware

# Largest value a SQLite or BIGINT primary key can hold
MAX_ID = 2**63 - 1

EntityId = Annotated[int, Field(ge=1, le=MAX_ID)]

# SQLite returns naive datetimes; everything leaves the API as aware UTC
UtcDatetime = Annotated[datetime, AfterValidator(ensure_aware)]


class ApiModel(BaseModel):
    """Base schema: camelCase aliases, built from ORM attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit))


# Requests


class MeterReadingCreate(ApiModel):
    """Body of POST /meter-readings. Presence is checked by the service for a precise 400."""

    connection_id: EntityId | None = None
    reading: int | float | str | None = None
    photo_url: str | None = None


class RejectReadingRequest(ApiModel):
    reason: str | None = Field(None, max_length=1000)


# Meter readings


class ConnectionSummary(ApiModel):
    connection_no: str
    address: str


class UserSummary(ApiModel):
    name: str
    phone: str


class MeterReadingResponse(ApiModel):
    """Meter reading with denormalized display fields."""

    id: int
    connection_id: int
    user_id: int
    service_type: ServiceType
    reading: float
    previous_reading: float
    consumption: float
    submitted_by: SubmittedBy
    photo_url: str | None = None
    status: ReadingStatus
    is_verified: bool
    verified_by: int | None = None
    verified_at: UtcDatetime | None = None
    notes: str | None = None
    reading_date: UtcDatetime
    created_at: UtcDatetime
    connection: ConnectionSummary
    user: UserSummary


# Activity feed


class ActivityItem(ApiModel):
    id: int
    type: str
    description: str
    user: str
    kiosk_id: str
    timestamp: UtcDatetime
    service_type: ServiceType | None = None


# Payments


class PaymentUser(ApiModel):
    name: str
    phone: str


class PaymentBillConnection(ApiModel):
    connection_no: str


class PaymentBill(ApiModel):
    bill_no: str
    service_type: str
    connection: PaymentBillConnection


class PaymentItem(ApiModel):
    id: int
    amount: float
    method: str
    status: str
    transaction_id: str
    receipt_no: str
    paid_at: str
    created_at: UtcDatetime
    user: PaymentUser
    bill: PaymentBill


class PaymentStats(ApiModel):
    today_total: float
    today_count: int
    week_total: float
    week_count: int
    month_total: float
    month_count: int


class PaymentsPage(ApiModel):
    payments: list[PaymentItem]
    stats: PaymentStats


# Service usage


class ServiceUsageEntry(ApiModel):
    count: int
    revenue: int


class ServiceUsage(BaseModel):
    """Fixed five-category summary; keys are service names, not camelCased."""

    ELECTRICITY: ServiceUsageEntry
    GAS: ServiceUsageEntry
    WATER: ServiceUsageEntry
    MUNICIPAL: ServiceUsageEntry
    WASTE: ServiceUsageEntry


# Grievances, connections and dashboard


class GrievanceItem(ApiModel):
    id: int
    ticket_no: str
    service_type: ServiceType
    category: str
    subject: str
    priority: GrievancePriority
    status: GrievanceStatus
    created_at: UtcDatetime
    user: UserSummary


class ConnectionOwner(ApiModel):
    id: int
    name: str
    phone: str


class ConnectionItem(ApiModel):
    id: int
    service_type: ServiceType
    connection_no: str
    meter_no: str | None = None
    address: str
    status: ConnectionStatus
    created_at: UtcDatetime
    user: ConnectionOwner
    bill_count: int = 0
    reading_count: int = 0


class DashboardStats(ApiModel):
    total_users: int
    total_connections: int
    pending_grievances: int
    pending_readings: int
    today_payments: int
    today_payments_amount: float
    active_services: dict[str, int]


class Dashboard(ApiModel):
    stats: DashboardStats
    recent_grievances: list[GrievanceItem]


class ReportPeriod(ApiModel):
    start: UtcDatetime
    end: UtcDatetime


class Report(ApiModel):
    type: str
    period: ReportPeriod
    report: list[dict[str, Any]]


__all__ = [
    "ActivityItem",
    "ApiModel",
    "ConnectionItem",
    "EntityId",
    "Dashboard",
    "DashboardStats",
    "GrievanceItem",
    "MAX_ID",
    "MeterReadingCreate",
    "MeterReadingResponse",
    "Pagination",
    "PaymentItem",
    "PaymentStats",
    "PaymentsPage",
    "RejectReadingRequest",
    "Report",
    "ServiceUsage",
    "ServiceUsageEntry",
]
