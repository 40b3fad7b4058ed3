"""Explicit filter configurations for admin list endpoints.

Each filter field is either a concrete enum member or None, where None means
"ALL". Query-string values are parsed here once; services never see raw strings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from suvidha.api.errors import ValidationError
from suvidha.models.enums import (
    ConnectionStatus,
    GrievanceStatus,
    PaymentStatus,
    ReadingStatus,
    ServiceType,
)

E = TypeVar("E", bound=Enum)

ALL = "ALL"


def parse_enum_filter(value: str | None, enum_cls: type[E]) -> E | None:
    """Parse an optional query value into an enum member; '', 'ALL'/'all' mean no filter.

    Raises:
        ValidationError: Unknown value
    """
    if value is None or not value.strip() or value.strip().upper() == ALL:
        return None
    try:
        return enum_cls(value.strip().upper())
    except ValueError as e:
        raise ValidationError(
            f"Invalid filter value: {value}", code="invalid_filter", value=value
        ) from e


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    """Clamp a caller-supplied limit to 1..maximum."""
    if limit is None:
        return default
    return max(1, min(limit, maximum))


def clamp_page(page: int | None) -> int:
    return max(1, page or 1)


@dataclass(frozen=True)
class ReadingFilter:
    """Filter for the admin meter-reading list."""

    status: ReadingStatus | None = None
    service_type: ServiceType | None = None
    page: int = 1
    limit: int = 100

    MAX_LIMIT = 100

    @classmethod
    def from_query(
        cls,
        status: str | None = None,
        service_type: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> "ReadingFilter":
        return cls(
            status=parse_enum_filter(status, ReadingStatus),
            service_type=parse_enum_filter(service_type, ServiceType),
            page=clamp_page(page),
            limit=clamp_limit(limit, cls.MAX_LIMIT, cls.MAX_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PaymentFilter:
    """Filter for the admin payment list."""

    status: PaymentStatus | None = None
    service_type: ServiceType | None = None
    limit: int = 50

    DEFAULT_LIMIT = 50
    MAX_LIMIT = 200

    @classmethod
    def from_query(
        cls,
        status: str | None = None,
        service_type: str | None = None,
        limit: int | None = None,
    ) -> "PaymentFilter":
        return cls(
            status=parse_enum_filter(status, PaymentStatus),
            service_type=parse_enum_filter(service_type, ServiceType),
            limit=clamp_limit(limit, cls.DEFAULT_LIMIT, cls.MAX_LIMIT),
        )


@dataclass(frozen=True)
class GrievanceFilter:
    """Filter for the admin grievance list."""

    status: GrievanceStatus | None = None
    service_type: ServiceType | None = None
    page: int = 1
    limit: int = 50

    DEFAULT_LIMIT = 50
    MAX_LIMIT = 100

    @classmethod
    def from_query(
        cls,
        status: str | None = None,
        service_type: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> "GrievanceFilter":
        return cls(
            status=parse_enum_filter(status, GrievanceStatus),
            service_type=parse_enum_filter(service_type, ServiceType),
            page=clamp_page(page),
            limit=clamp_limit(limit, cls.DEFAULT_LIMIT, cls.MAX_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ConnectionFilter:
    """Filter for the admin connection list."""

    search: str | None = None
    status: ConnectionStatus | None = None
    service_type: ServiceType | None = None
    page: int = 1
    limit: int = 10

    DEFAULT_LIMIT = 10
    MAX_LIMIT = 100

    @classmethod
    def from_query(
        cls,
        search: str | None = None,
        status: str | None = None,
        service_type: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> "ConnectionFilter":
        return cls(
            search=search.strip() if search and search.strip() else None,
            status=parse_enum_filter(status, ConnectionStatus),
            service_type=parse_enum_filter(service_type, ServiceType),
            page=clamp_page(page),
            limit=clamp_limit(limit, cls.DEFAULT_LIMIT, cls.MAX_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


__all__ = [
    "ConnectionFilter",
    "GrievanceFilter",
    "PaymentFilter",
    "ReadingFilter",
    "clamp_limit",
    "parse_enum_filter",
]
