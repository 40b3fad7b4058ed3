"""Unit tests for admin list filters."""

import pytest

from suvidha.api.errors import ValidationError
from suvidha.models.enums import PaymentStatus, ReadingStatus, ServiceType
from suvidha.services.filters import (
    ConnectionFilter,
    PaymentFilter,
    ReadingFilter,
    clamp_limit,
    parse_enum_filter,
)


class TestParseEnumFilter:
    @pytest.mark.parametrize("value", [None, "", "  ", "ALL", "all"])
    def test_all_means_no_filter(self, value):
        assert parse_enum_filter(value, ReadingStatus) is None

    def test_case_insensitive(self):
        assert parse_enum_filter("pending", ReadingStatus) is ReadingStatus.PENDING

    def test_unknown_value_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_enum_filter("APPROVED", ReadingStatus)

        assert exc_info.value.code == "invalid_filter"
        assert exc_info.value.params == {"value": "APPROVED"}


class TestClampLimit:
    @pytest.mark.parametrize(
        ("limit", "expected"), [(None, 10), (0, 1), (-5, 1), (50, 50), (1000, 100)]
    )
    def test_clamp(self, limit, expected):
        assert clamp_limit(limit, default=10, maximum=100) == expected


class TestFilterConfigs:
    def test_reading_filter_defaults_to_cap(self):
        filters = ReadingFilter.from_query()

        assert filters.status is None
        assert filters.limit == 100
        assert filters.offset == 0

    def test_reading_filter_paging(self):
        filters = ReadingFilter.from_query(status="VERIFIED", page=3, limit=20)

        assert filters.status is ReadingStatus.VERIFIED
        assert filters.offset == 40

    def test_payment_filter(self):
        filters = PaymentFilter.from_query(status="success", service_type="WATER", limit=500)

        assert filters.status is PaymentStatus.SUCCESS
        assert filters.service_type is ServiceType.WATER
        assert filters.limit == 200

    def test_payment_filter_default_limit(self):
        assert PaymentFilter.from_query().limit == 50

    def test_connection_filter_blank_search_ignored(self):
        filters = ConnectionFilter.from_query(search="   ", page=0)

        assert filters.search is None
        assert filters.page == 1
        assert filters.limit == 10
