"""MeterReading ORM model for citizen-submitted utility meter values."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suvidha.models import Base, BaseModel, utcnow
from suvidha.models.enums import ReadingStatus, ServiceType, SubmittedBy


class MeterReading(Base, BaseModel):
    """
    A usage submission for one service connection.

    previous_reading and consumption are snapshots taken at submission time:
    consumption == reading - previous_reading and is never recomputed.

    Status lifecycle: PENDING -> VERIFIED | REJECTED (both terminal).
    """

    __tablename__ = "meter_readings"

    connection_id: Mapped[int] = mapped_column(
        ForeignKey("service_connections.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True, comment="Submitter"
    )
    service_type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType, native_enum=False),
        nullable=False,
        index=True,
        comment="Copied from the connection at submission",
    )

    reading: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    previous_reading: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, comment="Baseline captured at submission"
    )
    consumption: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, comment="reading - previous_reading"
    )

    submitted_by: Mapped[SubmittedBy] = mapped_column(
        Enum(SubmittedBy, native_enum=False), default=SubmittedBy.CITIZEN, nullable=False
    )
    photo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status: Mapped[ReadingStatus] = mapped_column(
        Enum(ReadingStatus, native_enum=False),
        default=ReadingStatus.PENDING,
        nullable=False,
        index=True,
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    reading_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    __table_args__ = (
        Index("idx_reading_connection_status_date", "connection_id", "status", "reading_date"),
        Index("idx_reading_service_created", "service_type", "created_at"),
    )

    connection: Mapped["ServiceConnection"] = relationship(  # noqa: F821
        "ServiceConnection", back_populates="readings"
    )
    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<MeterReading(id={self.id}, connection_id={self.connection_id}, "
            f"reading={self.reading}, consumption={self.consumption}, status={self.status})>"
        )


__all__ = ["MeterReading"]
