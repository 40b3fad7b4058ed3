"""Grievance ORM model for citizen complaints."""

from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suvidha.models import Base, BaseModel
from suvidha.models.enums import GrievancePriority, GrievanceStatus, ServiceType


class Grievance(Base, BaseModel):
    """Complaint filed by a citizen, optionally about one connection."""

    __tablename__ = "grievances"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    connection_id: Mapped[int | None] = mapped_column(
        ForeignKey("service_connections.id"), nullable=True
    )
    ticket_no: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    service_type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType, native_enum=False), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    priority: Mapped[GrievancePriority] = mapped_column(
        Enum(GrievancePriority, native_enum=False),
        default=GrievancePriority.MEDIUM,
        nullable=False,
    )
    status: Mapped[GrievanceStatus] = mapped_column(
        Enum(GrievanceStatus, native_enum=False),
        default=GrievanceStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    kiosk_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    __table_args__ = (Index("idx_grievance_service_created", "service_type", "created_at"),)

    user: Mapped["User"] = relationship("User")  # noqa: F821
    connection: Mapped["ServiceConnection | None"] = relationship("ServiceConnection")  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<Grievance(id={self.id}, ticket_no={self.ticket_no}, "
            f"service_type={self.service_type}, status={self.status})>"
        )


__all__ = ["Grievance"]
