"""ServiceConnection ORM model: a citizen's subscription to one utility."""

from sqlalchemy import Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suvidha.models import Base, BaseModel
from suvidha.models.enums import ConnectionStatus, ServiceType


class ServiceConnection(Base, BaseModel):
    """Utility connection owned by exactly one user."""

    __tablename__ = "service_connections"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True, comment="Owning citizen"
    )
    service_type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType, native_enum=False), nullable=False, index=True
    )
    connection_no: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, comment="Consumer number printed on bills"
    )
    meter_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[ConnectionStatus] = mapped_column(
        Enum(ConnectionStatus, native_enum=False),
        default=ConnectionStatus.PENDING,
        nullable=False,
        index=True,
    )

    __table_args__ = (Index("idx_connection_user_service", "user_id", "service_type"),)

    user: Mapped["User"] = relationship("User", back_populates="connections")  # noqa: F821
    readings: Mapped[list["MeterReading"]] = relationship(  # noqa: F821
        "MeterReading", back_populates="connection"
    )
    bills: Mapped[list["Bill"]] = relationship("Bill", back_populates="connection")  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<ServiceConnection(id={self.id}, connection_no={self.connection_no}, "
            f"service_type={self.service_type}, user_id={self.user_id})>"
        )


__all__ = ["ServiceConnection"]
