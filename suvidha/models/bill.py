"""Bill ORM model for utility bills issued against a service connection."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suvidha.models import Base, BaseModel
from suvidha.models.enums import BillStatus


class Bill(Base, BaseModel):
    """Bill for one billing period of a connection."""

    __tablename__ = "bills"

    connection_id: Mapped[int] = mapped_column(
        ForeignKey("service_connections.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    bill_no: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    bill_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    period_from: Mapped[date] = mapped_column(Date, nullable=False)
    period_to: Mapped[date] = mapped_column(Date, nullable=False)

    units_consumed: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0"), nullable=False
    )
    status: Mapped[BillStatus] = mapped_column(
        Enum(BillStatus, native_enum=False), default=BillStatus.UNPAID, nullable=False, index=True
    )

    __table_args__ = (Index("idx_bill_connection_date", "connection_id", "bill_date"),)

    connection: Mapped["ServiceConnection"] = relationship(  # noqa: F821
        "ServiceConnection", back_populates="bills"
    )
    user: Mapped["User"] = relationship("User")  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<Bill(id={self.id}, bill_no={self.bill_no}, connection_id={self.connection_id}, "
            f"total_amount={self.total_amount}, status={self.status})>"
        )


__all__ = ["Bill"]
