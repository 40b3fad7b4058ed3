"""Payment ORM model for bill payments made at the kiosk or on the web."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suvidha.models import Base, BaseModel
from suvidha.models.enums import PaymentMethod, PaymentStatus


class Payment(Base, BaseModel):
    """Model representing a payment against a bill.

    The service type of a payment is reached through bill -> connection.
    """

    __tablename__ = "payments"

    bill_id: Mapped[int] = mapped_column(ForeignKey("bills.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, comment="Payment amount in rupees"
    )
    method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, native_enum=False), nullable=False
    )
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, native_enum=False),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    receipt_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    kiosk_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("idx_payment_status_created", "status", "created_at"),)

    bill: Mapped["Bill"] = relationship("Bill")  # noqa: F821
    user: Mapped["User"] = relationship("User")  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, bill_id={self.bill_id}, amount={self.amount}, "
            f"status={self.status})>"
        )


__all__ = ["Payment"]
