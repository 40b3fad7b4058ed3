"""User ORM model with role-based access control."""

from sqlalchemy import Boolean, Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suvidha.models import Base, BaseModel
from suvidha.models.enums import UserRole


class User(Base, BaseModel):
    """
    A person using the kiosk or the admin console.

    Roles:
    - CITIZEN: owns service connections, submits readings, pays bills, files grievances
    - STAFF: verifies readings and views admin reports
    - ADMIN: everything staff can do
    """

    __tablename__ = "users"

    phone: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True, comment="Login phone number"
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, comment="Full name")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False),
        default=UserRole.CITIZEN,
        nullable=False,
        index=True,
        comment="CITIZEN / ADMIN / STAFF",
    )
    language: Mapped[str] = mapped_column(
        String(5), default="en", nullable=False, comment="Preferred UI language (en, hi)"
    )
    is_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, comment="Phone number confirmed via OTP"
    )

    __table_args__ = (Index("idx_user_role_created", "role", "created_at"),)

    connections: Mapped[list["ServiceConnection"]] = relationship(  # noqa: F821
        "ServiceConnection",
        back_populates="user",
    )

    @property
    def is_staff_or_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.STAFF)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name}, phone={self.phone}, role={self.role})>"


__all__ = ["User"]
