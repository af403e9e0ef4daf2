from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from loyalty_api.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from loyalty_api.models.customer_membership import CustomerMembership


class CustomerStatus(str, PyEnum):
    """Customer account status"""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class Customer(Base, TimestampMixin):
    """
    Customer identity record.

    Created at signup and never deleted, only suspended. Holds no
    balance: points are tenant-scoped and always read from the ledger.
    """

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    phone: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[CustomerStatus] = mapped_column(
        Enum(CustomerStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=CustomerStatus.ACTIVE,
    )
    # False until the customer replaces the password issued at signup
    password_changed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    memberships: Mapped[list["CustomerMembership"]] = relationship(
        "CustomerMembership",
        back_populates="customer",
        cascade="all, delete-orphan",
    )

    @property
    def name(self) -> str:
        """Display name built from first and last name"""
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def is_active(self) -> bool:
        return self.status == CustomerStatus.ACTIVE

    @property
    def tenant_ids(self) -> list[int]:
        return sorted(m.tenant_id for m in self.memberships)

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, phone='{self.phone}', status={self.status.value})>"
