"""Tenant model for multi-tenant isolation."""

from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from loyalty_api.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from loyalty_api.models.customer_membership import CustomerMembership


class Tenant(Base, TimestampMixin):
    """
    A participating business.

    Each tenant runs its own reward catalog, and every customer's point
    balance is scoped to a tenant: a customer holding 200 points at
    "Corner Cafe" holds nothing at "Book Nook" until they earn there.

    Tenants are read-mostly; rewards and ledger entries reference them
    by id.
    """

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    memberships: Mapped[list["CustomerMembership"]] = relationship(
        "CustomerMembership",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name='{self.name}')>"
