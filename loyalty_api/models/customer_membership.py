"""Customer membership model linking customers to tenants."""

from sqlalchemy import Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from loyalty_api.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from loyalty_api.models.customer import Customer
    from loyalty_api.models.tenant import Tenant


class CustomerMembership(Base, TimestampMixin):
    """
    Join table recording which tenants a customer is enrolled with.

    A customer can belong to many tenants; each enrollment is unique
    per (tenant, customer). Enrollment happens implicitly the first
    time a tenant grants the customer points.
    """

    __tablename__ = "customer_memberships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="memberships")
    customer: Mapped["Customer"] = relationship("Customer", back_populates="memberships")

    # Constraints
    __table_args__ = (
        UniqueConstraint("tenant_id", "customer_id", name="uq_tenant_customer"),
    )

    def __repr__(self) -> str:
        return f"<CustomerMembership(tenant_id={self.tenant_id}, customer_id={self.customer_id})>"
