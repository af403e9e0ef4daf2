from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Text, Enum, Index, UniqueConstraint, event
from sqlalchemy.orm import Mapped, mapped_column
from loyalty_api.core.exceptions import LedgerImmutableException
from loyalty_api.models.base import Base, TimestampMixin


class TransactionType(str, PyEnum):
    """Ledger entry kind"""

    POINTS_EARNED = "POINTS_EARNED"
    REWARD_REDEEMED = "REWARD_REDEEMED"


class Transaction(Base, TimestampMixin):
    """
    Ledger entry for one (tenant, customer) pair.

    points: signed delta. Positive = earned, negative = redeemed.
    balance: the pair's balance immediately after this entry.
    sequence: 1-based position in the pair's ledger. The unique
    constraint on (tenant_id, customer_id, sequence) turns two writers
    appending at the same position into an integrity error, which the
    ledger services treat as a retryable conflict.

    Entries are append-only: updates and deletes are rejected at flush.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenants.id"), nullable=False, index=True
    )
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.id"), nullable=False, index=True
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, native_enum=False, length=32), nullable=False
    )
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    reward_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    balance: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "customer_id", "sequence", name="uq_transactions_ledger_position"),
        Index("ix_transactions_customer_created", "customer_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, tenant_id={self.tenant_id}, customer_id={self.customer_id}, "
            f"sequence={self.sequence}, points={self.points}, balance={self.balance})>"
        )


@event.listens_for(Transaction, "before_update")
def _reject_update(mapper, connection, target: Transaction) -> None:
    raise LedgerImmutableException(f"Transaction {target.id} is immutable")


@event.listens_for(Transaction, "before_delete")
def _reject_delete(mapper, connection, target: Transaction) -> None:
    raise LedgerImmutableException(f"Transaction {target.id} cannot be deleted")
