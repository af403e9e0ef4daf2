from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from loyalty_api.models.transaction import Transaction, TransactionType


class TransactionRepository:
    """
    Ledger store: the only component that writes Transaction rows.

    Writes never commit; the calling service owns the unit of work so the
    entry and its side effects land in one database transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_head(self, tenant_id: int, customer_id: int) -> Optional[Transaction]:
        """
        Get the most recent entry for a (tenant, customer) pair.

        Returns None when the pair has no history.
        """
        return (
            self.db.query(Transaction)
            .filter(Transaction.tenant_id == tenant_id, Transaction.customer_id == customer_id)
            .order_by(Transaction.sequence.desc())
            .first()
        )

    def count_for_pair(self, tenant_id: int, customer_id: int) -> int:
        """Number of ledger entries for a (tenant, customer) pair"""
        return (
            self.db.query(func.count(Transaction.id))
            .filter(Transaction.tenant_id == tenant_id, Transaction.customer_id == customer_id)
            .scalar()
        )

    def append(
        self,
        head: Optional[Transaction],
        tenant_id: int,
        customer_id: int,
        transaction_type: TransactionType,
        points: int,
        description: str,
        reward_id: Optional[int] = None,
    ) -> Transaction:
        """
        Append the entry that follows `head` without committing.

        The new entry takes sequence head.sequence + 1 and balance
        head.balance + points (1 and `points` for an empty ledger). If
        another writer already appended after `head`, the flush raises
        IntegrityError on the ledger position constraint.
        """
        previous_sequence = head.sequence if head is not None else 0
        previous_balance = head.balance if head is not None else 0

        transaction = Transaction(
            tenant_id=tenant_id,
            customer_id=customer_id,
            sequence=previous_sequence + 1,
            type=transaction_type,
            points=points,
            reward_id=reward_id,
            description=description,
            balance=previous_balance + points,
        )
        self.db.add(transaction)
        self.db.flush()  # Assign ID and surface position conflicts now
        return transaction

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID"""
        return self.db.query(Transaction).filter(Transaction.id == transaction_id).first()

    def get_for_pair(self, tenant_id: int, customer_id: int) -> list[Transaction]:
        """Get a pair's full ledger in append order"""
        return (
            self.db.query(Transaction)
            .filter(Transaction.tenant_id == tenant_id, Transaction.customer_id == customer_id)
            .order_by(Transaction.sequence.asc())
            .all()
        )

    def get_by_customer(
        self,
        customer_id: int,
        tenant_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """
        Get a customer's entries, newest first.

        Args:
            customer_id: Customer whose ledger entries to read
            tenant_id: Optional tenant filter (all tenants when omitted)
            limit: Optional cap on the number of entries

        Returns:
            Transactions ordered by creation time, newest first
        """
        query = self.db.query(Transaction).filter(Transaction.customer_id == customer_id)

        if tenant_id is not None:
            query = query.filter(Transaction.tenant_id == tenant_id)

        query = query.order_by(Transaction.created_at.desc(), Transaction.id.desc())

        if limit is not None:
            query = query.limit(limit)

        return query.all()

    def sum_points_since(
        self,
        tenant_id: int,
        customer_id: int,
        transaction_type: TransactionType,
        since,
    ) -> int:
        """Total absolute points of one entry type created at or after `since`"""
        result = (
            self.db.query(func.sum(func.abs(Transaction.points)))
            .filter(
                Transaction.tenant_id == tenant_id,
                Transaction.customer_id == customer_id,
                Transaction.type == transaction_type,
                Transaction.created_at >= since,
            )
            .scalar()
        )
        return int(result) if result is not None else 0
