from typing import Optional
from sqlalchemy.orm import Session

from loyalty_api.config import settings
from loyalty_api.models.customer import Customer
from loyalty_api.models.transaction import Transaction
from loyalty_api.repositories.transaction_repository import TransactionRepository


class TransactionService:
    """Service layer for reading a customer's transaction history"""

    def __init__(self, db: Session):
        self.db = db
        self.transaction_repo = TransactionRepository(db)

    def get_history(
        self, customer: Customer, tenant_id: Optional[int] = None
    ) -> list[Transaction]:
        """
        All of the customer's entries, newest first.

        Args:
            customer: Authenticated customer
            tenant_id: Optional tenant filter; entries across all tenants
                when omitted
        """
        return self.transaction_repo.get_by_customer(customer.id, tenant_id=tenant_id)

    def get_recent(self, customer: Customer) -> list[Transaction]:
        """The customer's most recent entries across tenants"""
        return self.transaction_repo.get_by_customer(
            customer.id, limit=settings.RECENT_TRANSACTIONS_LIMIT
        )
