from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional
from sqlalchemy.orm import Session

from loyalty_api.models.transaction import Transaction, TransactionType
from loyalty_api.repositories.customer_repository import CustomerRepository
from loyalty_api.repositories.tenant_repository import TenantRepository
from loyalty_api.repositories.transaction_repository import TransactionRepository
from loyalty_api.core.exceptions import NotFoundException


@dataclass(frozen=True)
class BalanceSnapshot:
    """A pair's balance and how many entries produced it"""

    tenant_id: int
    customer_id: int
    balance: int
    transaction_count: int

    @property
    def has_history(self) -> bool:
        return self.transaction_count > 0


@dataclass(frozen=True)
class PointsSummary:
    """Balance snapshot plus the current calendar month's activity"""

    snapshot: BalanceSnapshot
    earned_this_month: int
    redeemed_this_month: int


def balance_after(head: Optional[Transaction]) -> int:
    """Balance stamped on the ledger head, 0 for an empty ledger"""
    return head.balance if head is not None else 0


class BalanceService:
    """
    Resolves tenant-scoped balances from the ledger.

    The balance of a (tenant, customer) pair is the resulting balance of
    its most recent entry. It is never recomputed by summing deltas.
    """

    def __init__(self, db: Session):
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.customer_repo = CustomerRepository(db)

    def require_pair(self, tenant_id: int, customer_id: int) -> None:
        """
        Ensure both sides of a ledger key exist.

        The tenant does not have to be active.

        Raises:
            NotFoundException: If the tenant or the customer is missing
        """
        if self.tenant_repo.get_by_id(tenant_id) is None:
            raise NotFoundException(f"Tenant {tenant_id} not found")
        if self.customer_repo.get_by_id(customer_id) is None:
            raise NotFoundException(f"Customer {customer_id} not found")

    def current_head(self, tenant_id: int, customer_id: int) -> Optional[Transaction]:
        """Latest ledger entry for the pair, or None without history"""
        return self.transaction_repo.get_head(tenant_id, customer_id)

    def resolve_balance(self, tenant_id: int, customer_id: int) -> int:
        """
        Current balance for a (tenant, customer) pair.

        Returns 0 when the pair has no transactions.

        Raises:
            NotFoundException: If the tenant or the customer is missing
        """
        self.require_pair(tenant_id, customer_id)
        return balance_after(self.current_head(tenant_id, customer_id))

    def get_balance(self, tenant_id: int, customer_id: int) -> BalanceSnapshot:
        """Balance together with the entry count, so callers can tell "no history" from 0"""
        self.require_pair(tenant_id, customer_id)
        return BalanceSnapshot(
            tenant_id=tenant_id,
            customer_id=customer_id,
            balance=balance_after(self.current_head(tenant_id, customer_id)),
            transaction_count=self.transaction_repo.count_for_pair(tenant_id, customer_id),
        )

    def get_points_summary(
        self, tenant_id: int, customer_id: int, now: Optional[datetime] = None
    ) -> PointsSummary:
        """
        Balance plus points earned and redeemed since the start of the month.

        The monthly totals are activity statistics only.
        """
        snapshot = self.get_balance(tenant_id, customer_id)
        now = now or datetime.now(UTC)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        return PointsSummary(
            snapshot=snapshot,
            earned_this_month=self.transaction_repo.sum_points_since(
                tenant_id, customer_id, TransactionType.POINTS_EARNED, month_start
            ),
            redeemed_this_month=self.transaction_repo.sum_points_since(
                tenant_id, customer_id, TransactionType.REWARD_REDEEMED, month_start
            ),
        )
