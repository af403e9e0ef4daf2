import logging
from typing import Optional
from sqlalchemy.orm import Session

from loyalty_api.models.transaction import Transaction, TransactionType
from loyalty_api.repositories.reward_repository import RewardRepository
from loyalty_api.repositories.transaction_repository import TransactionRepository
from loyalty_api.services.balance_service import BalanceService, balance_after
from loyalty_api.services.ledger_service import LedgerService
from loyalty_api.core.exceptions import NotFoundException, InsufficientPointsException

logger = logging.getLogger(__name__)


class RedemptionService:
    """Service layer for spending points on rewards"""

    def __init__(self, db: Session):
        self.db = db
        self.reward_repo = RewardRepository(db)
        self.transaction_repo = TransactionRepository(db)
        self.balance_service = BalanceService(db)
        self.ledger = LedgerService(db)

    def redeem(self, tenant_id: int, customer_id: int, reward_id: int) -> Transaction:
        """
        Redeem a reward against the customer's balance at a tenant.

        Checks, in order: the reward exists and belongs to the tenant, the
        reward is active, the balance covers its cost. On success the debit
        entry and the reward's redemption counter commit together.

        Args:
            tenant_id: Tenant whose ledger is debited
            customer_id: Customer spending the points
            reward_id: Reward being redeemed

        Returns:
            The REWARD_REDEEMED ledger entry

        Raises:
            NotFoundException: Tenant, customer or reward missing, reward
                owned by another tenant, or reward inactive
            InsufficientPointsException: Balance below the reward's cost
            ConflictException: Concurrent writes kept winning the race
        """
        self.balance_service.require_pair(tenant_id, customer_id)

        def attempt() -> Transaction:
            reward = self.reward_repo.get_by_id(reward_id)
            # Inactive rewards are reported exactly like missing ones
            if reward is None or reward.tenant_id != tenant_id or not reward.is_active:
                raise NotFoundException(f"Reward {reward_id} not found")

            head = self.balance_service.current_head(tenant_id, customer_id)
            current_balance = balance_after(head)
            if current_balance < reward.points_required:
                raise InsufficientPointsException(reward.points_required - current_balance)

            transaction = self.transaction_repo.append(
                head,
                tenant_id=tenant_id,
                customer_id=customer_id,
                transaction_type=TransactionType.REWARD_REDEEMED,
                points=-reward.points_required,
                description=f"Redeemed reward: {reward.name}",
                reward_id=reward.id,
            )
            self.reward_repo.increment_redemption_count(reward.id)
            return transaction

        transaction = self.ledger.write(tenant_id, customer_id, attempt, action="redeem")
        logger.info(
            "Reward redeemed",
            extra={
                "tenant_id": tenant_id,
                "customer_id": customer_id,
                "reward_id": reward_id,
                "points": transaction.points,
                "balance": transaction.balance,
            },
        )
        return transaction

    def redeem_reward(
        self, customer_id: int, reward_id: int, tenant_id: Optional[int] = None
    ) -> Transaction:
        """
        Redeem a reward when the client may not name the tenant.

        Without tenant_id the reward's own tenant is used. A tenant_id that
        does not own the reward fails the ownership check in redeem().
        """
        if tenant_id is None:
            reward = self.reward_repo.get_by_id(reward_id)
            if reward is None:
                raise NotFoundException(f"Reward {reward_id} not found")
            tenant_id = reward.tenant_id

        return self.redeem(tenant_id, customer_id, reward_id)
