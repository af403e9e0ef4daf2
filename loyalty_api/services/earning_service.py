import logging
from sqlalchemy.orm import Session

from loyalty_api.models.transaction import Transaction, TransactionType
from loyalty_api.repositories.customer_repository import CustomerRepository
from loyalty_api.repositories.transaction_repository import TransactionRepository
from loyalty_api.services.balance_service import BalanceService
from loyalty_api.services.ledger_service import LedgerService
from loyalty_api.core.exceptions import ValidationException

logger = logging.getLogger(__name__)


class EarningService:
    """Service layer for crediting points granted at a tenant's point of sale"""

    def __init__(self, db: Session):
        self.db = db
        self.customer_repo = CustomerRepository(db)
        self.transaction_repo = TransactionRepository(db)
        self.balance_service = BalanceService(db)
        self.ledger = LedgerService(db)

    def record_earning(
        self, tenant_id: int, customer_id: int, points: int, description: str
    ) -> Transaction:
        """
        Append a POINTS_EARNED entry.

        The grant is accepted as a fact; why the merchant granted it is not
        checked here. The customer is enrolled with the tenant on first
        earning.

        Raises:
            ValidationException: If points is not positive
            NotFoundException: If the tenant or customer is missing
            ConflictException: Concurrent writes kept winning the race
        """
        if points <= 0:
            raise ValidationException("Earned points must be positive")

        self.balance_service.require_pair(tenant_id, customer_id)

        def attempt() -> Transaction:
            head = self.balance_service.current_head(tenant_id, customer_id)
            transaction = self.transaction_repo.append(
                head,
                tenant_id=tenant_id,
                customer_id=customer_id,
                transaction_type=TransactionType.POINTS_EARNED,
                points=points,
                description=description,
            )
            self.customer_repo.ensure_membership(customer_id, tenant_id)
            return transaction

        transaction = self.ledger.write(tenant_id, customer_id, attempt, action="earn")
        logger.info(
            "Points earned",
            extra={
                "tenant_id": tenant_id,
                "customer_id": customer_id,
                "points": points,
                "balance": transaction.balance,
            },
        )
        return transaction
