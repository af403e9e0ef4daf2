import logging
from typing import Callable
from sqlalchemy import UniqueConstraint
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from loyalty_api.config import settings
from loyalty_api.models.customer_membership import CustomerMembership
from loyalty_api.models.transaction import Transaction
from loyalty_api.core.exceptions import ConflictException, InternalException, LoyaltyException

logger = logging.getLogger(__name__)

# Unique constraints a concurrent writer on the same pair can trip
CONTENDED_CONSTRAINTS = ("uq_transactions_ledger_position", "uq_tenant_customer")


def _contended_constraints() -> dict[str, str]:
    """Map each contended constraint name to SQLite's "table.col, table.col" form"""
    signatures = {}
    for table in (Transaction.__table__, CustomerMembership.__table__):
        for constraint in table.constraints:
            if isinstance(constraint, UniqueConstraint) and constraint.name in CONTENDED_CONSTRAINTS:
                columns = ", ".join(f"{table.name}.{column.name}" for column in constraint.columns)
                signatures[constraint.name] = columns
    return signatures


_SIGNATURES = _contended_constraints()


def is_ledger_contention(error: IntegrityError) -> bool:
    """
    True when the integrity error is another writer taking the same ledger
    position (or enrolling the same membership) first.

    PostgreSQL drivers report the violated constraint name; SQLite only
    names the columns. NOT NULL, CHECK and foreign key violations are never
    contention.
    """
    diag = getattr(error.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name:
        return constraint_name in CONTENDED_CONSTRAINTS

    message = str(error.orig)
    return any(
        name in message or f"UNIQUE constraint failed: {columns}" in message
        for name, columns in _SIGNATURES.items()
    )


class LedgerService:
    """
    Runs ledger writes as compare-and-swap appends.

    Each attempt reads the pair's ledger head, validates, and appends the
    next entry (plus any side effects) inside one database transaction.
    A concurrent append at the same ledger position violates the
    (tenant_id, customer_id, sequence) constraint; the attempt is rolled
    back and repeated from the read. Writers on different pairs never
    touch the same position, so they never contend.
    """

    def __init__(self, db: Session, max_attempts: int | None = None):
        self.db = db
        self.max_attempts = settings.LEDGER_MAX_ATTEMPTS if max_attempts is None else max_attempts
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def write(
        self,
        tenant_id: int,
        customer_id: int,
        attempt: Callable[[], Transaction],
        action: str,
    ) -> Transaction:
        """
        Execute `attempt` and commit, retrying on position conflicts.

        Args:
            tenant_id: Tenant half of the ledger key (for logging)
            customer_id: Customer half of the ledger key (for logging)
            attempt: Reads, validates and appends without committing;
                must be safe to run again from scratch
            action: Short operation name for log records

        Returns:
            The committed Transaction

        Raises:
            LoyaltyException: Validation failures from `attempt`, unchanged
            ConflictException: If every attempt hit a concurrent append
            InternalException: On any other storage failure
        """
        for attempt_number in range(1, self.max_attempts + 1):
            try:
                transaction = attempt()
                self.db.commit()
            except IntegrityError as e:
                if not is_ledger_contention(e):
                    self._fail(e, action, tenant_id, customer_id)
                self.db.rollback()
                logger.warning(
                    "Ledger append conflict",
                    extra={
                        "action": action,
                        "tenant_id": tenant_id,
                        "customer_id": customer_id,
                        "attempt": attempt_number,
                    },
                )
                continue
            except LoyaltyException:
                self.db.rollback()
                raise
            except SQLAlchemyError as e:
                self._fail(e, action, tenant_id, customer_id)

            self.db.refresh(transaction)
            return transaction

        logger.error(
            "Ledger append retries exhausted",
            extra={
                "action": action,
                "tenant_id": tenant_id,
                "customer_id": customer_id,
                "attempts": self.max_attempts,
            },
        )
        raise ConflictException("Balance changed concurrently, please retry")

    def _fail(self, error: SQLAlchemyError, action: str, tenant_id: int, customer_id: int):
        """Roll back a storage fault that retrying cannot fix"""
        self.db.rollback()
        logger.exception(
            "Ledger write failed",
            extra={"action": action, "tenant_id": tenant_id, "customer_id": customer_id},
        )
        raise InternalException("Internal server error") from error
