"""
Ledger invariants and the balance resolver.

Exercises the services directly against the test database.
"""

import pytest
from datetime import datetime, timedelta, UTC

from loyalty_api.core.exceptions import (
    LedgerImmutableException,
    NotFoundException,
    ValidationException,
)
from loyalty_api.models import Transaction, TransactionType
from loyalty_api.repositories.customer_repository import CustomerRepository
from loyalty_api.repositories.transaction_repository import TransactionRepository
from loyalty_api.services.balance_service import BalanceService
from loyalty_api.services.earning_service import EarningService
from loyalty_api.services.redemption_service import RedemptionService


class TestBalanceResolver:
    def test_no_history_is_zero(self, db_session, tenant, customer):
        service = BalanceService(db_session)

        assert service.resolve_balance(tenant.id, customer.id) == 0
        snapshot = service.get_balance(tenant.id, customer.id)
        assert snapshot.balance == 0
        assert snapshot.transaction_count == 0
        assert snapshot.has_history is False

    def test_balance_is_last_resulting_balance(self, db_session, tenant, customer, earn):
        earn(tenant, customer, 40)
        earn(tenant, customer, 25)

        service = BalanceService(db_session)
        snapshot = service.get_balance(tenant.id, customer.id)
        assert snapshot.balance == 65
        assert snapshot.transaction_count == 2
        assert snapshot.has_history is True

    def test_idempotent_read(self, db_session, tenant, customer, earn):
        earn(tenant, customer, 70)
        service = BalanceService(db_session)

        first = service.resolve_balance(tenant.id, customer.id)
        second = service.resolve_balance(tenant.id, customer.id)
        assert first == second == 70

    def test_inactive_tenant_still_resolves(self, db_session, tenant_factory, customer, earn):
        closed = tenant_factory("Closed Shop", is_active=False)
        earn(closed, customer, 15)

        assert BalanceService(db_session).resolve_balance(closed.id, customer.id) == 15

    def test_missing_tenant(self, db_session, customer):
        with pytest.raises(NotFoundException):
            BalanceService(db_session).resolve_balance(99999, customer.id)

    def test_missing_customer(self, db_session, tenant):
        with pytest.raises(NotFoundException):
            BalanceService(db_session).resolve_balance(tenant.id, 99999)

    def test_balances_are_tenant_scoped(self, db_session, tenant_factory, customer, earn):
        cafe = tenant_factory("Corner Cafe")
        books = tenant_factory("Book Nook")
        earn(cafe, customer, 50)
        earn(books, customer, 200)

        service = BalanceService(db_session)
        assert service.resolve_balance(cafe.id, customer.id) == 50
        assert service.resolve_balance(books.id, customer.id) == 200

    def test_balances_are_customer_scoped(self, db_session, tenant, customer_factory, earn):
        alice = customer_factory(first_name="Alice")
        bob = customer_factory(first_name="Bob")
        earn(tenant, alice, 80)

        service = BalanceService(db_session)
        assert service.resolve_balance(tenant.id, alice.id) == 80
        assert service.resolve_balance(tenant.id, bob.id) == 0


class TestLedgerSumInvariant:
    def test_running_sum_after_mixed_operations(
        self, db_session, tenant, customer, reward_factory, earn
    ):
        small = reward_factory(tenant.id, points_required=30, name="Cookie")
        large = reward_factory(tenant.id, points_required=120, name="Lunch")
        redemptions = RedemptionService(db_session)

        earn(tenant, customer, 100)
        redemptions.redeem(tenant.id, customer.id, small.id)
        earn(tenant, customer, 75)
        redemptions.redeem(tenant.id, customer.id, large.id)
        earn(tenant, customer, 5)

        entries = TransactionRepository(db_session).get_for_pair(tenant.id, customer.id)
        assert [e.sequence for e in entries] == [1, 2, 3, 4, 5]

        running = 0
        for entry in entries:
            running += entry.points
            assert entry.balance == running

        balance = BalanceService(db_session).resolve_balance(tenant.id, customer.id)
        assert balance == sum(e.points for e in entries) == entries[-1].balance == 30

    def test_earn_then_redeem_same_amount(self, db_session, tenant, customer, reward_factory, earn):
        """+30 then -30 from a zero balance leaves 30 then 0 on the ledger"""
        reward = reward_factory(tenant.id, points_required=30)

        earned = earn(tenant, customer, 30)
        redeemed = RedemptionService(db_session).redeem(tenant.id, customer.id, reward.id)

        assert earned.balance == 30
        assert redeemed.points == -30
        assert redeemed.balance == 0
        assert BalanceService(db_session).resolve_balance(tenant.id, customer.id) == 0


class TestEarning:
    def test_record_earning(self, db_session, tenant, customer):
        transaction = EarningService(db_session).record_earning(
            tenant.id, customer.id, 30, "Purchase #1042"
        )

        assert transaction.id is not None
        assert transaction.type == TransactionType.POINTS_EARNED
        assert transaction.points == 30
        assert transaction.balance == 30
        assert transaction.reward_id is None
        assert transaction.description == "Purchase #1042"

    @pytest.mark.parametrize("points", [0, -10])
    def test_non_positive_points_rejected(self, db_session, tenant, customer, points):
        with pytest.raises(ValidationException):
            EarningService(db_session).record_earning(tenant.id, customer.id, points, "Bad grant")

        assert TransactionRepository(db_session).count_for_pair(tenant.id, customer.id) == 0

    def test_missing_customer(self, db_session, tenant):
        with pytest.raises(NotFoundException):
            EarningService(db_session).record_earning(tenant.id, 99999, 10, "Purchase")

    def test_enrolls_customer_once(self, db_session, tenant, customer, earn):
        earn(tenant, customer, 10)
        earn(tenant, customer, 10)

        repo = CustomerRepository(db_session)
        assert repo.is_member(customer.id, tenant.id)
        db_session.refresh(customer)
        assert customer.tenant_ids == [tenant.id]


class TestImmutability:
    def test_entry_cannot_be_edited(self, db_session, tenant, customer, earn):
        entry = earn(tenant, customer, 10)

        entry.balance = 999
        with pytest.raises(LedgerImmutableException):
            db_session.commit()
        db_session.rollback()

        stored = db_session.query(Transaction).filter_by(id=entry.id).one()
        assert stored.balance == 10

    def test_entry_cannot_be_deleted(self, db_session, tenant, customer, earn):
        entry = earn(tenant, customer, 10)

        db_session.delete(entry)
        with pytest.raises(LedgerImmutableException):
            db_session.commit()
        db_session.rollback()

        assert db_session.query(Transaction).count() == 1

    def test_history_unchanged_by_later_entries(self, db_session, tenant, customer, earn):
        first = earn(tenant, customer, 10)
        first_id, first_balance = first.id, first.balance

        earn(tenant, customer, 20)
        earn(tenant, customer, 30)

        stored = TransactionRepository(db_session).get_by_id(first_id)
        assert stored.balance == first_balance == 10


class TestPointsSummary:
    def test_counts_only_current_month(self, db_session, tenant, customer, reward_factory, earn):
        reward = reward_factory(tenant.id, points_required=40)
        earn(tenant, customer, 100)
        RedemptionService(db_session).redeem(tenant.id, customer.id, reward.id)

        summary = BalanceService(db_session).get_points_summary(tenant.id, customer.id)

        assert summary.snapshot.balance == 60
        assert summary.earned_this_month == 100
        assert summary.redeemed_this_month == 40

    def test_next_month_starts_at_zero(self, db_session, tenant, customer, earn):
        earn(tenant, customer, 100)

        next_month = datetime.now(UTC).replace(day=1) + timedelta(days=32)
        summary = BalanceService(db_session).get_points_summary(
            tenant.id, customer.id, now=next_month
        )

        assert summary.snapshot.balance == 100
        assert summary.earned_this_month == 0
        assert summary.redeemed_this_month == 0
