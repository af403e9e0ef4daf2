from sqlalchemy.orm import Session
from loyalty_api.models.customer import Customer
from loyalty_api.models.customer_membership import CustomerMembership


class CustomerRepository:
    """Repository for Customer and enrollment operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, customer_id: int) -> Customer | None:
        """Get customer by internal ID"""
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def get_by_phone(self, phone: str) -> Customer | None:
        """Get customer by login phone number"""
        return self.db.query(Customer).filter(Customer.phone == phone).first()

    def update(self, customer: Customer) -> Customer:
        """Persist changes to an existing customer"""
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def is_member(self, customer_id: int, tenant_id: int) -> bool:
        return (
            self.db.query(CustomerMembership.id)
            .filter(
                CustomerMembership.customer_id == customer_id,
                CustomerMembership.tenant_id == tenant_id,
            )
            .first()
            is not None
        )

    def ensure_membership(self, customer_id: int, tenant_id: int) -> None:
        """
        Enroll a customer with a tenant if not already enrolled.

        Does not commit. A concurrent enrollment of the same pair fails the
        caller's commit with IntegrityError, which ledger writers retry.
        """
        if not self.is_member(customer_id, tenant_id):
            self.db.add(CustomerMembership(customer_id=customer_id, tenant_id=tenant_id))
