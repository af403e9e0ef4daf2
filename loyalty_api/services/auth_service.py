import logging
from sqlalchemy.orm import Session

from loyalty_api.models.customer import Customer
from loyalty_api.repositories.customer_repository import CustomerRepository
from loyalty_api.core.security import create_access_token, hash_password, verify_password
from loyalty_api.core.exceptions import (
    UnauthorizedException,
    ForbiddenException,
    ValidationException,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    """Service layer for customer login and credential changes"""

    def __init__(self, db: Session):
        self.db = db
        self.customer_repo = CustomerRepository(db)

    def login(self, phone: str, password: str) -> tuple[str, Customer]:
        """
        Verify phone/password and issue an access token.

        Unknown phone numbers and wrong passwords fail identically.

        Returns:
            Tuple of (access token, customer)

        Raises:
            UnauthorizedException: If the credentials do not match
            ForbiddenException: If the account is suspended
        """
        customer = self.customer_repo.get_by_phone(phone)
        if customer is None or not verify_password(password, customer.password_hash):
            logger.info("Login rejected", extra={"reason": "invalid_credentials"})
            raise UnauthorizedException("Invalid credentials")

        if not customer.is_active:
            raise ForbiddenException("Account is suspended")

        logger.info("Customer logged in", extra={"customer_id": customer.id})
        return create_access_token(customer.id), customer

    def change_password(self, customer: Customer, new_password: str) -> Customer:
        """
        Replace the customer's password and clear the pending-change flag.

        Raises:
            ValidationException: If the new password is shorter than 8 characters
        """
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        customer.password_hash = hash_password(new_password)
        customer.password_changed = True
        customer = self.customer_repo.update(customer)

        logger.info("Password changed", extra={"customer_id": customer.id})
        return customer
