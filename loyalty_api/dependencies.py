from fastapi import Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from loyalty_api.config import settings
from loyalty_api.core.security import authenticate, secrets_match
from loyalty_api.core.exceptions import (
    UnauthorizedException,
    NotFoundException,
    ForbiddenException,
)
from loyalty_api.database import get_db
from loyalty_api.repositories.customer_repository import CustomerRepository
from loyalty_api.models.customer import Customer

# auto_error=False so a missing header goes through our 401 handler
security = HTTPBearer(auto_error=False)


async def verify_app_signature(
    x_app_signature: str | None = Header(None, alias="X-AWD-App-Signature"),
) -> None:
    """
    Coarse gate: reject requests that do not carry the shared app signature.

    Disabled when APP_SIGNATURE is empty.
    """
    if settings.APP_SIGNATURE and not secrets_match(x_app_signature, settings.APP_SIGNATURE):
        raise ForbiddenException("Forbidden: Invalid app signature")


async def verify_merchant_key(
    x_merchant_key: str | None = Header(None, alias="X-Merchant-Key"),
) -> None:
    """Only point-of-sale integrations holding MERCHANT_API_KEY may grant points"""
    if not secrets_match(x_merchant_key, settings.MERCHANT_API_KEY):
        raise ForbiddenException("Forbidden: Invalid merchant key")


def get_current_customer(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> Customer:
    """
    FastAPI dependency to validate the bearer token and load the customer.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Verify signature and expiry, map 'sub' to a customer id
    3. Load the Customer record

    Raises:
        UnauthorizedException: If the token is missing, invalid or expired
        NotFoundException: If the token names a customer that does not exist
        ForbiddenException: If the customer is suspended
    """
    if credentials is None:
        raise UnauthorizedException("No authorization token provided")

    customer_id = authenticate(credentials.credentials)

    customer = CustomerRepository(db).get_by_id(customer_id)
    if customer is None:
        raise NotFoundException("Customer not found")
    if not customer.is_active:
        raise ForbiddenException("Account is suspended")

    return customer
