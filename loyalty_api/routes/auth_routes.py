from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from loyalty_api.database import get_db
from loyalty_api.dependencies import get_current_customer
from loyalty_api.models.customer import Customer
from loyalty_api.services.auth_service import AuthService
from loyalty_api.schemas.base import MessageResponse
from loyalty_api.schemas.auth_schemas import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    ChangePasswordRequest,
    CustomerResponse,
)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange phone number and password for an access token"""
    service = AuthService(db)
    token, customer = service.login(data.phone_number, data.password)
    return LoginResponse(token=token, user=CustomerResponse.model_validate(customer))


@router.get("/profile", response_model=ProfileResponse)
def get_profile(customer: Customer = Depends(get_current_customer)):
    """Get the authenticated customer's profile"""
    return ProfileResponse(user=CustomerResponse.model_validate(customer))


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """
    Replace the caller's password.

    - Minimum 8 characters
    - Clears the pending password change flag
    """
    service = AuthService(db)
    service.change_password(customer, data.new_password)
    return MessageResponse(message="Password updated successfully")
