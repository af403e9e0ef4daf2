from pydantic import Field

from loyalty_api.models.customer import CustomerStatus
from loyalty_api.schemas.base import CamelModel


class LoginRequest(CamelModel):
    """Phone number and password login"""

    phone_number: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1)


class CustomerResponse(CamelModel):
    """Customer profile without credentials"""

    id: int
    phone: str
    name: str
    first_name: str | None
    last_name: str | None
    status: CustomerStatus
    password_changed: bool
    tenant_ids: list[int]


class LoginResponse(CamelModel):
    """Access token and the authenticated customer"""

    token: str
    user: CustomerResponse


class ProfileResponse(CamelModel):
    user: CustomerResponse


class ChangePasswordRequest(CamelModel):
    """Schema for replacing the current password"""

    new_password: str
