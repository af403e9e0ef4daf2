from loyalty_api.schemas.base import CamelModel


class TenantResponse(CamelModel):
    """Public tenant details"""

    id: int
    name: str


class TenantListResponse(CamelModel):
    """Schema for list of tenants"""

    tenants: list[TenantResponse]
