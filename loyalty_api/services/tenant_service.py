from sqlalchemy.orm import Session
from loyalty_api.models.tenant import Tenant
from loyalty_api.repositories.tenant_repository import TenantRepository


class TenantService:
    """Service layer for tenant lookups"""

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)

    def list_active_tenants(self) -> list[Tenant]:
        """List participating businesses a client can pick from"""
        return self.tenant_repo.get_active()
