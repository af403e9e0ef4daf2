"""Repository for Tenant model operations."""

from sqlalchemy.orm import Session
from loyalty_api.models.tenant import Tenant


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, tenant_id: int) -> Tenant | None:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found
        """
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_active(self) -> list[Tenant]:
        """
        Get all active tenants ordered by name.

        Returns:
            List of active Tenant objects
        """
        return (
            self.db.query(Tenant)
            .filter(Tenant.is_active.is_(True))
            .order_by(Tenant.name.asc(), Tenant.id.asc())
            .all()
        )

