from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from loyalty_api.database import get_db
from loyalty_api.services.tenant_service import TenantService
from loyalty_api.schemas.tenant_schemas import TenantListResponse

router = APIRouter()


@router.get("", response_model=TenantListResponse)
def list_tenants(db: Session = Depends(get_db)):
    """
    List participating businesses.

    Does not require authentication; clients use it for tenant selection
    and to label ledger entries.
    """
    service = TenantService(db)
    return TenantListResponse(tenants=service.list_active_tenants())
