from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from loyalty_api.database import get_db
from loyalty_api.dependencies import get_current_customer
from loyalty_api.models.customer import Customer
from loyalty_api.services.transaction_service import TransactionService
from loyalty_api.schemas.transaction_schemas import TransactionListResponse

router = APIRouter()


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    tenant_id: Optional[int] = Query(None, alias="tenantId", gt=0, description="Filter by tenant"),
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """
    List the caller's ledger entries, newest first.

    - Entries across all tenants unless tenantId is given
    """
    service = TransactionService(db)
    return TransactionListResponse(transactions=service.get_history(customer, tenant_id=tenant_id))


@router.get("/recent", response_model=TransactionListResponse)
def list_recent_transactions(
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """List the caller's 10 most recent ledger entries across tenants"""
    service = TransactionService(db)
    return TransactionListResponse(transactions=service.get_recent(customer))
