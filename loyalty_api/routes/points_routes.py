from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from loyalty_api.database import get_db
from loyalty_api.dependencies import get_current_customer, verify_merchant_key
from loyalty_api.models.customer import Customer
from loyalty_api.services.balance_service import BalanceService
from loyalty_api.services.earning_service import EarningService
from loyalty_api.schemas.points_schemas import BalanceResponse, PointsSummaryResponse
from loyalty_api.schemas.transaction_schemas import EarnRequest, TransactionResponse

router = APIRouter()


@router.get("/balance", response_model=BalanceResponse)
def get_balance(
    tenant_id: int = Query(..., alias="tenantId", gt=0),
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """
    Get the caller's balance at a tenant.

    - transactionCount of 0 means the caller has no history there
    """
    snapshot = BalanceService(db).get_balance(tenant_id, customer.id)
    return BalanceResponse(
        tenant_id=snapshot.tenant_id,
        balance=snapshot.balance,
        transaction_count=snapshot.transaction_count,
    )


@router.get("/summary", response_model=PointsSummaryResponse)
def get_points_summary(
    tenant_id: int = Query(..., alias="tenantId", gt=0),
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """Get the caller's balance plus points earned and redeemed this month"""
    summary = BalanceService(db).get_points_summary(tenant_id, customer.id)
    return PointsSummaryResponse(
        tenant_id=summary.snapshot.tenant_id,
        balance=summary.snapshot.balance,
        transaction_count=summary.snapshot.transaction_count,
        earned_this_month=summary.earned_this_month,
        redeemed_this_month=summary.redeemed_this_month,
    )


@router.post(
    "/earn",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_merchant_key)],
)
def record_earning(data: EarnRequest, db: Session = Depends(get_db)):
    """
    Credit points granted at a tenant's point of sale.

    - Requires the X-Merchant-Key header
    - Enrolls the customer with the tenant on first earning
    """
    service = EarningService(db)
    return service.record_earning(data.tenant_id, data.customer_id, data.points, data.description)
