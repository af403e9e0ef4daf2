from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from loyalty_api.database import get_db
from loyalty_api.dependencies import get_current_customer
from loyalty_api.models.customer import Customer
from loyalty_api.services.reward_service import RewardService
from loyalty_api.services.redemption_service import RedemptionService
from loyalty_api.schemas.reward_schemas import (
    RewardListResponse,
    RedeemRequest,
    RedeemResponse,
)
from loyalty_api.schemas.transaction_schemas import TransactionResponse

router = APIRouter()


@router.get("", response_model=RewardListResponse)
def list_rewards(
    tenant_id: Optional[int] = Query(None, alias="tenantId", gt=0, description="Filter by tenant"),
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """
    List active rewards.

    - Sorted by pointsRequired ascending
    - Inactive rewards never appear
    - All tenants' rewards when tenantId is omitted
    """
    service = RewardService(db)
    return RewardListResponse(rewards=service.list_active_rewards(tenant_id))


@router.post("/redeem", response_model=RedeemResponse)
def redeem_reward(
    data: RedeemRequest,
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """
    Spend points on a reward.

    - Debits the reward's tenant ledger (or tenantId, which must own the reward)
    - 400 with the shortfall when the balance is too low
    - 404 if the reward is missing or inactive
    - 409 if concurrent writes kept conflicting
    """
    service = RedemptionService(db)
    transaction = service.redeem_reward(customer.id, data.reward_id, tenant_id=data.tenant_id)
    return RedeemResponse(
        message="Reward redeemed successfully",
        transaction=TransactionResponse.model_validate(transaction),
    )
