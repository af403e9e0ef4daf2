from typing import Optional
from pydantic import Field

from loyalty_api.models.reward import RewardStatus
from loyalty_api.schemas.base import CamelModel
from loyalty_api.schemas.transaction_schemas import TransactionResponse


class RewardResponse(CamelModel):
    """Catalog entry annotated with its tenant's name"""

    id: int
    tenant_id: int
    tenant_name: str
    name: str
    description: str
    points_required: int
    status: RewardStatus
    redemption_count: int


class RewardListResponse(CamelModel):
    """Schema for active rewards, cheapest first"""

    rewards: list[RewardResponse]


class RedeemRequest(CamelModel):
    """Schema for redeeming a reward"""

    reward_id: int = Field(..., gt=0)
    tenant_id: Optional[int] = Field(None, gt=0, description="Defaults to the reward's tenant")


class RedeemResponse(CamelModel):
    """Schema for a successful redemption"""

    message: str
    transaction: TransactionResponse
