from datetime import datetime
from typing import Optional
from pydantic import Field

from loyalty_api.models.transaction import TransactionType
from loyalty_api.schemas.base import CamelModel


class TransactionResponse(CamelModel):
    """Schema for a ledger entry"""

    id: int
    tenant_id: int
    customer_id: int
    type: TransactionType
    points: int
    reward_id: Optional[int] = None
    description: str
    balance: int
    created_at: datetime
    updated_at: datetime


class TransactionListResponse(CamelModel):
    """Schema for list of transactions, newest first"""

    transactions: list[TransactionResponse]


class EarnRequest(CamelModel):
    """Points granted by a tenant's point-of-sale"""

    tenant_id: int = Field(..., gt=0)
    customer_id: int = Field(..., gt=0)
    points: int = Field(..., gt=0, description="Points to credit (positive)")
    description: str = Field(..., min_length=1, max_length=1000)
