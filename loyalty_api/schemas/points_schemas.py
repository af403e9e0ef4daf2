from loyalty_api.schemas.base import CamelModel


class BalanceResponse(CamelModel):
    """Tenant-scoped balance; transaction_count == 0 means no history"""

    tenant_id: int
    balance: int
    transaction_count: int


class PointsSummaryResponse(BalanceResponse):
    """Balance plus this calendar month's activity"""

    earned_this_month: int
    redeemed_this_month: int
