from typing import Optional
from sqlalchemy.orm import Session

from loyalty_api.repositories.reward_repository import RewardRepository

UNKNOWN_TENANT_NAME = "Unknown"


class RewardService:
    """Service for reading the reward catalog"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RewardRepository(db)

    def list_active_rewards(self, tenant_id: Optional[int] = None) -> list[dict]:
        """
        List active rewards, cheapest first (ties in creation order).

        Every reward carries its tenant's name. A reward whose tenant no
        longer exists is listed under "Unknown" instead of failing the
        whole catalog.

        Args:
            tenant_id: Limit to one tenant's catalog; all tenants when omitted

        Returns:
            Reward dicts matching RewardResponse
        """
        return [
            {
                "id": reward.id,
                "tenant_id": reward.tenant_id,
                "tenant_name": tenant_name or UNKNOWN_TENANT_NAME,
                "name": reward.name,
                "description": reward.description,
                "points_required": reward.points_required,
                "status": reward.status,
                "redemption_count": reward.redemption_count,
            }
            for reward, tenant_name in self.repo.get_active_with_tenant_names(tenant_id)
        ]
