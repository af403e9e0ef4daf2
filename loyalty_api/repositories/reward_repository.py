from typing import Optional
from sqlalchemy.orm import Session

from loyalty_api.models.reward import Reward, RewardStatus
from loyalty_api.models.tenant import Tenant


class RewardRepository:
    """Repository for Reward catalog reads and the redemption counter"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, reward_id: int) -> Optional[Reward]:
        """Get reward by ID regardless of status or tenant"""
        return self.db.query(Reward).filter(Reward.id == reward_id).first()

    def get_active_with_tenant_names(
        self, tenant_id: Optional[int] = None
    ) -> list[tuple[Reward, Optional[str]]]:
        """
        Get active rewards joined with their tenant's name.

        Uses an outer join so rewards whose tenant is missing still come
        back, paired with None.

        Returns:
            (reward, tenant_name) tuples, cheapest first, ties in creation order
        """
        query = (
            self.db.query(Reward, Tenant.name)
            .outerjoin(Tenant, Tenant.id == Reward.tenant_id)
            .filter(Reward.status == RewardStatus.ACTIVE)
        )

        if tenant_id is not None:
            query = query.filter(Reward.tenant_id == tenant_id)

        return [
            (reward, tenant_name)
            for reward, tenant_name in query.order_by(
                Reward.points_required.asc(), Reward.id.asc()
            ).all()
        ]

    def increment_redemption_count(self, reward_id: int) -> None:
        """
        Increment the redemption counter in the database without committing.

        The increment is computed by the database so concurrent redemptions
        of the same reward by different customers never lose a count.
        """
        self.db.query(Reward).filter(Reward.id == reward_id).update(
            {Reward.redemption_count: Reward.redemption_count + 1},
            synchronize_session=False,
        )
