from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Text, Enum, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from loyalty_api.models.base import Base, TimestampMixin


class RewardStatus(str, PyEnum):
    """Reward lifecycle status"""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Reward(Base, TimestampMixin):
    """
    Redeemable catalog item owned by a tenant.

    Catalogs are managed by tenant-side tooling, so tenant_id is a plain
    reference rather than a foreign key: a reward pointing at a tenant
    that no longer exists still lists (as "Unknown").

    The only column this service writes is redemption_count.
    """

    __tablename__ = "rewards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    points_required: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[RewardStatus] = mapped_column(
        Enum(RewardStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=RewardStatus.ACTIVE,
        index=True,
    )
    redemption_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("points_required >= 0", name="ck_rewards_points_required_non_negative"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == RewardStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Reward(id={self.id}, tenant_id={self.tenant_id}, points_required={self.points_required})>"
