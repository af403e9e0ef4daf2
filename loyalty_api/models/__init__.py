# Import every model so Base.metadata knows all tables
from loyalty_api.models.base import Base
from loyalty_api.models.customer import Customer, CustomerStatus
from loyalty_api.models.customer_membership import CustomerMembership
from loyalty_api.models.reward import Reward, RewardStatus
from loyalty_api.models.tenant import Tenant
from loyalty_api.models.transaction import Transaction, TransactionType

__all__ = [
    "Base",
    "Customer",
    "CustomerStatus",
    "CustomerMembership",
    "Reward",
    "RewardStatus",
    "Tenant",
    "Transaction",
    "TransactionType",
]
