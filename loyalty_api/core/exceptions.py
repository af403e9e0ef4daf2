class LoyaltyException(Exception):
    """Base exception for the loyalty API"""

    pass


class UnauthorizedException(LoyaltyException):
    """Raised when a bearer token is missing, malformed or invalid"""

    pass


class NotFoundException(LoyaltyException):
    """Raised when a tenant, customer or reward is absent (or a reward is inactive)"""

    pass


class ForbiddenException(LoyaltyException):
    """Raised when a caller is identified but not allowed to proceed"""

    pass


class ValidationException(LoyaltyException):
    """Raised for business logic validation errors"""

    pass


class InsufficientPointsException(LoyaltyException):
    """Raised when a balance cannot cover a reward's cost"""

    def __init__(self, shortfall: int):
        self.shortfall = shortfall
        super().__init__(f"Insufficient points: {shortfall} more points needed")


class ConflictException(LoyaltyException):
    """Raised when concurrent ledger writes kept colliding after all retries"""

    pass


class InternalException(LoyaltyException):
    """Raised when storage is unavailable or an unexpected fault occurs"""

    pass


class LedgerImmutableException(LoyaltyException):
    """Raised on any attempt to modify or delete a written ledger entry"""

    pass
