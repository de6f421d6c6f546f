
class RationPortalError(RuntimeError):
    """Base class for per-request failures raised by the booking core."""
    pass


class ValidationError(RationPortalError):
    """Raised for malformed input before anything is written."""
    pass


class PermissionDeniedError(RationPortalError):
    """Raised when the caller's role or shop does not allow the operation."""
    pass


class NotFoundError(RationPortalError):
    """Raised when a referenced shop, slot, booking or user does not exist."""
    pass


class CapacityExceeded(RationPortalError):
    """Raised when a slot already holds its maximum number of bookings."""
    pass


class InsufficientStock(RationPortalError):
    """Raised when the slot cannot cover the beneficiary's entitlement."""

    def __init__(self, shortfall: list[str]) -> None:
        self.shortfall = list(shortfall)
        super().__init__(f"Insufficient stock for: {', '.join(self.shortfall)}")


class ConflictRetryable(RationPortalError):
    """Raised when concurrent updates to the same slot kept winning past the retry budget."""
    pass


class DirectoryUnavailableError(RationPortalError):
    """Raised when the user/shop directory service fails (timeouts, network errors, 5xx)."""
    pass
