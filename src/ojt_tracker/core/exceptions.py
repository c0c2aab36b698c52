class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AlreadyClockedInError(ValidationError):
    """Raised on clock-in while today's last segment is still open."""


class NotClockedInError(ValidationError):
    """Raised on clock-out when there is no open segment today."""


class OperationInProgressError(ValidationError):
    """Raised when a clock operation for the same user is already in flight."""


class AuthenticationError(DomainError):
    """Raised when the request carries no signed-in identity."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PersistenceError(DomainError):
    """Raised when the persistence backend fails or rejects a write."""


class ConcurrentUpdateError(PersistenceError):
    """Raised when a write was based on a stale copy of the record.

    ``current`` holds the authoritative record re-read after the rejection,
    when the caller was able to fetch it.
    """

    def __init__(self, message: str, *, current=None):
        super().__init__(message)
        self.current = current
