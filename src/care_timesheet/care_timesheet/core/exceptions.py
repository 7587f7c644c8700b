class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a record id does not exist."""


class ForbiddenError(DomainError):
    """Raised when an action is outside the record's lifecycle state or the caller's rights."""


class AlreadyApprovedError(DomainError):
    """Raised when approving (or otherwise deciding) an already approved record."""


class AlreadyRejectedError(DomainError):
    """Raised when rejecting an already rejected record."""


class DatabaseError(DomainError):
    """Raised when the persistence layer fails. The message never carries storage detail."""
