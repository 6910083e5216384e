class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class PasswordMismatchError(ValidationError):
    """Raised when a password and its confirmation differ."""


class NotFoundError(DomainError):
    """Raised when a lookup finds nothing the caller may act on."""


class InvalidCodeError(NotFoundError):
    """Raised when no scholar holds the given initialization code."""


class InvalidTokenError(DomainError):
    """Raised when a password reset token is unknown or expired."""


class AuthenticationError(DomainError):
    """Raised when a password does not match the stored hash."""


class ConflictError(DomainError):
    """Raised when a state machine rule rejects the action."""


class AlreadyInitializedError(ConflictError):
    pass


class NotStagedError(ConflictError):
    pass


class AlreadyRequestedThisPeriodError(ConflictError):
    pass


class AlreadyPendingError(ConflictError):
    pass


class DeliveryError(Exception):
    """Raised when the mail transport fails to deliver a message."""


class StoreError(Exception):
    """Raised when the persistence layer fails."""
