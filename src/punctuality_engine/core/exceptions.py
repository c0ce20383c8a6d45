class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class NotificationDeliveryError(DomainError):
    """Raised by a notification channel that could not deliver a message.

    The action engine records it on the audit list; it never aborts a cascade.
    """
