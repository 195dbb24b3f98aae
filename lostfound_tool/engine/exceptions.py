"""
Custom exceptions for the matching engine.

Caller-facing errors carry a stable ``code`` so transports (CLI, Lambda)
can map them without inspecting the class hierarchy.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""


class LostFoundError(Exception):
    """Base exception for engine operations."""

    code = "internal"


class UnauthenticatedError(LostFoundError):
    """No verified caller."""

    code = "unauthenticated"


class InvalidArgumentError(LostFoundError):
    """Missing or malformed required field."""

    code = "invalid-argument"


class NotFoundError(LostFoundError):
    """Referenced item does not exist."""

    code = "not-found"


class PermissionDeniedError(LostFoundError):
    """Caller does not own the item."""

    code = "permission-denied"


class AlreadyResolvedError(LostFoundError):
    """Item (or its counterpart) was resolved before this transition committed."""

    code = "failed-precondition"


class InternalError(LostFoundError):
    """Unexpected collaborator failure; wraps the underlying cause."""

    code = "internal"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class TransientError(LostFoundError):
    """Store failure in an event-triggered flow; the trigger should be redelivered."""

    code = "unavailable"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class NotificationError(LostFoundError):
    """Push delivery could not be attempted."""

    pass


class StoreError(LostFoundError):
    """Base exception for DynamoDB store operations."""

    pass


class ConditionFailedError(StoreError):
    """Conditional write failed."""

    pass


class TransactionConflictError(StoreError):
    """Transaction cancelled by a failed condition or a concurrent write."""

    pass


class StoreThrottlingError(StoreError):
    """DynamoDB throttling occurred."""

    pass


class StorePermissionError(StoreError):
    """AWS permission denied."""

    pass


class TableNotFoundError(StoreError):
    """DynamoDB table does not exist."""

    pass


class TableAlreadyExistsError(StoreError):
    """DynamoDB table already exists."""

    pass
