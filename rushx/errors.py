"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class TournamentNotOpenError(ValidationError):
    """Raised when a tournament no longer accepts registrations."""

    def __init__(self, message="Tournament is not open for registration."):
        """Initialize the error."""
        super().__init__(message)


class NotAuthorizedError(AppError):
    """Raised when a user attempts an action reserved for someone else."""

    def __init__(self, message="You are not authorized to perform this action."):
        """Initialize the error."""
        super().__init__(message, 403)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class CapacityExceededError(AppError):
    """Raised when a tournament or team has no free slot left."""

    def __init__(self, message="Capacity exceeded."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class ReferralCodeCollisionError(AppError):
    """Raised when a freshly generated referral code collides twice.

    A second collision means the generator or the uniqueness lookup is
    broken, so it is surfaced instead of retried.
    """

    def __init__(self, message="Could not allocate a unique referral code."):
        """Initialize the error."""
        super().__init__(message, 500)
