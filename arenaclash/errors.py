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


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class AuthenticationError(AppError):
    """Raised when a request needs a logged-in user."""

    def __init__(self, message="Please login to continue."):
        """Initialize the error."""
        super().__init__(message, 401)


class PermissionDeniedError(AppError):
    """Raised when the user may not perform an action."""

    def __init__(self, message="You are not authorized to perform this action."):
        """Initialize the error."""
        super().__init__(message, 403)


class InsufficientBalanceError(AppError):
    """Raised when a wallet cannot cover a debit."""

    def __init__(self, message="Insufficient balance."):
        """Initialize the error."""
        super().__init__(message, 400)


class TournamentFullError(AppError):
    """Raised when a tournament has no free slots."""

    def __init__(self, message="Tournament is full!"):
        """Initialize the error."""
        super().__init__(message, 409)


class AlreadyJoinedError(DuplicateResourceError):
    """Raised when a user joins the same tournament twice."""

    def __init__(self, message="You have already joined this tournament!"):
        """Initialize the error."""
        super().__init__(message)


class PaymentGatewayError(AppError):
    """Raised when the payment gateway rejects or fails a request."""

    def __init__(self, message="Gateway Error", payload=None):
        """Initialize the error."""
        super().__init__(message, 502)
        self.payload = payload


class WebhookSignatureError(AppError):
    """Raised when a webhook payload cannot be authenticated."""

    def __init__(self, message="Invalid webhook signature."):
        """Initialize the error."""
        super().__init__(message, 401)
