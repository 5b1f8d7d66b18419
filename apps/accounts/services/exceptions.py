"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """
    Base exception for accounts services.

    Carries the HTTP status the API layer should answer with and any extra
    fields to merge into the error body.
    """

    status_code = 400
    default_message = 'Account operation failed'

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    default_message = 'User registration failed'


class UserAlreadyExistsError(UserRegistrationError):
    """Raised when the email is already taken."""
    default_message = 'User with this email already exists'


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    status_code = 404
    default_message = 'User not found'


class UserHasPaymentsError(AccountsServiceError):
    """Raised when deleting a user who still owns payments."""
    default_message = 'User has payments and cannot be deleted'
