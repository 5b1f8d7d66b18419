"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserHasPaymentsError,
)
from .user_registration import register_user
from .user_lookup import get_user_or_raise, user_exists
from .account_management import delete_user

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'UserAlreadyExistsError',
    'UserNotFoundError',
    'UserHasPaymentsError',
    # Services
    'register_user',
    'get_user_or_raise',
    'user_exists',
    'delete_user',
]
