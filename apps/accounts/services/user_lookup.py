"""User lookup service - existence checks used by other apps."""

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from uuid import UUID

from .exceptions import UserNotFoundError

User = get_user_model()


def get_user_or_raise(user_id: UUID) -> User:
    """
    Fetch a user by primary key.

    Raises:
        UserNotFoundError: If no user has this id
    """
    try:
        return User.objects.get(id=user_id)
    except (User.DoesNotExist, ValidationError, ValueError):
        raise UserNotFoundError()


def user_exists(user_id: UUID) -> bool:
    """Return True if a user with this id exists."""
    try:
        return User.objects.filter(id=user_id).exists()
    except (ValidationError, ValueError):
        return False
