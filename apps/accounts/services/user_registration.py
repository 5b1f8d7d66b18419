"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserAlreadyExistsError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    name: str
) -> User:
    """
    Create a new user account.

    Args:
        email: User's email address (unique)
        password: User's password (will be hashed)
        name: Full name

    Returns:
        Created User instance

    Raises:
        UserAlreadyExistsError: If a user with this email exists
    """
    normalized = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=normalized).exists():
        raise UserAlreadyExistsError()

    try:
        user = User.objects.create_user(
            email=normalized,
            password=password,
            name=name
        )
    except IntegrityError:
        # Lost a race against a concurrent registration
        raise UserAlreadyExistsError()

    logger.info("Registered user %s", user.id)
    return user
