"""Account management service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from uuid import UUID

from .exceptions import UserHasPaymentsError
from .user_lookup import get_user_or_raise

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def delete_user(*, user_id: UUID) -> None:
    """
    Delete a user account.

    Payments keep a protected reference to their owner, so a user with any
    payment history cannot be removed.

    Args:
        user_id: User's ID

    Raises:
        UserNotFoundError: If the user does not exist
        UserHasPaymentsError: If the user owns payments
    """
    user = get_user_or_raise(user_id)

    payment_count = user.payments.count()
    if payment_count:
        raise UserHasPaymentsError(paymentCount=payment_count)

    user.delete()
    logger.info("Deleted user %s", user_id)
