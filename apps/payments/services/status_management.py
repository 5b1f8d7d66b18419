"""Status management service - the payment state machine."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.payments.models import Payment, get_allowed_transitions, is_valid_status_transition
from apps.payments.exceptions import InvalidStatusTransitionError, DuplicatePaymentError
from .payment_management import get_payment, validate_transaction_id

logger = logging.getLogger(__name__)


@transaction.atomic
def update_payment_status(
    *,
    payment_id: UUID,
    status: str,
    transaction_id: Optional[str] = None,
    gateway_response: Optional[dict] = None
) -> Payment:
    """
    Move a payment to a new status.

    The payment row is locked for the duration of the update, so a
    concurrent refund or status change waits instead of overwriting.

    Checks run in this order:
    1. Payment exists
    2. ``status`` is allowed from the current status
    3. ``transaction_id`` (if given) is well formed and unused

    Args:
        payment_id: Payment UUID
        status: Requested PaymentStatus value
        transaction_id: Optional gateway reference to record
        gateway_response: Optional gateway payload to record

    Returns:
        Updated Payment instance

    Raises:
        PaymentNotFoundError: If the payment does not exist
        InvalidStatusTransitionError: If the table forbids the step
        PaymentValidationError: If transaction_id is malformed
        DuplicatePaymentError: If transaction_id belongs to another payment
    """
    payment = get_payment(payment_id, for_update=True)

    if not is_valid_status_transition(payment.status, status):
        logger.warning(
            "Rejected status change for payment %s: %s -> %s",
            payment.id, payment.status, status
        )
        raise InvalidStatusTransitionError(
            currentStatus=payment.status,
            requestedStatus=status,
            allowedTransitions=get_allowed_transitions(payment.status),
        )

    validate_transaction_id(transaction_id)
    if transaction_id and Payment.objects.filter(
        transaction_id=transaction_id
    ).exclude(id=payment.id).exists():
        raise DuplicatePaymentError('Payment with this transaction ID already exists')

    previous_status = payment.status
    payment.status = status
    if transaction_id:
        payment.transaction_id = transaction_id
    if gateway_response:
        payment.gateway_response = gateway_response
    payment.updated_at = timezone.now()

    try:
        with transaction.atomic():
            payment.save()
    except IntegrityError:
        raise DuplicatePaymentError('Payment with this transaction ID already exists')

    logger.info(
        "Payment %s status changed: %s -> %s", payment.id, previous_status, status
    )
    return payment
