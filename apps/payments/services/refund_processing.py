"""Refund processing service - one-time refunds of completed payments."""

import logging
import secrets
import time
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.payments.models import Payment, PaymentStatus, DEFAULT_REFUND_REASON
from apps.payments.exceptions import (
    PaymentValidationError,
    InvalidPaymentStateError,
    PaymentAlreadyRefundedError,
    InvalidRefundAmountError,
    DuplicatePaymentError,
)
from .payment_management import get_payment

logger = logging.getLogger(__name__)

MIN_REFUND_REASON_LENGTH = 5
MAX_REFUND_REASON_LENGTH = 500


def generate_refund_id() -> str:
    """
    Generate a refund reference for bank and gateway matching.

    Format: ``REF-<ms timestamp, hex><4 random hex chars>``, uppercase,
    15 characters after the prefix. Uniqueness is best-effort; the unique
    column on ``Payment.refund_id`` catches collisions.
    """
    timestamp = format(int(time.time() * 1000), 'X')
    suffix = secrets.token_hex(2).upper()
    return f"REF-{timestamp}{suffix}"


@transaction.atomic
def process_refund(
    *,
    payment_id: UUID,
    refund_amount: Decimal,
    refund_reason: Optional[str] = None
) -> Payment:
    """
    Refund a completed payment, once.

    This operation:
    1. Locks the payment row
    2. Rejects a payment that already carries a refund
    3. Rejects any status other than ``completed``
    4. Checks ``0 < refund_amount <= payment.amount``
    5. Checks the reason is 5-500 characters (default "Customer request")
    6. Stores the refund sub-record and moves the payment to ``refunded``

    The already-refunded check comes before the status check so a repeated
    call reports the refund instead of the ``refunded`` status.

    Args:
        payment_id: Payment UUID
        refund_amount: Amount to return to the customer
        refund_reason: Why the refund was issued

    Returns:
        Updated Payment instance

    Raises:
        PaymentNotFoundError: If the payment does not exist
        PaymentAlreadyRefundedError: If a refund was already recorded
        InvalidPaymentStateError: If the payment is not completed
        InvalidRefundAmountError: If the amount is out of range
        PaymentValidationError: If the reason length is out of range
    """
    payment = get_payment(payment_id, for_update=True)

    if payment.has_refund:
        logger.warning("Repeated refund attempt for payment %s", payment.id)
        raise PaymentAlreadyRefundedError(refundDetails=payment.refund_details)

    if payment.status != PaymentStatus.COMPLETED:
        raise InvalidPaymentStateError(
            'Only completed payments can be refunded',
            currentStatus=payment.status,
        )

    if refund_amount is None or refund_amount <= 0 or refund_amount > payment.amount:
        logger.warning(
            "Rejected refund of %s for payment %s (max %s)",
            refund_amount, payment.id, payment.amount
        )
        raise InvalidRefundAmountError(maxRefundAmount=payment.amount)

    reason = DEFAULT_REFUND_REASON if refund_reason is None else refund_reason
    if not (MIN_REFUND_REASON_LENGTH <= len(reason) <= MAX_REFUND_REASON_LENGTH):
        raise PaymentValidationError(errors={
            'refund_reason': (
                f'Refund reason must be between {MIN_REFUND_REASON_LENGTH} '
                f'and {MAX_REFUND_REASON_LENGTH} characters'
            )
        })

    now = timezone.now()
    payment.status = PaymentStatus.REFUNDED
    payment.refund_id = generate_refund_id()
    payment.refund_amount = refund_amount
    payment.refund_date = now
    payment.refund_reason = reason
    payment.updated_at = now

    try:
        with transaction.atomic():
            payment.save()
    except IntegrityError:
        raise DuplicatePaymentError('Refund reference collision, please retry')

    logger.info(
        "Refunded %s %s on payment %s (%s)",
        refund_amount, payment.currency, payment.id, payment.refund_id
    )
    return payment
