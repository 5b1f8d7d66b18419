"""Payment management service - creation, lookups and receipts."""

import logging
import re
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.services import get_user_or_raise
from apps.payments.currency import BASE_CURRENCY
from apps.payments.models import (
    Payment,
    PaymentStatus,
    CARD_PAYMENT_METHODS,
    TRANSACTION_ID_PATTERN,
)
from apps.payments.exceptions import (
    PaymentNotFoundError,
    PaymentValidationError,
    DuplicatePaymentError,
)

logger = logging.getLogger(__name__)

INVALID_TRANSACTION_ID_MESSAGE = (
    'Invalid transaction ID format. Format should be TXN-XXXXXX where X is alphanumeric'
)


def validate_transaction_id(transaction_id: Optional[str]) -> None:
    """
    Raise PaymentValidationError unless the id matches ``TXN-[A-Z0-9]{6,15}``.

    ``None`` and empty strings mean "not supplied" and pass.
    """
    if transaction_id and not re.fullmatch(TRANSACTION_ID_PATTERN, transaction_id):
        raise PaymentValidationError(errors={
            'transaction_id': INVALID_TRANSACTION_ID_MESSAGE
        })


def get_payment(payment_id: UUID, *, for_update: bool = False) -> Payment:
    """
    Fetch a payment by id.

    Args:
        payment_id: Payment UUID
        for_update: Lock the row (caller must be inside a transaction)

    Raises:
        PaymentNotFoundError: If the id does not resolve
    """
    queryset = Payment.objects.select_related('user')
    if for_update:
        queryset = Payment.objects.select_for_update()
    try:
        return queryset.get(id=payment_id)
    except (Payment.DoesNotExist, DjangoValidationError, ValueError):
        raise PaymentNotFoundError()


def list_payments(
    *,
    status: Optional[str] = None,
    payment_method: Optional[str] = None,
    currency: Optional[str] = None
) -> QuerySet:
    """All payments, newest first, with optional exact-match filters."""
    queryset = Payment.objects.select_related('user').order_by('-created_at')

    if status:
        queryset = queryset.filter(status=status)
    if payment_method:
        queryset = queryset.filter(payment_method=payment_method)
    if currency:
        queryset = queryset.filter(currency=currency)

    return queryset


def get_user_payments(user_id: UUID) -> QuerySet:
    """
    Payments owned by a user, newest first.

    Raises:
        UserNotFoundError: If the user does not exist
    """
    user = get_user_or_raise(user_id)
    return Payment.objects.for_user(user.id)


def get_payment_receipt(payment_id: UUID) -> dict:
    """
    Build the receipt for a payment. Nothing is persisted.

    Raises:
        PaymentNotFoundError: If the id does not resolve
    """
    return get_payment(payment_id).generate_receipt()


@transaction.atomic
def create_payment(
    *,
    order_id: str,
    user_id: UUID,
    amount: Decimal,
    payment_method: str,
    currency: str = BASE_CURRENCY,
    payment_details: Optional[dict] = None,
    transaction_id: Optional[str] = None,
    gateway_response: Optional[dict] = None,
    metadata: Optional[dict] = None
) -> Payment:
    """
    Create a new payment in ``pending`` status.

    Input shape is expected to be validated already (see
    ``PaymentCreateSerializer``). This operation:
    1. Confirms the owning user exists
    2. Rejects a duplicate order id or transaction id
    3. Requires last four digits for card payments
    4. Saves the payment as pending

    Args:
        order_id: Business order reference (ORDER-XXXXXX)
        user_id: Owning user's UUID
        amount: Positive amount in ``currency``
        payment_method: One of PaymentMethod values
        currency: Supported currency code
        payment_details: Card details and optional ``billing_address`` dict
        transaction_id: Optional gateway reference (TXN-XXXXXX)
        gateway_response: Raw gateway payload
        metadata: Free-form string map

    Returns:
        Created Payment instance

    Raises:
        UserNotFoundError: If the user does not exist
        DuplicatePaymentError: If the order id or transaction id is taken
        PaymentValidationError: If card details or transaction id are invalid
    """
    user = get_user_or_raise(user_id)

    if Payment.objects.filter(order_id=order_id).exists():
        raise DuplicatePaymentError()

    details = payment_details or {}
    if payment_method in CARD_PAYMENT_METHODS and not details.get('last_four_digits'):
        raise PaymentValidationError(errors={
            'payment_details': 'Last four digits are required for card payments'
        })

    validate_transaction_id(transaction_id)
    if transaction_id and Payment.objects.filter(transaction_id=transaction_id).exists():
        raise DuplicatePaymentError('Payment with this transaction ID already exists')

    billing = details.get('billing_address') or {}

    try:
        with transaction.atomic():
            payment = Payment.objects.create(
                order_id=order_id,
                user=user,
                amount=amount,
                currency=currency,
                payment_method=payment_method,
                card_type=details.get('card_type'),
                last_four_digits=details.get('last_four_digits'),
                expiry_date=details.get('expiry_date'),
                billing_street=billing.get('street') or '',
                billing_city=billing.get('city') or '',
                billing_state=billing.get('state') or '',
                billing_postal_code=billing.get('postal_code') or '',
                billing_country=billing.get('country') or '',
                status=PaymentStatus.PENDING,
                transaction_id=transaction_id or None,
                gateway_response=gateway_response or {},
                metadata=metadata or {},
            )
    except IntegrityError:
        # A concurrent request inserted the same order or transaction id
        raise DuplicatePaymentError()

    logger.info(
        "Created payment %s for order %s: %s %s via %s",
        payment.id, order_id, amount, currency, payment_method
    )
    return payment
