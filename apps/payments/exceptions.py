"""
Domain exceptions for payments app.

This module defines the exception hierarchy for payment-related errors.
Services raise these; the project exception handler turns them into JSON
responses using ``status_code``, ``message`` and the ``extra`` state fields.

Exception Hierarchy:
    PaymentServiceError (base)
    ├── PaymentNotFoundError          404
    ├── PaymentValidationError        400  (per-field ``errors`` map)
    ├── InvalidStatusTransitionError  400
    ├── InvalidPaymentStateError      400
    ├── PaymentAlreadyRefundedError   400
    ├── InvalidRefundAmountError      400
    ├── UnsupportedCurrencyError      400
    └── DuplicatePaymentError         400

Usage:
    from apps.payments.exceptions import PaymentNotFoundError

    try:
        payment = Payment.objects.get(id=payment_id)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError()
"""


class PaymentServiceError(Exception):
    """
    Base exception for all payment service errors.

    Keyword arguments become ``extra`` and are merged into the error body,
    so callers see state-specific fields such as ``allowedTransitions``.
    """

    status_code = 400
    default_message = 'Payment operation failed'

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class PaymentNotFoundError(PaymentServiceError):
    """Payment id does not resolve."""
    status_code = 404
    default_message = 'Payment not found'


class PaymentValidationError(PaymentServiceError):
    """
    Malformed or missing input, reported per field.

    Example:
        raise PaymentValidationError(errors={
            'transaction_id': 'Invalid transaction ID format.'
        })
    """
    default_message = 'Validation failed'

    def __init__(self, message=None, errors=None):
        super().__init__(message, errors=errors or {})

    @property
    def errors(self):
        return self.extra['errors']


class InvalidStatusTransitionError(PaymentServiceError):
    """Requested status is not reachable from the current one."""
    default_message = 'Invalid status transition'


class InvalidPaymentStateError(PaymentServiceError):
    """Operation does not apply to the payment's lifecycle phase."""
    default_message = 'Operation not allowed in the current payment status'


class PaymentAlreadyRefundedError(PaymentServiceError):
    """A refund sub-record already exists; refunds are one-time."""
    default_message = 'This payment has already been refunded'


class InvalidRefundAmountError(PaymentServiceError):
    """Refund amount is not in (0, payment amount]."""
    default_message = 'Invalid refund amount'


class UnsupportedCurrencyError(PaymentServiceError):
    """Currency code is not in the supported table."""
    default_message = 'Currency is not supported'


class DuplicatePaymentError(PaymentServiceError):
    """A unique reference (order id, transaction id, refund id) is taken."""
    default_message = 'Payment with this order ID already exists'
