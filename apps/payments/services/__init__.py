"""
Payments services - Business logic layer.

This package contains all business operations for the payments app:
- Payment creation and lookups
- Status transitions
- Refund processing
- Statistics
"""

from .payment_management import (
    create_payment,
    get_payment,
    list_payments,
    get_user_payments,
    get_payment_receipt,
    validate_transaction_id,
)

from .status_management import (
    update_payment_status,
)

from .refund_processing import (
    process_refund,
    generate_refund_id,
)

from .statistics import (
    get_payment_statistics,
)

# Domain Exceptions
from apps.payments.exceptions import (
    PaymentServiceError,
    PaymentNotFoundError,
    PaymentValidationError,
    InvalidStatusTransitionError,
    InvalidPaymentStateError,
    PaymentAlreadyRefundedError,
    InvalidRefundAmountError,
    UnsupportedCurrencyError,
    DuplicatePaymentError,
)

__all__ = [
    # Payment Management Services
    'create_payment',
    'get_payment',
    'list_payments',
    'get_user_payments',
    'get_payment_receipt',
    'validate_transaction_id',
    # Status Services
    'update_payment_status',
    # Refund Services
    'process_refund',
    'generate_refund_id',
    # Statistics Services
    'get_payment_statistics',
    # Exceptions
    'PaymentServiceError',
    'PaymentNotFoundError',
    'PaymentValidationError',
    'InvalidStatusTransitionError',
    'InvalidPaymentStateError',
    'PaymentAlreadyRefundedError',
    'InvalidRefundAmountError',
    'UnsupportedCurrencyError',
    'DuplicatePaymentError',
]
