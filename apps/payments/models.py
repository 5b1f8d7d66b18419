from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models
from decimal import Decimal
import uuid

from .currency import CURRENCY_CHOICES, BASE_CURRENCY


ORDER_ID_PATTERN = r'^ORDER-[A-Z0-9]{6,12}$'
TRANSACTION_ID_PATTERN = r'^TXN-[A-Z0-9]{6,15}$'
REFUND_ID_PATTERN = r'^REF-[A-Z0-9]{6,15}$'
LAST_FOUR_DIGITS_PATTERN = r'^\d{4}$'
EXPIRY_DATE_PATTERN = r'^(0[1-9]|1[0-2])/\d{2}$'

MAX_PAYMENT_AMOUNT = Decimal('1000000')
DEFAULT_REFUND_REASON = 'Customer request'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PROCESSING = 'processing', 'Processing'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'
    REFUNDED = 'refunded', 'Refunded'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentMethod(models.TextChoices):
    CREDIT_CARD = 'credit_card', 'Credit card'
    DEBIT_CARD = 'debit_card', 'Debit card'
    PAYPAL = 'paypal', 'PayPal'
    BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
    CRYPTO = 'crypto', 'Cryptocurrency'
    CASH_ON_DELIVERY = 'cash_on_delivery', 'Cash on delivery'


CARD_PAYMENT_METHODS = frozenset({PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD})


class CardType(models.TextChoices):
    VISA = 'visa', 'Visa'
    MASTERCARD = 'mastercard', 'Mastercard'
    AMEX = 'amex', 'American Express'
    DISCOVER = 'discover', 'Discover'
    OTHER = 'other', 'Other'


# Allowed next states for every status. Refunded is terminal.
STATUS_TRANSITIONS = {
    PaymentStatus.PENDING: (
        PaymentStatus.PROCESSING,
        PaymentStatus.CANCELLED,
        PaymentStatus.FAILED,
    ),
    PaymentStatus.PROCESSING: (
        PaymentStatus.COMPLETED,
        PaymentStatus.FAILED,
    ),
    PaymentStatus.COMPLETED: (
        PaymentStatus.REFUNDED,
    ),
    PaymentStatus.FAILED: (
        PaymentStatus.PENDING,
    ),
    PaymentStatus.CANCELLED: (
        PaymentStatus.PENDING,
    ),
    PaymentStatus.REFUNDED: (),
}


def get_allowed_transitions(current_status):
    """Return the statuses reachable from ``current_status`` as plain strings."""
    return [str(s) for s in STATUS_TRANSITIONS.get(current_status, ())]


def is_valid_status_transition(current_status, new_status):
    """Check a single step against the transition table."""
    return new_status in STATUS_TRANSITIONS.get(current_status, ())


class PaymentQuerySet(models.QuerySet):

    def for_user(self, user_id):
        """Payments owned by a user, newest first."""
        return self.filter(user_id=user_id).order_by('-created_at')

    def recent(self, limit=10):
        """The latest ``limit`` payments across all users."""
        return self.order_by('-created_at')[:limit]


class Payment(models.Model):
    """A single payment for an order, with its optional one-time refund."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Business reference for the purchase order
    order_id = models.CharField(
        max_length=20,
        unique=True,
        validators=[RegexValidator(ORDER_ID_PATTERN)]
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='payments'
    )

    # Financial details
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[
            MinValueValidator(Decimal('0.01')),
            MaxValueValidator(MAX_PAYMENT_AMOUNT),
        ]
    )
    currency = models.CharField(
        max_length=3,
        choices=CURRENCY_CHOICES,
        default=BASE_CURRENCY
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices
    )

    # Card details (card methods only)
    card_type = models.CharField(
        max_length=20,
        choices=CardType.choices,
        null=True,
        blank=True
    )
    last_four_digits = models.CharField(
        max_length=4,
        null=True,
        blank=True,
        validators=[RegexValidator(LAST_FOUR_DIGITS_PATTERN)]
    )
    expiry_date = models.CharField(
        max_length=5,
        null=True,
        blank=True,
        validators=[RegexValidator(EXPIRY_DATE_PATTERN)]
    )

    # Billing address
    billing_street = models.CharField(max_length=200, blank=True)
    billing_city = models.CharField(max_length=100, blank=True)
    billing_state = models.CharField(max_length=100, blank=True)
    billing_postal_code = models.CharField(max_length=20, blank=True)
    billing_country = models.CharField(max_length=100, blank=True)

    # Lifecycle
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )

    # Gateway data (NULL = not assigned yet)
    transaction_id = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        validators=[RegexValidator(TRANSACTION_ID_PATTERN)]
    )
    gateway_response = models.JSONField(default=dict, blank=True)

    # Refund sub-record, written once
    refund_id = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        editable=False
    )
    refund_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        editable=False
    )
    refund_date = models.DateTimeField(null=True, blank=True, editable=False)
    refund_reason = models.CharField(max_length=500, blank=True, editable=False)

    metadata = models.JSONField(default=dict, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PaymentQuerySet.as_manager()

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='payments_user_created_idx'),
            models.Index(fields=['status', 'created_at'], name='payments_status_created_idx'),
            models.Index(fields=['payment_method'], name='payments_method_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.order_id} - {self.amount} {self.currency} ({self.status})"

    @property
    def has_refund(self):
        return bool(self.refund_id)

    @property
    def is_card_payment(self):
        return self.payment_method in CARD_PAYMENT_METHODS

    @property
    def card_details(self):
        return {
            'card_type': self.card_type,
            'last_four_digits': self.last_four_digits,
            'expiry_date': self.expiry_date,
        }

    @property
    def billing_address(self):
        return {
            'street': self.billing_street,
            'city': self.billing_city,
            'state': self.billing_state,
            'postal_code': self.billing_postal_code,
            'country': self.billing_country,
        }

    @property
    def refund_details(self):
        """Refund sub-record, or None when the payment was never refunded."""
        if not self.has_refund:
            return None
        return {
            'refund_id': self.refund_id,
            'refund_amount': self.refund_amount,
            'refund_date': self.refund_date,
            'refund_reason': self.refund_reason,
        }

    def get_allowed_transitions(self):
        return get_allowed_transitions(self.status)

    def can_transition_to(self, new_status):
        return is_valid_status_transition(self.status, new_status)

    def generate_receipt(self):
        """Project the payment into a receipt. Pure; never saves."""
        return {
            'receiptId': f"RCPT-{self.id}",
            'orderId': self.order_id,
            'amount': self.amount,
            'currency': self.currency,
            'paymentMethod': self.payment_method,
            'paymentDate': self.created_at,
            'status': self.status,
        }
