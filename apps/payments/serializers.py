from rest_framework import serializers
from .models import (
    Payment,
    PaymentStatus,
    PaymentMethod,
    CardType,
    CARD_PAYMENT_METHODS,
    ORDER_ID_PATTERN,
    TRANSACTION_ID_PATTERN,
    LAST_FOUR_DIGITS_PATTERN,
    EXPIRY_DATE_PATTERN,
    MAX_PAYMENT_AMOUNT,
)
from .currency import (
    CURRENCY_CHOICES,
    BASE_CURRENCY,
    is_currency_supported,
    is_valid_amount_for_currency,
)
from collections.abc import Mapping
from decimal import Decimal


# =============================================================================
# Input Serializers
# =============================================================================

class BillingAddressSerializer(serializers.Serializer):
    """Optional billing address attached to payment details."""

    street = serializers.CharField(max_length=200, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)


class PaymentDetailsSerializer(serializers.Serializer):
    """
    Card and billing details.

    Fields:
        card_type (str): visa, mastercard, amex, discover or other
        last_four_digits (str): Exactly four digits
        expiry_date (str): MM/YY
        billing_address (dict): Optional address
    """

    card_type = serializers.ChoiceField(
        choices=CardType.choices,
        required=False,
        allow_null=True
    )
    last_four_digits = serializers.RegexField(
        LAST_FOUR_DIGITS_PATTERN,
        required=False,
        allow_null=True,
        error_messages={'invalid': 'Last four digits must be exactly 4 digits'}
    )
    expiry_date = serializers.RegexField(
        EXPIRY_DATE_PATTERN,
        required=False,
        allow_null=True,
        error_messages={'invalid': 'Expiry date must be in MM/YY format'}
    )
    billing_address = BillingAddressSerializer(required=False)


class PaymentCreateSerializer(serializers.Serializer):
    """
    Validate input for creating a payment.

    Every field error is reported together, so a client can fix a request
    in one round trip.
    """

    order_id = serializers.RegexField(
        ORDER_ID_PATTERN,
        error_messages={
            'invalid': 'Invalid order ID format. Format should be ORDER-XXXXXX where X is alphanumeric'
        }
    )
    user_id = serializers.UUIDField(
        error_messages={'invalid': 'Invalid user ID format'}
    )
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        max_value=MAX_PAYMENT_AMOUNT,
        error_messages={
            'min_value': 'Amount must be greater than 0',
            'max_value': 'Amount cannot exceed 1,000,000',
        }
    )
    currency = serializers.ChoiceField(
        choices=CURRENCY_CHOICES,
        default=BASE_CURRENCY,
        error_messages={'invalid_choice': 'Currency "{input}" is not supported'}
    )
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    payment_details = PaymentDetailsSerializer(required=False)
    transaction_id = serializers.RegexField(
        TRANSACTION_ID_PATTERN,
        required=False,
        allow_null=True,
        error_messages={
            'invalid': 'Invalid transaction ID format. Format should be TXN-XXXXXX where X is alphanumeric'
        }
    )
    gateway_response = serializers.DictField(required=False)
    metadata = serializers.DictField(
        child=serializers.CharField(allow_blank=True),
        required=False
    )

    def to_internal_value(self, data):
        """
        Validate each field, then the rules that span several fields.

        Cross-field errors are merged into the field errors instead of
        waiting for every field to pass, so a bad order id does not hide a
        missing card number.
        """
        try:
            attrs = super().to_internal_value(data)
        except serializers.ValidationError as exc:
            if not isinstance(exc.detail, Mapping) or not isinstance(data, Mapping):
                raise
            errors = dict(exc.detail)
            for field, message in self.get_cross_field_errors(data).items():
                # A field's own error is more specific; keep it
                errors.setdefault(field, [message])
            raise serializers.ValidationError(errors)

        errors = self.get_cross_field_errors(attrs)
        if errors:
            raise serializers.ValidationError(errors)

        return attrs

    @staticmethod
    def get_cross_field_errors(values):
        """
        Check card details and amount precision against method and currency.

        ``values`` is either validated data or the raw request body.
        """
        errors = {}

        payment_method = values.get('payment_method')
        if isinstance(payment_method, str) and payment_method in CARD_PAYMENT_METHODS:
            details = values.get('payment_details')
            if not isinstance(details, Mapping) or not details.get('last_four_digits'):
                errors['payment_details'] = 'Last four digits are required for card payments'

        currency = values.get('currency') or BASE_CURRENCY
        if is_currency_supported(currency) and not is_valid_amount_for_currency(
            values.get('amount'), currency
        ):
            errors['amount'] = f"Amount is not valid for currency {currency}"

        return errors


class PaymentStatusUpdateSerializer(serializers.Serializer):
    """
    Validate input for a status change.

    The transaction id format is checked by the status service.
    """

    status = serializers.ChoiceField(
        choices=PaymentStatus.choices,
        error_messages={'invalid_choice': 'Invalid payment status'}
    )
    transaction_id = serializers.CharField(
        max_length=20,
        required=False,
        allow_null=True,
        allow_blank=True
    )
    gateway_response = serializers.DictField(required=False)


class RefundInputSerializer(serializers.Serializer):
    """
    Validate input for a refund.

    Fields:
        refund_amount (decimal): Positive, at most 2 fractional digits
        refund_reason (str): 5-500 characters
    """

    refund_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        error_messages={'min_value': 'Refund amount must be greater than 0'}
    )
    refund_reason = serializers.CharField(
        min_length=5,
        max_length=500,
        error_messages={
            'min_length': 'Refund reason must be between 5 and 500 characters',
            'max_length': 'Refund reason must be between 5 and 500 characters',
        }
    )


class PaymentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for payment filtering.

    Query Parameters:
        status (str): Filter by payment status
        payment_method (str): Filter by payment method
        currency (str): Filter by currency code
    """

    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    currency = serializers.ChoiceField(choices=CURRENCY_CHOICES, required=False)


class CurrencyConvertInputSerializer(serializers.Serializer):
    """
    Validate query parameters for a conversion.

    Codes are checked by ``convert_currency`` itself.
    """

    amount = serializers.DecimalField(max_digits=20, decimal_places=6)
    from_currency = serializers.CharField(max_length=3, default=BASE_CURRENCY)
    to_currency = serializers.CharField(max_length=3, default=BASE_CURRENCY)


# =============================================================================
# Output Serializers
# =============================================================================


class RefundDetailsSerializer(serializers.Serializer):
    refund_id = serializers.CharField()
    refund_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    refund_date = serializers.DateTimeField()
    refund_reason = serializers.CharField()


class PaymentSerializer(serializers.ModelSerializer):
    """Main serializer for payments."""

    user_id = serializers.UUIDField(read_only=True)
    payment_details = serializers.SerializerMethodField()
    refund_details = RefundDetailsSerializer(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'order_id',
            'user_id',
            'amount',
            'currency',
            'payment_method',
            'payment_details',
            'status',
            'transaction_id',
            'gateway_response',
            'refund_details',
            'metadata',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_payment_details(self, obj):
        details = obj.card_details
        details['billing_address'] = obj.billing_address
        return details


class ReceiptSerializer(serializers.Serializer):
    """Receipt projection returned by ``Payment.generate_receipt``."""

    receiptId = serializers.CharField()
    orderId = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    currency = serializers.CharField()
    paymentMethod = serializers.CharField()
    paymentDate = serializers.DateTimeField()
    status = serializers.CharField()
