import pytest
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.payments.models import Payment, PaymentStatus, PaymentMethod, CardType


@pytest.fixture
def api_client():
    """Return an API client (the API has no authentication)."""
    return APIClient()


@pytest.fixture
def customer(db):
    """Create and return a customer who pays for orders."""
    return User.objects.create_user(
        email='customer@example.com',
        password='TestPass123!',
        name='Jane Customer',
    )


@pytest.fixture
def other_customer(db):
    """Create and return another customer."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        name='Other Customer',
    )


@pytest.fixture
def make_payment(customer):
    """Return a factory that saves a payment with sensible defaults."""
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        fields = {
            'order_id': f'ORDER-TEST{counter["n"]:04d}',
            'user': customer,
            'amount': Decimal('100.00'),
            'currency': 'USD',
            'payment_method': PaymentMethod.CREDIT_CARD,
            'card_type': CardType.VISA,
            'last_four_digits': '4242',
            'expiry_date': '12/30',
            'status': PaymentStatus.PENDING,
        }
        fields.update(overrides)
        return Payment.objects.create(**fields)

    return _make


@pytest.fixture
def pending_payment(make_payment):
    """Create a pending card payment."""
    return make_payment(order_id='ORDER-PEND01')


@pytest.fixture
def completed_payment(make_payment):
    """Create a completed payment ready for refund."""
    return make_payment(
        order_id='ORDER-DONE01',
        amount=Decimal('99.99'),
        status=PaymentStatus.COMPLETED,
        transaction_id='TXN-ABC12345',
    )


@pytest.fixture
def refunded_payment(make_payment):
    """Create a payment that already carries a refund."""
    payment = make_payment(
        order_id='ORDER-REFD01',
        amount=Decimal('50.00'),
        status=PaymentStatus.REFUNDED,
    )
    Payment.objects.filter(pk=payment.pk).update(
        refund_id='REF-18F2A3B4C5D6E',
        refund_amount=Decimal('50.00'),
        refund_date=timezone.now(),
        refund_reason='Customer request',
    )
    payment.refresh_from_db()
    return payment


@pytest.fixture
def valid_payment_data(customer):
    """Return a valid create-payment request body."""
    return {
        'order_id': 'ORDER-AB12CD',
        'user_id': str(customer.id),
        'amount': '99.99',
        'currency': 'USD',
        'payment_method': 'credit_card',
        'payment_details': {
            'card_type': 'visa',
            'last_four_digits': '4242',
            'expiry_date': '12/30',
            'billing_address': {
                'street': '1 Main St',
                'city': 'Springfield',
                'country': 'US',
            },
        },
        'metadata': {'source': 'web'},
    }
