import uuid
import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.payments.models import Payment, PaymentStatus


def status_url(payment_id):
    return reverse('payments:payment-update-status', kwargs={'pk': payment_id})


def refund_url(payment_id):
    return reverse('payments:payment-refund', kwargs={'pk': payment_id})


# =============================================================================
# Payment CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentList:
    """Tests for GET /api/payments/"""

    def test_list_payments_paginated(self, api_client, make_payment):
        """List returns a paginated page of payments."""
        make_payment()
        make_payment()
        url = reverse('payments:payment-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert len(response.data['results']) == 2

    def test_list_payments_page_size(self, api_client, make_payment):
        """Page size query parameter limits the page."""
        for _ in range(3):
            make_payment()
        url = reverse('payments:payment-list')
        response = api_client.get(url, {'page_size': 2})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['results']) == 2
        assert response.data['next'] is not None

    def test_list_payments_filter_by_status(self, api_client, pending_payment, completed_payment):
        """Status filter keeps matching payments only."""
        url = reverse('payments:payment-list')
        response = api_client.get(url, {'status': 'completed'})

        assert response.status_code == status.HTTP_200_OK
        ids = [p['id'] for p in response.data['results']]
        assert ids == [str(completed_payment.id)]

    def test_list_payments_invalid_filter(self, api_client, db):
        """Unknown status filter is rejected with 400."""
        url = reverse('payments:payment-list')
        response = api_client.get(url, {'status': 'lost'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'status' in response.data['errors']


@pytest.mark.django_db
class TestPaymentRetrieve:
    """Tests for GET /api/payments/{id}/"""

    def test_retrieve_payment(self, api_client, pending_payment):
        """Retrieve returns the payment by id."""
        url = reverse('payments:payment-detail', kwargs={'pk': pending_payment.id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['order_id'] == 'ORDER-PEND01'
        assert response.data['status'] == 'pending'

    @pytest.mark.parametrize('payment_id', [uuid.uuid4(), 'not-a-uuid'])
    def test_retrieve_missing_payment(self, api_client, db, payment_id):
        """Unknown or malformed ids return 404."""
        url = reverse('payments:payment-detail', kwargs={'pk': payment_id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'message': 'Payment not found'}


@pytest.mark.django_db
class TestPaymentCreate:
    """Tests for POST /api/payments/"""

    def test_create_payment(self, api_client, valid_payment_data, customer):
        """Create stores a pending payment and returns it."""
        url = reverse('payments:payment-list')
        response = api_client.post(url, valid_payment_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'pending'
        assert response.data['user_id'] == str(customer.id)
        assert response.data['payment_details']['billing_address']['city'] == 'Springfield'
        assert Payment.objects.filter(order_id='ORDER-AB12CD').exists()

    def test_create_reports_all_field_errors(self, api_client, db):
        """Every invalid field is reported in one response."""
        url = reverse('payments:payment-list')
        response = api_client.post(url, {
            'order_id': 'BAD',
            'user_id': 'nope',
            'amount': 0,
            'payment_method': 'barter',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Validation failed'
        assert set(response.data['errors']) == {
            'order_id', 'user_id', 'amount', 'payment_method'
        }
        assert isinstance(response.data['errors']['order_id'], str)

    def test_create_reports_cross_field_errors_with_field_errors(self, api_client, valid_payment_data):
        """Missing card details and JPY precision come back with a bad order id."""
        valid_payment_data['order_id'] = 'bad'
        valid_payment_data['currency'] = 'JPY'
        valid_payment_data['amount'] = '1234.50'
        del valid_payment_data['payment_details']
        url = reverse('payments:payment-list')
        response = api_client.post(url, valid_payment_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {
            'order_id': 'Invalid order ID format. Format should be ORDER-XXXXXX where X is alphanumeric',
            'amount': 'Amount is not valid for currency JPY',
            'payment_details': 'Last four digits are required for card payments',
        }
        assert not Payment.objects.exists()

    def test_create_for_missing_user(self, api_client, valid_payment_data):
        """Create for an unknown user returns 404."""
        valid_payment_data['user_id'] = str(uuid.uuid4())
        url = reverse('payments:payment-list')
        response = api_client.post(url, valid_payment_data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'message': 'User not found'}

    def test_create_duplicate_order_id(self, api_client, valid_payment_data):
        """A second payment for the same order is rejected."""
        url = reverse('payments:payment-list')
        first = api_client.post(url, valid_payment_data, format='json')
        second = api_client.post(url, valid_payment_data, format='json')

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_400_BAD_REQUEST
        assert second.data['message'] == 'Payment with this order ID already exists'

    def test_create_jpy_with_fraction(self, api_client, valid_payment_data):
        """JPY amounts with a fraction are rejected."""
        valid_payment_data['currency'] = 'JPY'
        valid_payment_data['amount'] = '1234.50'
        url = reverse('payments:payment-list')
        response = api_client.post(url, valid_payment_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'amount' in response.data['errors']


# =============================================================================
# Lifecycle Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentStatusUpdate:
    """Tests for PATCH /api/payments/{id}/status/"""

    def test_update_status(self, api_client, pending_payment):
        """Allowed transition updates status and transaction id."""
        response = api_client.patch(status_url(pending_payment.id), {
            'status': 'processing',
            'transaction_id': 'TXN-GATEWAY01',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'processing'
        assert response.data['transaction_id'] == 'TXN-GATEWAY01'

    def test_invalid_transition(self, api_client, pending_payment):
        """Forbidden transition lists the allowed ones."""
        response = api_client.patch(
            status_url(pending_payment.id), {'status': 'refunded'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            'message': 'Invalid status transition',
            'currentStatus': 'pending',
            'requestedStatus': 'refunded',
            'allowedTransitions': ['processing', 'cancelled', 'failed'],
        }

    def test_unknown_status_value(self, api_client, pending_payment):
        """Unknown status value fails validation."""
        response = api_client.patch(
            status_url(pending_payment.id), {'status': 'shipped'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'status' in response.data['errors']

    def test_malformed_transaction_id(self, api_client, pending_payment):
        """Malformed transaction id fails validation."""
        response = api_client.patch(status_url(pending_payment.id), {
            'status': 'processing',
            'transaction_id': 'ABC',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'transaction_id' in response.data['errors']

    def test_missing_payment(self, api_client, db):
        """Status change on an unknown payment returns 404."""
        response = api_client.patch(
            status_url(uuid.uuid4()), {'status': 'processing'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_put_not_allowed(self, api_client, pending_payment):
        """Status endpoint only accepts PATCH."""
        response = api_client.put(
            status_url(pending_payment.id), {'status': 'processing'}, format='json'
        )

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


@pytest.mark.django_db
class TestPaymentRefund:
    """Tests for POST /api/payments/{id}/refund/"""

    def test_refund(self, api_client, completed_payment):
        """Full refund moves payment to refunded."""
        response = api_client.post(refund_url(completed_payment.id), {
            'refund_amount': '99.99',
            'refund_reason': 'Customer request',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'refunded'
        assert response.data['refund_details']['refund_amount'] == Decimal('99.99')
        assert response.data['refund_details']['refund_id'].startswith('REF-')

    def test_refund_pending_payment(self, api_client, pending_payment):
        """Pending payments cannot be refunded."""
        response = api_client.post(refund_url(pending_payment.id), {
            'refund_amount': '10.00',
            'refund_reason': 'Customer request',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Only completed payments can be refunded'
        assert response.data['currentStatus'] == 'pending'

    def test_refund_exceeds_amount(self, api_client, completed_payment):
        """Refund above the paid amount reports the maximum."""
        response = api_client.post(refund_url(completed_payment.id), {
            'refund_amount': '150.00',
            'refund_reason': 'Customer request',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            'message': 'Invalid refund amount',
            'maxRefundAmount': 99.99,
        }

    def test_refund_input_validated(self, api_client, completed_payment):
        """Bad amount and reason are both reported."""
        response = api_client.post(refund_url(completed_payment.id), {
            'refund_amount': '-1',
            'refund_reason': 'no',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.data['errors']) == {'refund_amount', 'refund_reason'}


@pytest.mark.django_db
class TestPaymentReceipt:
    """Tests for GET /api/payments/{id}/receipt/"""

    def test_receipt(self, api_client, completed_payment):
        """Receipt mirrors the payment."""
        url = reverse('payments:payment-receipt', kwargs={'pk': completed_payment.id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['receiptId'] == f'RCPT-{completed_payment.id}'
        assert response.data['orderId'] == 'ORDER-DONE01'
        assert response.data['amount'] == Decimal('99.99')
        assert response.data['status'] == 'completed'
        assert response.data['paymentDate']

    def test_receipt_missing_payment(self, api_client, db):
        """Receipt for an unknown payment returns 404."""
        url = reverse('payments:payment-receipt', kwargs={'pk': uuid.uuid4()})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestPaymentLifecycleScenario:
    """Create, process, complete and refund one payment end to end."""

    def test_full_lifecycle(self, api_client, valid_payment_data):
        """Payment goes from pending to refunded exactly once."""
        create = api_client.post(
            reverse('payments:payment-list'), valid_payment_data, format='json'
        )
        assert create.status_code == status.HTTP_201_CREATED
        assert create.data['status'] == 'pending'
        payment_id = create.data['id']

        # Must pass through processing first
        skip = api_client.patch(status_url(payment_id), {'status': 'completed'}, format='json')
        assert skip.status_code == status.HTTP_400_BAD_REQUEST
        assert skip.data['allowedTransitions'] == ['processing', 'cancelled', 'failed']

        processing = api_client.patch(status_url(payment_id), {'status': 'processing'}, format='json')
        assert processing.status_code == status.HTTP_200_OK

        completed = api_client.patch(status_url(payment_id), {'status': 'completed'}, format='json')
        assert completed.status_code == status.HTTP_200_OK
        assert completed.data['status'] == 'completed'

        too_much = api_client.post(refund_url(payment_id), {
            'refund_amount': '150.00',
            'refund_reason': 'Customer request',
        }, format='json')
        assert too_much.status_code == status.HTTP_400_BAD_REQUEST
        assert too_much.data['message'] == 'Invalid refund amount'

        refund = api_client.post(refund_url(payment_id), {
            'refund_amount': '99.99',
            'refund_reason': 'Customer request',
        }, format='json')
        assert refund.status_code == status.HTTP_200_OK
        assert refund.data['status'] == 'refunded'

        again = api_client.post(refund_url(payment_id), {
            'refund_amount': '99.99',
            'refund_reason': 'Customer request',
        }, format='json')
        assert again.status_code == status.HTTP_400_BAD_REQUEST
        assert again.data['message'] == 'This payment has already been refunded'
        assert again.data['refundDetails']['refund_id'] == refund.data['refund_details']['refund_id']

        payment = Payment.objects.get(id=payment_id)
        assert payment.status == PaymentStatus.REFUNDED


# =============================================================================
# Queries and Statistics Tests
# =============================================================================

@pytest.mark.django_db
class TestUserPayments:
    """Tests for GET /api/payments/user/{user_id}/"""

    def test_user_payments(self, api_client, make_payment, customer, other_customer):
        """Only the user's own payments are listed."""
        mine = make_payment()
        make_payment(user=other_customer)
        url = reverse('payments:payment-user-payments', kwargs={'user_id': customer.id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [p['id'] for p in response.data['results']] == [str(mine.id)]

    def test_user_payments_missing_user(self, api_client, db):
        """Unknown user returns 404."""
        url = reverse('payments:payment-user-payments', kwargs={'user_id': uuid.uuid4()})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'message': 'User not found'}


@pytest.mark.django_db
class TestPaymentStats:
    """Tests for GET /api/payments/stats/"""

    def test_stats(self, api_client, make_payment):
        """Stats count every payment and sum completed ones."""
        make_payment(status=PaymentStatus.COMPLETED, amount=Decimal('40.00'))
        make_payment(status=PaymentStatus.FAILED, amount=Decimal('60.00'))
        url = reverse('payments:payment-stats')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['totalCount'] == 2
        assert {'status': 'failed', 'count': 1} in body['byStatus']
        assert body['totalAmount'] == [{'currency': 'USD', 'totalAmount': 40.0}]


# =============================================================================
# Currency Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrencyEndpoints:
    """Tests for /api/payments/currencies/"""

    def test_currency_list(self, api_client):
        """All supported currencies are listed."""
        response = api_client.get(reverse('payments:currency-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 20
        jpy = next(c for c in response.data['currencies'] if c['code'] == 'JPY')
        assert jpy['decimal_places'] == 0

    def test_convert(self, api_client):
        """Amount is converted and formatted."""
        response = api_client.get(
            reverse('payments:currency-convert'),
            {'amount': '100', 'from': 'USD', 'to': 'EUR'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['convertedAmount'] == Decimal('85.00')
        assert response.data['formatted'] == '€85.00'
        assert response.data['from'] == 'USD'
        assert response.data['to'] == 'EUR'

    def test_convert_unsupported_currency(self, api_client):
        """Unsupported target currency returns 400."""
        response = api_client.get(
            reverse('payments:currency-convert'),
            {'amount': '100', 'from': 'USD', 'to': 'XYZ'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'One or both currencies are not supported'

    def test_convert_requires_amount(self, api_client):
        """Amount is required for a conversion."""
        response = api_client.get(reverse('payments:currency-convert'), {'to': 'EUR'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'amount' in response.data['errors']


@pytest.mark.django_db
def test_health_check(client):
    """Health check answers ok."""
    response = client.get('/api/health/')
    assert response.status_code == 200
    assert response.json() == {'status': 'ok'}
