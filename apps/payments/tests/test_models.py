import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.payments.models import (
    Payment,
    PaymentStatus,
    STATUS_TRANSITIONS,
    get_allowed_transitions,
    is_valid_status_transition,
)


class TestStatusTransitions:

    @pytest.mark.parametrize('current,expected', [
        ('pending', ['processing', 'cancelled', 'failed']),
        ('processing', ['completed', 'failed']),
        ('completed', ['refunded']),
        ('failed', ['pending']),
        ('cancelled', ['pending']),
        ('refunded', []),
    ])
    def test_allowed_transitions(self, current, expected):
        """Each status lists its allowed next statuses."""
        assert get_allowed_transitions(current) == expected

    def test_every_status_has_an_entry(self):
        """Transition table covers every status."""
        assert set(STATUS_TRANSITIONS) == set(PaymentStatus.values)

    def test_refunded_is_terminal(self):
        for status in PaymentStatus.values:
            assert not is_valid_status_transition('refunded', status)

    def test_completed_cannot_go_back_to_pending(self):
        """Completed payments cannot be reopened."""
        assert not is_valid_status_transition('completed', 'pending')

    def test_unknown_status_allows_nothing(self):
        assert get_allowed_transitions('bogus') == []
        assert not is_valid_status_transition('bogus', 'pending')


@pytest.mark.django_db
class TestPaymentModel:

    def test_defaults(self, customer):
        """New payment defaults to pending USD with empty extras."""
        payment = Payment.objects.create(
            order_id='ORDER-MODEL1',
            user=customer,
            amount=Decimal('10.00'),
            payment_method='paypal',
        )
        assert payment.status == PaymentStatus.PENDING
        assert payment.currency == 'USD'
        assert payment.gateway_response == {}
        assert payment.metadata == {}
        assert payment.refund_details is None
        assert not payment.has_refund
        assert not payment.is_card_payment

    def test_generate_receipt(self, pending_payment):
        """Receipt carries order, amount and status."""
        receipt = pending_payment.generate_receipt()

        assert receipt == {
            'receiptId': f'RCPT-{pending_payment.id}',
            'orderId': 'ORDER-PEND01',
            'amount': Decimal('100.00'),
            'currency': 'USD',
            'paymentMethod': 'credit_card',
            'paymentDate': pending_payment.created_at,
            'status': 'pending',
        }

    def test_generate_receipt_does_not_save(self, pending_payment):
        """Building a receipt does not touch the row."""
        updated_at = pending_payment.updated_at
        pending_payment.generate_receipt()
        pending_payment.refresh_from_db()
        assert pending_payment.updated_at == updated_at

    def test_recent_returns_newest_first(self, make_payment):
        """Recent payments are limited and ordered newest first."""
        now = timezone.now()
        oldest = make_payment()
        middle = make_payment()
        newest = make_payment()
        for offset, payment in enumerate([newest, middle, oldest]):
            Payment.objects.filter(pk=payment.pk).update(
                created_at=now - timedelta(minutes=offset)
            )

        assert list(Payment.objects.recent(limit=2)) == [newest, middle]
        assert list(Payment.objects.recent()) == [newest, middle, oldest]

    def test_refund_details(self, refunded_payment):
        """Refund fields are grouped into one record."""
        details = refunded_payment.refund_details
        assert details['refund_id'] == 'REF-18F2A3B4C5D6E'
        assert details['refund_amount'] == Decimal('50.00')
        assert details['refund_reason'] == 'Customer request'

    def test_can_transition_to(self, pending_payment):
        """Instance check follows the transition table."""
        assert pending_payment.can_transition_to('processing')
        assert not pending_payment.can_transition_to('completed')

    def test_for_user_newest_first(self, make_payment, customer, other_customer):
        """Payments of one user come newest first."""
        first = make_payment()
        second = make_payment()
        make_payment(user=other_customer)
        Payment.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(days=1))

        ids = list(Payment.objects.for_user(customer.id).values_list('id', flat=True))
        assert ids == [second.id, first.id]
