from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from .models import Payment
from .serializers import (
    PaymentSerializer,
    PaymentCreateSerializer,
    ReceiptSerializer,
    # Input serializers
    PaymentFilterSerializer,
    PaymentStatusUpdateSerializer,
    RefundInputSerializer,
    CurrencyConvertInputSerializer,
)
from .services import (
    create_payment,
    get_payment,
    list_payments,
    get_user_payments,
    get_payment_receipt,
    update_payment_status,
    process_refund,
    get_payment_statistics,
)
from .currency import (
    BASE_CURRENCY,
    get_all_currencies,
    convert_currency,
    format_currency_amount,
)


class PaymentPagination(PageNumberPagination):
    """Custom pagination for payments."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Payment operations.

    list: Get all payments (filterable by status/method/currency)
    create: Validate and create a new payment
    retrieve: Get a specific payment
    receipt: Get a receipt for a payment
    update_status: Move a payment to another status
    refund: Refund a completed payment
    stats: Store-wide payment statistics
    user_payments: Payments of one user
    """

    queryset = Payment.objects.select_related('user')
    serializer_class = PaymentSerializer
    pagination_class = PaymentPagination

    def get_queryset(self):
        """Filter payments using input serializer validation."""
        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return list_payments(**filter_serializer.validated_data)

    def retrieve(self, request, pk=None):
        payment = get_payment(pk)
        return Response(PaymentSerializer(payment).data)

    def create(self, request):
        """
        Create a payment in pending status.

        POST /api/payments/
        """
        input_serializer = PaymentCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        payment = create_payment(**input_serializer.validated_data)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def receipt(self, request, pk=None):
        """
        Get receipt for a payment.

        GET /api/payments/{id}/receipt/
        """
        receipt = get_payment_receipt(pk)
        return Response(ReceiptSerializer(receipt).data)

    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        """
        Change payment status.

        PATCH /api/payments/{id}/status/
        Body: {"status": "processing", "transaction_id": "TXN-...", "gateway_response": {}}
        """
        input_serializer = PaymentStatusUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        payment = update_payment_status(
            payment_id=pk,
            status=data['status'],
            transaction_id=data.get('transaction_id') or None,
            gateway_response=data.get('gateway_response')
        )

        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=['post'])
    def refund(self, request, pk=None):
        """
        Refund a completed payment.

        POST /api/payments/{id}/refund/
        Body: {"refund_amount": 10.00, "refund_reason": "Customer request"}
        """
        input_serializer = RefundInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        payment = process_refund(
            payment_id=pk,
            refund_amount=input_serializer.validated_data['refund_amount'],
            refund_reason=input_serializer.validated_data['refund_reason']
        )

        return Response(PaymentSerializer(payment).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Get payment statistics.

        GET /api/payments/stats/
        """
        return Response(get_payment_statistics())

    @action(detail=False, methods=['get'], url_path=r'user/(?P<user_id>[^/.]+)')
    def user_payments(self, request, user_id=None):
        """
        Get payments of one user, newest first.

        GET /api/payments/user/{user_id}/
        """
        queryset = get_user_payments(user_id)

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = PaymentSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        return Response(PaymentSerializer(queryset, many=True).data)


@api_view(['GET'])
def currency_list(request):
    """
    List supported currencies.

    GET /api/payments/currencies/
    """
    currencies = [dict(info) for info in get_all_currencies().values()]
    return Response({
        'base_currency': BASE_CURRENCY,
        'count': len(currencies),
        'currencies': currencies,
    })


@api_view(['GET'])
def currency_convert(request):
    """
    Convert an amount between currencies.

    GET /api/payments/currencies/convert/?amount=100&from=USD&to=EUR
    """
    params = request.query_params
    data = {'amount': params.get('amount')}
    if 'from' in params:
        data['from_currency'] = params['from']
    if 'to' in params:
        data['to_currency'] = params['to']

    input_serializer = CurrencyConvertInputSerializer(data=data)
    input_serializer.is_valid(raise_exception=True)
    validated = input_serializer.validated_data

    converted = convert_currency(
        validated['amount'],
        validated['from_currency'],
        validated['to_currency']
    )

    return Response({
        'amount': validated['amount'],
        'from': validated['from_currency'],
        'to': validated['to_currency'],
        'convertedAmount': converted,
        'formatted': format_currency_amount(converted, validated['to_currency']),
    })
