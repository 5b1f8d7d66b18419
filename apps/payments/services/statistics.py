"""Statistics service - payment counts and completed totals."""

from django.db.models import Count, Sum

from apps.payments.models import Payment, PaymentStatus


def get_payment_statistics() -> dict:
    """
    Aggregate payments across the whole store.

    Returns:
        Dictionary with statistics:
        - totalCount: int - Number of payments
        - byStatus: list - ``{status, count}`` per status present
        - byMethod: list - ``{paymentMethod, count}`` per method present
        - totalAmount: list - ``{currency, totalAmount}`` summed over
          completed payments only

    Example:
        >>> stats = get_payment_statistics()
        >>> stats['byStatus']
        [{'status': 'completed', 'count': 3}, {'status': 'pending', 'count': 1}]
    """
    queryset = Payment.objects.order_by()

    by_status = [
        {'status': row['status'], 'count': row['count']}
        for row in queryset.values('status').annotate(count=Count('id')).order_by('status')
    ]

    by_method = [
        {'paymentMethod': row['payment_method'], 'count': row['count']}
        for row in queryset.values('payment_method').annotate(count=Count('id')).order_by('payment_method')
    ]

    # Only money that actually changed hands counts towards totals
    total_amount = [
        {'currency': row['currency'], 'totalAmount': row['total']}
        for row in queryset.filter(status=PaymentStatus.COMPLETED)
        .values('currency')
        .annotate(total=Sum('amount'))
        .order_by('currency')
    ]

    return {
        'totalCount': queryset.count(),
        'byStatus': by_status,
        'byMethod': by_method,
        'totalAmount': total_amount,
    }
