from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'payments'

router = SimpleRouter()
router.register(r'', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # Payment ViewSet routes
    # GET    /api/payments/                  - List payments
    # POST   /api/payments/                  - Create payment
    # GET    /api/payments/stats/            - Payment statistics
    # GET    /api/payments/user/{user_id}/   - Payments of a user
    # GET    /api/payments/{id}/             - Get payment details
    # GET    /api/payments/{id}/receipt/     - Get receipt
    # PATCH  /api/payments/{id}/status/      - Update status
    # POST   /api/payments/{id}/refund/      - Refund payment

    # Currency endpoints must come before the router's detail route
    path('currencies/', views.currency_list, name='currency-list'),
    path('currencies/convert/', views.currency_convert, name='currency-convert'),

    path('', include(router.urls)),
]
