from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'users'

router = SimpleRouter()
router.register(r'', views.UserViewSet, basename='user')

urlpatterns = [
    # GET    /api/users/          - List users
    # POST   /api/users/          - Create user
    # GET    /api/users/{id}/     - Get user details
    # PUT    /api/users/{id}/     - Update user
    # PATCH  /api/users/{id}/     - Partial update
    # DELETE /api/users/{id}/     - Delete user
    path('', include(router.urls)),
]
