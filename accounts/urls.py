from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import AdminLoginView, LogoutView, SessionView

app_name = 'accounts'

urlpatterns = [
    # Authentication endpoints
    path('login/', AdminLoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('session/', SessionView.as_view(), name='session'),
]
