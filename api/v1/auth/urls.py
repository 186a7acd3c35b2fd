"""URL Configuration for authentication API."""

from django.urls import path
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from .views import VerifyRecaptchaView

urlpatterns = [
    # JWT endpoints for the partner dashboard
    path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    path('verify-recaptcha/', VerifyRecaptchaView.as_view(), name='verify_recaptcha'),
]
