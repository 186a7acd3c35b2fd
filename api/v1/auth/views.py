"""Authentication helpers for the partner dashboard signup."""

import logging

from rest_framework import serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.throttling import get_client_ip
from core.recaptcha import RecaptchaUnavailable, verify_recaptcha

logger = logging.getLogger(__name__)


class RecaptchaSerializer(serializers.Serializer):
    token = serializers.CharField()


class VerifyRecaptchaView(APIView):
    """POST /api/v1/auth/verify-recaptcha/"""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RecaptchaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        client_ip = get_client_ip(request)
        try:
            result = verify_recaptcha(
                serializer.validated_data['token'],
                remote_ip=None if client_ip == 'anonymous' else client_ip,
            )
        except RecaptchaUnavailable:
            return Response(
                {'success': False, 'error': 'Verification request failed'},
                status=status.HTTP_502_BAD_GATEWAY
            )

        if not result.success:
            body = {'success': False, 'error': result.error}
            if result.score is not None:
                body['score'] = result.score
            if result.error_codes:
                body['error_codes'] = result.error_codes
            return Response(body, status=status.HTTP_400_BAD_REQUEST)

        body = {'success': True}
        if result.score is not None:
            body['score'] = result.score
        return Response(body)
