"""Stripe webhook receiver."""

import json
import logging

import stripe
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from payment_processor.services import StripePaymentService
from payment_processor.webhooks import process_event

logger = logging.getLogger(__name__)


class StripeWebhookView(APIView):
    """
    POST /api/v1/webhooks/stripe/

    The raw body is verified against the ``Stripe-Signature`` header
    before anything is parsed.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        signature = request.META.get('HTTP_STRIPE_SIGNATURE')
        if not signature:
            logger.warning("🔒 [WEBHOOK] Request without Stripe-Signature header")
            return Response({'error': 'missing_signature', 'message': 'Missing signature.'},
                            status=status.HTTP_400_BAD_REQUEST)

        payload = request.body
        service = StripePaymentService()
        try:
            event = service.construct_webhook_event(payload, signature)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"🔒 [WEBHOOK] Signature verification failed: {e}")
            return Response({'error': 'invalid_signature', 'message': 'Invalid signature.'},
                            status=status.HTTP_400_BAD_REQUEST)

        webhook = process_event(event, payload=json.loads(payload), service=service)
        return Response({'received': True, 'status': webhook.status})
