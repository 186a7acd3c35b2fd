"""
🚀 ENTERPRISE PAYMENT SERVICES
Stripe glue for the booking lifecycle: payment links, refunds, supplier
transfers to connected accounts and webhook verification.
"""

import logging
import time
from typing import Any, Dict, Optional

import stripe
from django.conf import settings

from core.exceptions import PaymentProviderError, TransferFailed
from .models import PaymentTransaction

logger = logging.getLogger(__name__)


def log_transaction(reservation, transaction_type: str, request_data: Dict, response_data: Dict,
                    is_successful: bool, error_message: str = "", external_id: str = "",
                    duration_ms: Optional[int] = None) -> PaymentTransaction:
    """Log a Stripe call for audit and debugging"""
    return PaymentTransaction.objects.create(
        reservation=reservation,
        transaction_type=transaction_type,
        external_id=external_id or '',
        request_data=request_data,
        response_data=response_data,
        is_successful=is_successful,
        error_message=error_message,
        duration_ms=duration_ms
    )


class StripePaymentService:
    """
    🚀 ENTERPRISE: Stripe payment service.

    Every call passes the API key explicitly and is logged as a
    ``PaymentTransaction``. Provider errors are logged with their cause and
    raised as ``PaymentProviderError`` (``TransferFailed`` for transfers);
    nothing is retried here.
    """

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or settings.STRIPE_SECRET_KEY
        self.api_version = getattr(settings, 'STRIPE_API_VERSION', None)

    def _options(self, **extra) -> Dict[str, Any]:
        options = {'api_key': self.api_key}
        if self.api_version:
            options['stripe_version'] = self.api_version
        options.update(extra)
        return options

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    def create_payment_link(self, reservation) -> Dict[str, str]:
        """
        Create a one-off Stripe payment link for the reservation total.

        The reservation id travels in the metadata of both the link and the
        resulting payment intent so the webhook can find the booking again.
        """
        metadata = {'reservation_id': str(reservation.id)}
        request_data = {
            'amount': reservation.total_cents,
            'currency': reservation.currency.lower(),
            'participants': reservation.participants,
        }
        start_time = time.time()

        try:
            price = stripe.Price.create(
                unit_amount=reservation.total_cents,
                currency=reservation.currency.lower(),
                product_data={'name': f"{reservation.experience.title} ({reservation.participants} pax)"},
                **self._options()
            )
            link = stripe.PaymentLink.create(
                line_items=[{'price': price.id, 'quantity': 1}],
                metadata=metadata,
                payment_intent_data={'metadata': metadata},
                after_completion={
                    'type': 'redirect',
                    'redirect': {'url': f"{settings.APP_URL}/booking/{reservation.id}/success"},
                },
                **self._options(idempotency_key=f"payment-link-{reservation.id}")
            )
        except stripe.StripeError as e:
            logger.error(f"❌ [STRIPE] Payment link for reservation {reservation.id} failed: {e}")
            log_transaction(
                reservation, 'payment_link', request_data, {}, False,
                error_message=str(e), duration_ms=self._elapsed_ms(start_time)
            )
            raise PaymentProviderError('Could not create the payment link.') from e

        log_transaction(
            reservation, 'payment_link', request_data, {'id': link.id, 'url': link.url}, True,
            external_id=link.id, duration_ms=self._elapsed_ms(start_time)
        )
        logger.info(f"✅ [STRIPE] Payment link {link.id} created for reservation {reservation.id}")
        return {'id': link.id, 'url': link.url}

    def deactivate_payment_link(self, reservation) -> None:
        """Stop a payment link from accepting payments. Failures are logged only."""
        if not reservation.stripe_payment_link_id:
            return
        start_time = time.time()
        try:
            stripe.PaymentLink.modify(reservation.stripe_payment_link_id, active=False, **self._options())
        except stripe.StripeError as e:
            logger.warning(f"⚠️ [STRIPE] Could not deactivate link {reservation.stripe_payment_link_id}: {e}")
            log_transaction(
                reservation, 'deactivate_link', {'id': reservation.stripe_payment_link_id}, {}, False,
                error_message=str(e), duration_ms=self._elapsed_ms(start_time)
            )
            return
        log_transaction(
            reservation, 'deactivate_link', {'id': reservation.stripe_payment_link_id}, {'active': False}, True,
            external_id=reservation.stripe_payment_link_id, duration_ms=self._elapsed_ms(start_time)
        )

    def refund(self, reservation) -> str:
        """Refund the full charge of a reservation and return the refund id."""
        request_data = {
            'payment_intent': reservation.stripe_payment_intent_id,
            'charge': reservation.stripe_charge_id,
        }
        params = (
            {'payment_intent': reservation.stripe_payment_intent_id}
            if reservation.stripe_payment_intent_id
            else {'charge': reservation.stripe_charge_id}
        )
        start_time = time.time()

        try:
            refund = stripe.Refund.create(
                metadata={'reservation_id': str(reservation.id)},
                **params,
                **self._options(idempotency_key=f"refund-{reservation.id}")
            )
        except stripe.StripeError as e:
            logger.error(f"❌ [STRIPE] Refund for reservation {reservation.id} failed: {e}")
            log_transaction(
                reservation, 'refund', request_data, {}, False,
                error_message=str(e), duration_ms=self._elapsed_ms(start_time)
            )
            raise PaymentProviderError('The refund could not be issued.') from e

        log_transaction(
            reservation, 'refund', request_data, {'id': refund.id, 'status': refund.status}, True,
            external_id=refund.id, duration_ms=self._elapsed_ms(start_time)
        )
        logger.info(f"💸 [STRIPE] Refund {refund.id} issued for reservation {reservation.id}")
        return refund.id

    def create_transfer(self, reservation, amount_cents: int, destination: str) -> str:
        """
        Transfer the supplier share to its connected account.

        The idempotency key is derived from the reservation, so retrying a
        settlement never pays the supplier twice.
        """
        request_data = {
            'amount': amount_cents,
            'currency': reservation.currency.lower(),
            'destination': destination,
        }
        params = {
            'amount': amount_cents,
            'currency': reservation.currency.lower(),
            'destination': destination,
            'transfer_group': f"reservation_{reservation.id}",
            'metadata': {'reservation_id': str(reservation.id)},
        }
        if reservation.stripe_charge_id:
            params['source_transaction'] = reservation.stripe_charge_id
        start_time = time.time()

        try:
            transfer = stripe.Transfer.create(
                **params,
                **self._options(idempotency_key=f"settle-{reservation.id}")
            )
        except stripe.StripeError as e:
            logger.error(f"❌ [STRIPE] Transfer for reservation {reservation.id} to {destination} failed: {e}")
            log_transaction(
                reservation, 'transfer', request_data, {}, False,
                error_message=str(e), duration_ms=self._elapsed_ms(start_time)
            )
            raise TransferFailed() from e

        log_transaction(
            reservation, 'transfer', request_data, {'id': transfer.id}, True,
            external_id=transfer.id, duration_ms=self._elapsed_ms(start_time)
        )
        logger.info(f"✅ [STRIPE] Transfer {transfer.id} of {amount_cents} to {destination}")
        return transfer.id

    def retrieve_payment_intent(self, payment_intent_id: str):
        try:
            return stripe.PaymentIntent.retrieve(payment_intent_id, **self._options())
        except stripe.StripeError as e:
            logger.error(f"❌ [STRIPE] Could not retrieve payment intent {payment_intent_id}: {e}")
            raise PaymentProviderError() from e

    def construct_webhook_event(self, payload: bytes, signature_header: str):
        """
        Verify a webhook signature and return the event.

        Raises ``ValueError`` for an unparsable payload and
        ``stripe.SignatureVerificationError`` for a bad signature.
        """
        return stripe.Webhook.construct_event(payload, signature_header, settings.STRIPE_WEBHOOK_SECRET)
