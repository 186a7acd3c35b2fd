"""
Stripe webhook event handling.

Events are stored as ``PaymentWebhook`` rows keyed by the Stripe event id;
a redelivered event that was already processed is acknowledged without
being handled again.
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import APIException

from .models import PaymentWebhook
from .services import StripePaymentService

logger = logging.getLogger(__name__)


def _reservation_id_from_metadata(obj):
    metadata = obj.get('metadata') or {}
    return metadata.get('reservation_id')


def handle_payment_intent_succeeded(intent, service):
    from apps.reservations.services import record_payment

    reservation_id = _reservation_id_from_metadata(intent)
    if not reservation_id:
        logger.error(f"❌ [WEBHOOK] Payment intent {intent.get('id')} has no reservation_id metadata")
        return None
    record_payment(reservation_id, intent['id'], intent.get('latest_charge') or '')
    return reservation_id


def handle_checkout_session_completed(session, service):
    from apps.reservations.models import Reservation
    from apps.reservations.services import record_payment

    payment_intent_id = session.get('payment_intent')
    reservation_id = _reservation_id_from_metadata(session)
    intent = None

    if payment_intent_id:
        intent = service.retrieve_payment_intent(payment_intent_id)
        reservation_id = reservation_id or _reservation_id_from_metadata(intent)

    if not reservation_id and session.get('payment_link'):
        reservation_id = (
            Reservation.objects.filter(stripe_payment_link_id=session['payment_link'])
            .values_list('id', flat=True)
            .first()
        )

    if not reservation_id or intent is None:
        logger.error(
            f"❌ [WEBHOOK] Checkout session {session.get('id')} could not be matched "
            f"(payment_intent={payment_intent_id}, payment_link={session.get('payment_link')})"
        )
        return None

    record_payment(reservation_id, payment_intent_id, intent.get('latest_charge') or '')
    return reservation_id


def handle_payment_intent_failed(intent, service):
    from apps.reservations import notifications
    from apps.reservations.models import Reservation

    reservation_id = _reservation_id_from_metadata(intent)
    if not reservation_id or not Reservation.objects.filter(id=reservation_id).exists():
        logger.error(f"❌ [WEBHOOK] Failed payment intent {intent.get('id')} without a known reservation")
        return None

    error = (intent.get('last_payment_error') or {}).get('message') or 'Payment was declined'
    logger.info(f"💳 [WEBHOOK] Payment failed for reservation {reservation_id}: {error}")
    notifications.queue(notifications.GUEST_PAYMENT_FAILED, reservation_id)
    return reservation_id


def handle_charge_refunded(charge, service):
    from apps.reservations.models import Reservation

    reservation = Reservation.objects.filter(stripe_charge_id=charge.get('id')).first()
    if reservation is None and charge.get('payment_intent'):
        reservation = Reservation.objects.filter(stripe_payment_intent_id=charge['payment_intent']).first()
    if reservation is None:
        logger.info(f"💸 [WEBHOOK] Refund for unknown charge {charge.get('id')}")
        return None
    logger.info(f"💸 [WEBHOOK] Charge {charge.get('id')} of reservation {reservation.id} refunded")
    return str(reservation.id)


def handle_account_updated(account, service):
    from apps.partners.models import Partner

    complete = bool(account.get('charges_enabled')) and bool(account.get('payouts_enabled'))
    updated = Partner.objects.filter(stripe_account_id=account.get('id')).update(
        stripe_onboarding_complete=complete, updated_at=timezone.now()
    )
    logger.info(f"🏦 [WEBHOOK] Account {account.get('id')} onboarding complete={complete} ({updated} partners)")
    return None


HANDLERS = {
    'payment_intent.succeeded': handle_payment_intent_succeeded,
    'checkout.session.completed': handle_checkout_session_completed,
    'payment_intent.payment_failed': handle_payment_intent_failed,
    'charge.refunded': handle_charge_refunded,
    'account.updated': handle_account_updated,
}


def process_event(event, payload=None, service=None):
    """
    Handle one verified Stripe event and return the stored ``PaymentWebhook``.

    Booking errors (a payment for a cancelled reservation, say) are recorded
    on the webhook row instead of failing the delivery.
    """
    event_id = event['id']
    event_type = event['type']

    webhook = PaymentWebhook.objects.filter(event_id=event_id).first()
    if webhook is not None and webhook.status in ('processed', 'ignored'):
        logger.info(f"🔁 [WEBHOOK] Event {event_id} already {webhook.status}")
        return webhook
    if webhook is None:
        try:
            with transaction.atomic():
                webhook = PaymentWebhook.objects.create(
                    event_id=event_id, event_type=event_type, payload=payload or {}
                )
        except IntegrityError:
            return PaymentWebhook.objects.get(event_id=event_id)

    handler = HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"📭 [WEBHOOK] Unhandled event type {event_type}")
        webhook.status = 'ignored'
        webhook.processed_at = timezone.now()
        webhook.save(update_fields=['status', 'processed_at', 'updated_at'])
        return webhook

    try:
        reservation_id = handler(event['data']['object'], service or StripePaymentService())
    except APIException as e:
        logger.error(f"❌ [WEBHOOK] {event_type} {event_id} failed: {e.detail}")
        webhook.status = 'failed'
        webhook.error_message = str(e.detail)
        webhook.save(update_fields=['status', 'error_message', 'updated_at'])
        return webhook

    webhook.status = 'processed'
    webhook.processed_at = timezone.now()
    webhook.reservation_id = reservation_id
    webhook.save(update_fields=['status', 'processed_at', 'reservation', 'updated_at'])
    logger.info(f"✅ [WEBHOOK] {event_type} {event_id} processed")
    return webhook
