"""
Reservation emails.

``queue`` schedules a ``send_reservation_email`` task once the current
transaction commits; the task renders the plain-text template of the
email kind and sends it. Action links carry signed tokens.
"""

import logging
from datetime import date, time

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.template.loader import render_to_string

from core.tokens import (
    generate_accept_proposed_token,
    generate_accept_token,
    generate_cancel_token,
    generate_complete_token,
    generate_decline_proposed_token,
    generate_decline_token,
    generate_no_experience_token,
)
from core.utils import format_cents

logger = logging.getLogger(__name__)

GUEST_REQUEST_RECEIVED = 'guest_request_received'
SUPPLIER_NEW_REQUEST = 'supplier_new_request'
GUEST_PAYMENT_LINK = 'guest_payment_link'
GUEST_DECLINED = 'guest_declined'
GUEST_PAYMENT_CONFIRMED = 'guest_payment_confirmed'
SUPPLIER_BOOKING_PAID = 'supplier_booking_paid'
SUPPLIER_PAYOUT_SENT = 'supplier_payout_sent'
GUEST_CANCELLED = 'guest_cancelled'
SUPPLIER_CANCELLED = 'supplier_cancelled'
GUEST_EXPIRED = 'guest_expired'
GUEST_PAYMENT_FAILED = 'guest_payment_failed'
GUEST_TIME_PROPOSED = 'guest_time_proposed'
SUPPLIER_PROPOSAL_DECLINED = 'supplier_proposal_declined'
SUPPLIER_COMPLETION_CHECK = 'supplier_completion_check'
GUEST_NO_EXPERIENCE_REFUND = 'guest_no_experience_refund'

SUBJECTS = {
    GUEST_REQUEST_RECEIVED: 'Booking request received - {title}',
    SUPPLIER_NEW_REQUEST: 'New booking request - {title}',
    GUEST_PAYMENT_LINK: 'Your booking is confirmed! Complete payment - {title}',
    GUEST_DECLINED: 'Booking request update - {title}',
    GUEST_PAYMENT_CONFIRMED: 'Payment received - {title}',
    SUPPLIER_BOOKING_PAID: 'New paid booking - {title}',
    SUPPLIER_PAYOUT_SENT: 'Payout sent - {title}',
    GUEST_CANCELLED: 'Booking cancelled - {title}',
    SUPPLIER_CANCELLED: 'Booking cancelled - {title}',
    GUEST_EXPIRED: 'Booking expired - {title}',
    GUEST_PAYMENT_FAILED: 'Payment failed - {title}',
    GUEST_TIME_PROPOSED: 'New time proposed - {title}',
    SUPPLIER_PROPOSAL_DECLINED: 'Proposed times declined - {title}',
    SUPPLIER_COMPLETION_CHECK: 'Did the experience happen? - {title}',
    GUEST_NO_EXPERIENCE_REFUND: 'Refund processed - {title}',
}

SUPPLIER_KINDS = {
    SUPPLIER_NEW_REQUEST,
    SUPPLIER_BOOKING_PAID,
    SUPPLIER_PAYOUT_SENT,
    SUPPLIER_CANCELLED,
    SUPPLIER_PROPOSAL_DECLINED,
    SUPPLIER_COMPLETION_CHECK,
}


def action_url(path, token):
    return f"{settings.APP_URL}/api/v1/{path}?token={token}"


def queue(kind, reservation_id):
    """Send ``kind`` for the reservation after the transaction commits."""
    from .tasks import send_reservation_email

    transaction.on_commit(
        lambda: send_reservation_email.apply_async(args=[kind, str(reservation_id)], queue='emails')
    )


def build_context(kind, reservation):
    experience = reservation.experience
    context = {
        'reservation': reservation,
        'experience': experience,
        'hotel_name': reservation.hotel_config.display_name if reservation.hotel_config else reservation.hotel.name,
        'date': reservation.experience_date,
        'time': reservation.experience_time,
        'total': format_cents(reservation.total_cents, reservation.currency),
        'app_url': settings.APP_URL,
    }

    if kind == SUPPLIER_NEW_REQUEST:
        context['accept_url'] = action_url(
            f"reservations/{reservation.id}/accept/", generate_accept_token(reservation.id)
        )
        context['decline_url'] = action_url(
            f"reservations/{reservation.id}/decline/", generate_decline_token(reservation.id)
        )
    elif kind == SUPPLIER_BOOKING_PAID:
        if reservation.supplier_amount_cents is not None:
            context['supplier_amount'] = format_cents(reservation.supplier_amount_cents, reservation.currency)
    elif kind == SUPPLIER_COMPLETION_CHECK:
        context['complete_url'] = action_url(
            f"bookings/{reservation.id}/complete/", generate_complete_token(reservation.id)
        )
        context['no_experience_url'] = action_url(
            f"bookings/{reservation.id}/no-experience/", generate_no_experience_token(reservation.id)
        )
        if reservation.supplier_amount_cents is not None:
            context['supplier_amount'] = format_cents(reservation.supplier_amount_cents, reservation.currency)
    elif kind == GUEST_TIME_PROPOSED:
        accept_url = action_url(
            f"reservations/{reservation.id}/accept-proposed/", generate_accept_proposed_token(reservation.id)
        )
        context['proposed_slots'] = [
            {
                'date': date.fromisoformat(slot['date']),
                'time': time.fromisoformat(slot['time']),
                'accept_url': f"{accept_url}&slot={index}",
            }
            for index, slot in enumerate(reservation.proposed_times or [])
        ]
        context['decline_proposed_url'] = action_url(
            f"reservations/{reservation.id}/decline-proposed/", generate_decline_proposed_token(reservation.id)
        )
    elif kind == GUEST_PAYMENT_CONFIRMED and reservation.experience_start is not None:
        context['cancel_url'] = action_url(
            f"bookings/{reservation.id}/cancel/",
            generate_cancel_token(reservation.id, reservation.experience_start),
        )
        context['cancellation_days'] = settings.CANCELLATION_WINDOW_DAYS
    elif kind == SUPPLIER_PAYOUT_SENT and reservation.supplier_amount_cents is not None:
        context['supplier_amount'] = format_cents(reservation.supplier_amount_cents, reservation.currency)

    return context


def recipient_for(kind, reservation):
    if kind in SUPPLIER_KINDS:
        return reservation.experience.partner.email
    return reservation.guest_email


def send_reservation_notification(kind, reservation):
    """Render and send one email. Returns the number of messages sent."""
    if kind not in SUBJECTS:
        raise ValueError(f"Unknown reservation email: {kind}")

    to_email = recipient_for(kind, reservation)
    if not to_email:
        logger.warning(f"⚠️ [EMAIL] No recipient for {kind} of reservation {reservation.id}")
        return 0

    subject = SUBJECTS[kind].format(title=reservation.experience.title)
    body = render_to_string(f"reservations/emails/{kind}.txt", build_context(kind, reservation))
    sent = send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [to_email], fail_silently=False)
    logger.info(f"📧 [EMAIL] {kind} sent to {to_email} for reservation {reservation.id}")
    return sent
