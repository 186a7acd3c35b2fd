"""
🚀 ENTERPRISE BOOKING LIFECYCLE
Creation, supplier decisions, payment, completion with settlement,
cancellation with refund, and the scheduled maintenance jobs.

Every status change goes through ``Reservation.objects.transition`` so
concurrent requests (double clicks on email links, webhook redelivery)
can never apply the same change twice.
"""

import logging
from datetime import date, time, timedelta

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from core.exceptions import (
    CancellationWindowClosed,
    InvalidTransition,
    NoConnectedAccount,
    TransferFailed,
)
from core.utils import sanitize_guest_email, sanitize_guest_text
from apps.experiences.models import Distribution, Experience, ExperienceSession
from apps.experiences.pricing import calculate_price, price_matches
from apps.partners.models import HotelConfig
from payment_processor.services import StripePaymentService
from payment_processor.settlement import refund, settle
from payment_processor.split import split_for
from .models import CANCELLABLE_STATUSES, Reservation, ReservationStatus
from . import notifications

logger = logging.getLogger(__name__)

MAX_PROPOSED_TIMES = 3


def _get_reservation(reservation_id):
    try:
        return Reservation.objects.select_related(
            'experience', 'experience__partner', 'session', 'hotel', 'hotel_config'
        ).get(id=reservation_id)
    except (Reservation.DoesNotExist, DjangoValidationError):
        raise NotFound('Reservation not found.')


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def create_reservation(*, hotel_slug, experience_id, participants, total_cents, guest_name, guest_email,
                       guest_phone='', session_id=None, requested_date=None, requested_time=None,
                       payment_service=None):
    """
    Create a reservation from the booking widget.

    With a ``session_id`` the spots are held and the guest goes straight to
    payment (status ``confirmed``). Without one the booking is a request
    (status ``pending``) that the supplier must answer before the response
    deadline.
    """
    hotel_config = HotelConfig.objects.select_related('partner').filter(slug=hotel_slug, is_active=True).first()
    if hotel_config is None:
        raise NotFound('Hotel not found.')

    experience = Experience.objects.select_related('partner').filter(id=experience_id, status='active').first()
    if experience is None or not Distribution.objects.filter(
        hotel=hotel_config.partner, experience=experience, is_active=True
    ).exists():
        raise NotFound('Experience not found.')

    if participants < experience.min_participants or participants > experience.max_participants:
        raise ValidationError({
            'participants': [
                f"Participants must be between {experience.min_participants} and {experience.max_participants}."
            ]
        })

    name = sanitize_guest_text(guest_name)
    phone = sanitize_guest_text(guest_phone)
    if not name:
        raise ValidationError({'guest_name': ['This field may not be blank.']})
    try:
        email = sanitize_guest_email(guest_email)
    except DjangoValidationError:
        raise ValidationError({'guest_email': ['Enter a valid email address.']})

    common = {
        'experience': experience,
        'hotel': hotel_config.partner,
        'hotel_config': hotel_config,
        'guest_name': name,
        'guest_email': email,
        'guest_phone': phone,
        'participants': participants,
        'currency': experience.currency,
    }

    if session_id:
        return _create_session_booking(experience, session_id, total_cents, common, payment_service)
    return _create_request(experience, total_cents, requested_date, requested_time, common)


def _create_session_booking(experience, session_id, total_cents, common, payment_service):
    now = timezone.now()
    with transaction.atomic():
        session = (
            ExperienceSession.objects.select_for_update()
            .filter(id=session_id, experience=experience)
            .first()
        )
        if session is None:
            raise NotFound('Session not found.')
        if session.status != 'available' or session.spots_available < common['participants']:
            raise ValidationError({'session_id': ['Not enough spots available.']})

        calculation = calculate_price(experience, common['participants'], session)
        if not price_matches(total_cents, calculation):
            raise ValidationError({'total_cents': ['Price mismatch. Please refresh and try again.']})

        remaining = session.spots_available - common['participants']
        session.spots_available = remaining
        session.status = 'full' if remaining == 0 else 'available'
        session.save(update_fields=['spots_available', 'status', 'updated_at'])

        reservation = Reservation.objects.create(
            session=session,
            total_cents=calculation.total_price,
            is_request=False,
            status=ReservationStatus.CONFIRMED,
            confirmed_at=now,
            payment_deadline=now + timedelta(hours=settings.RESERVATION_PAYMENT_HOURS),
            **common
        )

        link = (payment_service or StripePaymentService()).create_payment_link(reservation)
        reservation.stripe_payment_link_id = link['id']
        reservation.stripe_payment_link_url = link['url']
        reservation.save(update_fields=['stripe_payment_link_id', 'stripe_payment_link_url', 'updated_at'])

    logger.info(
        f"🎟️ [RESERVATION] Session booking {reservation.id} created: {reservation.participants} pax "
        f"on session {session.id}, {reservation.total_cents} {reservation.currency}"
    )
    return reservation


def _create_request(experience, total_cents, requested_date, requested_time, common):
    if requested_date is None:
        raise ValidationError({'requested_date': ['A date is required when no session is selected.']})
    if requested_date < timezone.localdate():
        raise ValidationError({'requested_date': ['The requested date is in the past.']})

    calculation = calculate_price(experience, common['participants'])
    if not price_matches(total_cents, calculation):
        raise ValidationError({'total_cents': ['Price mismatch. Please refresh and try again.']})

    reservation = Reservation.objects.create(
        total_cents=calculation.total_price,
        is_request=True,
        requested_date=requested_date,
        requested_time=requested_time,
        status=ReservationStatus.PENDING,
        response_deadline=timezone.now() + timedelta(hours=settings.RESERVATION_RESPONSE_HOURS),
        **common
    )
    logger.info(f"📝 [RESERVATION] Request {reservation.id} created for {requested_date} {requested_time or ''}")

    notifications.queue(notifications.GUEST_REQUEST_RECEIVED, reservation.id)
    notifications.queue(notifications.SUPPLIER_NEW_REQUEST, reservation.id)
    return reservation


# ---------------------------------------------------------------------------
# Supplier decisions
# ---------------------------------------------------------------------------

def accept_reservation(reservation_id, payment_service=None):
    """
    Accept a pending request: ``pending -> confirmed``.

    Requests with a date and time get a private session; the guest gets a
    payment link valid for the payment window.
    """
    reservation = _get_reservation(reservation_id)
    if reservation.status != ReservationStatus.PENDING:
        raise InvalidTransition(f"This booking has already been {reservation.get_status_display().lower()}.")

    supplier = reservation.supplier
    if not supplier.stripe_onboarding_complete:
        raise NoConnectedAccount('Complete Stripe onboarding before accepting bookings.')

    if reservation.is_request and not reservation.session_id and not reservation.requested_time:
        raise ValidationError(
            'This request has no specific time. Please propose the times that work for you.'
        )

    now = timezone.now()
    with transaction.atomic():
        fields = {}
        if reservation.is_request and not reservation.session_id:
            session = ExperienceSession.objects.create(
                experience=reservation.experience,
                session_date=reservation.requested_date,
                start_time=reservation.requested_time,
                spots_total=reservation.experience.max_participants,
                spots_available=0,
                status='booked',
            )
            fields['session'] = session
            logger.info(f"📅 [RESERVATION] Private session {session.id} created for {reservation.id}")

        link = (payment_service or StripePaymentService()).create_payment_link(reservation)
        reservation = Reservation.objects.transition(
            reservation.id,
            ReservationStatus.PENDING,
            ReservationStatus.CONFIRMED,
            confirmed_at=now,
            payment_deadline=now + timedelta(hours=settings.RESERVATION_PAYMENT_HOURS),
            stripe_payment_link_id=link['id'],
            stripe_payment_link_url=link['url'],
            **fields
        )

    notifications.queue(notifications.GUEST_PAYMENT_LINK, reservation.id)
    return reservation


def decline_reservation(reservation_id, reason=''):
    """Decline a pending request: ``pending -> declined``."""
    reservation = Reservation.objects.transition(
        reservation_id,
        ReservationStatus.PENDING,
        ReservationStatus.DECLINED,
        declined_at=timezone.now(),
        decline_reason=sanitize_guest_text(reason, max_length=1000),
    )
    notifications.queue(notifications.GUEST_DECLINED, reservation.id)
    return reservation


def propose_times(reservation_id, times):
    """
    Offer the guest other times for a request: ``pending -> proposed``.

    ``times`` is a list of ``{'date': date, 'time': time}`` slots. The
    guest has the response window to pick one.
    """
    if not 1 <= len(times) <= MAX_PROPOSED_TIMES:
        raise ValidationError({'times': [f"Propose between 1 and {MAX_PROPOSED_TIMES} times."]})
    today = timezone.localdate()
    if any(slot['date'] < today for slot in times):
        raise ValidationError({'times': ['Proposed dates cannot be in the past.']})

    reservation = Reservation.objects.transition(
        reservation_id,
        ReservationStatus.PENDING,
        ReservationStatus.PROPOSED,
        proposed_times=[
            {'date': slot['date'].isoformat(), 'time': slot['time'].strftime('%H:%M')} for slot in times
        ],
        response_deadline=timezone.now() + timedelta(hours=settings.RESERVATION_RESPONSE_HOURS),
    )
    logger.info(f"🗓️ [RESERVATION] {len(times)} alternative times proposed for {reservation.id}")
    notifications.queue(notifications.GUEST_TIME_PROPOSED, reservation.id)
    return reservation


def accept_proposed_time(reservation_id, slot, payment_service=None):
    """
    The guest picks proposed slot number ``slot``: ``proposed -> confirmed``.

    An existing session at that time holds the spots, otherwise a private
    session is created. The guest gets a payment link like any accepted
    request.
    """
    reservation = _get_reservation(reservation_id)
    if reservation.status != ReservationStatus.PROPOSED:
        raise InvalidTransition(f"This booking has already been {reservation.get_status_display().lower()}.")

    proposed = reservation.proposed_times or []
    if not isinstance(slot, int) or not 0 <= slot < len(proposed):
        raise ValidationError({'slot': ['Invalid time slot selected.']})
    chosen_date = date.fromisoformat(proposed[slot]['date'])
    chosen_time = time.fromisoformat(proposed[slot]['time'])

    if not reservation.supplier.stripe_onboarding_complete:
        raise NoConnectedAccount('The supplier has not completed payment setup. Please contact support.')

    now = timezone.now()
    with transaction.atomic():
        fields = {}
        session = (
            ExperienceSession.objects.select_for_update()
            .filter(experience=reservation.experience, session_date=chosen_date, start_time=chosen_time)
            .exclude(status='cancelled')
            .first()
        )
        if session is not None:
            if session.status != 'available' or session.spots_available < reservation.participants:
                raise ValidationError({'slot': ['Not enough spots available for this time slot.']})
            remaining = session.spots_available - reservation.participants
            session.spots_available = remaining
            session.status = 'full' if remaining == 0 else 'available'
            session.save(update_fields=['spots_available', 'status', 'updated_at'])
            # Spots on a shared session are held like a session booking.
            fields['is_request'] = False
        else:
            session = ExperienceSession.objects.create(
                experience=reservation.experience,
                session_date=chosen_date,
                start_time=chosen_time,
                spots_total=reservation.experience.max_participants,
                spots_available=0,
                status='booked',
            )
            logger.info(f"📅 [RESERVATION] Private session {session.id} created for {reservation.id}")

        link = (payment_service or StripePaymentService()).create_payment_link(reservation)
        reservation = Reservation.objects.transition(
            reservation.id,
            ReservationStatus.PROPOSED,
            ReservationStatus.CONFIRMED,
            session=session,
            requested_date=chosen_date,
            requested_time=chosen_time,
            confirmed_at=now,
            payment_deadline=now + timedelta(hours=settings.RESERVATION_PAYMENT_HOURS),
            stripe_payment_link_id=link['id'],
            stripe_payment_link_url=link['url'],
            **fields
        )

    notifications.queue(notifications.GUEST_PAYMENT_LINK, reservation.id)
    return reservation


def decline_proposed_times(reservation_id):
    """None of the proposed times suit the guest: ``proposed -> declined``."""
    reservation = Reservation.objects.transition(
        reservation_id,
        ReservationStatus.PROPOSED,
        ReservationStatus.DECLINED,
        declined_at=timezone.now(),
    )
    notifications.queue(notifications.SUPPLIER_PROPOSAL_DECLINED, reservation.id)
    return reservation


# ---------------------------------------------------------------------------
# Payment, completion, cancellation
# ---------------------------------------------------------------------------

def record_payment(reservation_id, payment_intent_id, charge_id=''):
    """
    Record a successful guest payment: ``confirmed -> pending_payment``.

    Stripe delivers webhooks at least once; a repeated delivery for the
    same payment intent returns the reservation unchanged.
    """
    reservation = _get_reservation(reservation_id)
    if (reservation.status == ReservationStatus.PENDING_PAYMENT
            and reservation.stripe_payment_intent_id == payment_intent_id):
        logger.info(f"🔁 [RESERVATION] Payment {payment_intent_id} already recorded for {reservation.id}")
        return reservation

    split = split_for(reservation)
    reservation = Reservation.objects.transition(
        reservation.id,
        ReservationStatus.CONFIRMED,
        ReservationStatus.PENDING_PAYMENT,
        stripe_payment_intent_id=payment_intent_id,
        stripe_charge_id=charge_id or '',
        paid_at=timezone.now(),
        **split.as_fields()
    )
    logger.info(
        f"💳 [RESERVATION] Payment recorded for {reservation.id}: supplier {split.supplier_cents}, "
        f"hotel {split.hotel_cents}, platform {split.platform_cents}"
    )
    notifications.queue(notifications.GUEST_PAYMENT_CONFIRMED, reservation.id)
    notifications.queue(notifications.SUPPLIER_BOOKING_PAID, reservation.id)
    return reservation


def complete_reservation(reservation_id, payment_service=None):
    """
    Complete a paid booking and pay the supplier.

    Only a successful transfer moves the booking to ``completed``. The
    transfer runs outside any transaction so its audit row survives a
    failure; its idempotency key makes a concurrent second attempt return
    the same transfer and the status compare-and-swap lets only one of
    them complete the booking. When the supplier has no connected account
    or Stripe rejects the transfer the status stays ``pending_payment``,
    the failure is recorded and the error re-raised.
    """
    reservation = _get_reservation(reservation_id)
    if reservation.status != ReservationStatus.PENDING_PAYMENT:
        raise InvalidTransition(
            'This booking has already been marked as completed.'
            if reservation.status == ReservationStatus.COMPLETED
            else f"This booking cannot be completed (status: {reservation.status})."
        )

    try:
        result = settle(reservation, service=payment_service)
    except (NoConnectedAccount, TransferFailed) as e:
        Reservation.objects.filter(id=reservation.id, status=ReservationStatus.PENDING_PAYMENT).update(
            settlement_error=f"{e.default_code}: {e.detail}",
            settlement_attempts=F('settlement_attempts') + 1,
            updated_at=timezone.now(),
        )
        logger.error(f"❌ [SETTLEMENT] Reservation {reservation.id} stays pending_payment: {e.detail}")
        raise

    reservation = Reservation.objects.transition(
        reservation.id,
        ReservationStatus.PENDING_PAYMENT,
        ReservationStatus.COMPLETED,
        stripe_transfer_id=result.transfer_id,
        completed_at=timezone.now(),
        settlement_error='',
        settlement_attempts=F('settlement_attempts') + 1,
        **result.split.as_fields()
    )

    logger.info(f"✅ [SETTLEMENT] Reservation {reservation.id} completed ({reservation.stripe_transfer_id})")
    notifications.queue(notifications.SUPPLIER_PAYOUT_SENT, reservation.id)
    return reservation


def cancel_reservation(reservation_id, payment_service=None):
    """
    Cancel a non-terminal reservation on the guest's request.

    Refunds the full charge when the guest has paid and gives the session
    spots back. Rejected once the experience is closer than the
    cancellation window.
    """
    reservation = _cancel(reservation_id, CANCELLABLE_STATUSES, payment_service, enforce_window=True)
    notifications.queue(notifications.GUEST_CANCELLED, reservation.id)
    notifications.queue(notifications.SUPPLIER_CANCELLED, reservation.id)
    return reservation


def report_no_experience(reservation_id, payment_service=None):
    """
    The supplier reports that a paid experience did not take place.

    The guest is refunded in full whatever the date, the booking is
    cancelled and its spots are released.
    """
    reservation = _cancel(
        reservation_id, (ReservationStatus.PENDING_PAYMENT,), payment_service, enforce_window=False
    )
    notifications.queue(notifications.GUEST_NO_EXPERIENCE_REFUND, reservation.id)
    return reservation


def _cancel(reservation_id, from_statuses, payment_service, enforce_window):
    """
    Refund or stop the payment link, then cancel and release spots.

    Stripe is called outside any transaction so its audit rows survive a
    failure; the refund idempotency key makes a repeated attempt safe.
    """
    now = timezone.now()
    reservation = _get_reservation(reservation_id)
    if reservation.status not in from_statuses:
        raise InvalidTransition(_status_message(reservation))

    start = reservation.experience_start
    if enforce_window and start is not None:
        if start - now < timedelta(days=settings.CANCELLATION_WINDOW_DAYS):
            raise CancellationWindowClosed(
                f"Cancellation is only possible up to {settings.CANCELLATION_WINDOW_DAYS} days "
                f"before the experience."
            )

    service = payment_service or StripePaymentService()
    fields = {'cancelled_at': now}
    if reservation.status == ReservationStatus.PENDING_PAYMENT:
        refund_id = refund(reservation, service=service)
        if refund_id:
            fields['stripe_refund_id'] = refund_id
    elif reservation.status == ReservationStatus.CONFIRMED:
        service.deactivate_payment_link(reservation)

    with transaction.atomic():
        reservation = Reservation.objects.transition(
            reservation.id, reservation.status, ReservationStatus.CANCELLED, **fields
        )
        _release_spots(reservation)

    logger.info(f"🚫 [RESERVATION] {reservation.id} cancelled (refund: {reservation.stripe_refund_id or 'none'})")
    return reservation


def _status_message(reservation):
    if reservation.is_terminal:
        return f"This booking has already been {reservation.get_status_display().lower()}."
    return 'This booking has not been paid yet.'


def _release_spots(reservation):
    """Give held spots back to a shared session; private sessions are cancelled."""
    if not reservation.session_id:
        return
    session = ExperienceSession.objects.select_for_update().get(id=reservation.session_id)
    if session.status == 'booked':
        session.status = 'cancelled'
        session.save(update_fields=['status', 'updated_at'])
        return
    if reservation.is_request:
        return
    session.spots_available = min(session.spots_total, session.spots_available + reservation.participants)
    if session.status == 'full' and session.spots_available > 0:
        session.status = 'available'
    session.save(update_fields=['spots_available', 'status', 'updated_at'])


# ---------------------------------------------------------------------------
# Scheduled jobs
# ---------------------------------------------------------------------------

def expire_pending(now=None):
    """Expire requests and proposals left unanswered in time. Returns the count."""
    now = now or timezone.now()
    awaiting = (ReservationStatus.PENDING, ReservationStatus.PROPOSED)
    expired = 0
    for reservation_id in Reservation.objects.filter(
        status__in=awaiting, response_deadline__lt=now
    ).values_list('id', flat=True):
        try:
            Reservation.objects.transition(reservation_id, awaiting, ReservationStatus.EXPIRED)
        except InvalidTransition:
            continue
        expired += 1
        notifications.queue(notifications.GUEST_EXPIRED, reservation_id)

    logger.info(f"⏰ [RESERVATION] Expired {expired} unanswered requests")
    return expired


def expire_unpaid(now=None, payment_service=None):
    """Expire accepted bookings whose payment deadline passed and free their spots."""
    now = now or timezone.now()
    service = payment_service or StripePaymentService()
    expired = 0
    for reservation_id in Reservation.objects.filter(
        status=ReservationStatus.CONFIRMED, payment_deadline__lt=now
    ).values_list('id', flat=True):
        try:
            with transaction.atomic():
                reservation = Reservation.objects.transition(
                    reservation_id, ReservationStatus.CONFIRMED, ReservationStatus.EXPIRED
                )
                _release_spots(reservation)
        except InvalidTransition:
            continue
        service.deactivate_payment_link(reservation)
        expired += 1
        notifications.queue(notifications.GUEST_EXPIRED, reservation_id)

    logger.info(f"⏰ [RESERVATION] Expired {expired} unpaid bookings")
    return expired


def auto_complete(now=None, payment_service=None):
    """
    Complete paid bookings whose experience is long enough in the past.

    Settlement failures are recorded on the reservation and retried on the
    next run.
    """
    now = now or timezone.now()
    cutoff = (now - timedelta(days=settings.AUTO_COMPLETE_AFTER_DAYS)).date()
    candidates = Reservation.objects.filter(status=ReservationStatus.PENDING_PAYMENT).filter(
        Q(session__session_date__lte=cutoff) | Q(session__isnull=True, requested_date__lte=cutoff)
    )

    summary = {'completed': 0, 'failed': 0}
    for reservation_id in candidates.values_list('id', flat=True).distinct():
        try:
            complete_reservation(reservation_id, payment_service=payment_service)
        except (NoConnectedAccount, TransferFailed):
            summary['failed'] += 1
        except InvalidTransition:
            continue
        else:
            summary['completed'] += 1

    logger.info(f"🤖 [SETTLEMENT] Auto-complete: {summary['completed']} completed, {summary['failed']} failed")
    return summary


def completion_check(now=None):
    """
    Ask suppliers whether yesterday's paid experiences took place.

    Each booking gets the email once, with a link to complete it and a
    link to report that the experience did not happen.
    """
    now = now or timezone.now()
    yesterday = timezone.localdate(now) - timedelta(days=1)
    candidates = Reservation.objects.filter(
        status=ReservationStatus.PENDING_PAYMENT, completion_check_sent_at__isnull=True
    ).filter(
        Q(session__session_date__lte=yesterday) | Q(session__isnull=True, requested_date__lte=yesterday)
    )

    sent = 0
    for reservation_id in candidates.values_list('id', flat=True).distinct():
        claimed = Reservation.objects.filter(
            id=reservation_id, completion_check_sent_at__isnull=True
        ).update(completion_check_sent_at=now)
        if not claimed:
            continue
        notifications.queue(notifications.SUPPLIER_COMPLETION_CHECK, reservation_id)
        sent += 1

    logger.info(f"📬 [SETTLEMENT] Sent {sent} completion check emails")
    return sent
