"""
Reservation model and its status lifecycle.

    pending          -> confirmed | proposed | declined | cancelled | expired
    proposed         -> confirmed | declined | cancelled | expired
    confirmed        -> pending_payment | cancelled | expired
    pending_payment  -> completed | cancelled

``proposed`` means the supplier offered other times and the guest has to
pick one. ``confirmed`` means the supplier accepted and the guest has a
payment link; ``pending_payment`` means the guest paid and the supplier
payout is pending until the experience is completed. Terminal statuses
are never left again.
"""

import logging
from datetime import datetime, time

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.exceptions import InvalidTransition
from core.models import BaseModel
from apps.experiences.models import Experience, ExperienceSession
from apps.partners.models import Partner, HotelConfig

logger = logging.getLogger(__name__)


class ReservationStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    PROPOSED = 'proposed', _('Times proposed')
    CONFIRMED = 'confirmed', _('Confirmed')
    DECLINED = 'declined', _('Declined')
    PENDING_PAYMENT = 'pending_payment', _('Pending payment')
    COMPLETED = 'completed', _('Completed')
    CANCELLED = 'cancelled', _('Cancelled')
    EXPIRED = 'expired', _('Expired')


TRANSITIONS = {
    ReservationStatus.PENDING: {
        ReservationStatus.CONFIRMED,
        ReservationStatus.PROPOSED,
        ReservationStatus.DECLINED,
        ReservationStatus.CANCELLED,
        ReservationStatus.EXPIRED,
    },
    ReservationStatus.PROPOSED: {
        ReservationStatus.CONFIRMED,
        ReservationStatus.DECLINED,
        ReservationStatus.CANCELLED,
        ReservationStatus.EXPIRED,
    },
    ReservationStatus.CONFIRMED: {
        ReservationStatus.PENDING_PAYMENT,
        ReservationStatus.CANCELLED,
        ReservationStatus.EXPIRED,
    },
    ReservationStatus.PENDING_PAYMENT: {
        ReservationStatus.COMPLETED,
        ReservationStatus.CANCELLED,
    },
}

TERMINAL_STATUSES = frozenset({
    ReservationStatus.COMPLETED,
    ReservationStatus.DECLINED,
    ReservationStatus.CANCELLED,
    ReservationStatus.EXPIRED,
})

CANCELLABLE_STATUSES = (
    ReservationStatus.PENDING,
    ReservationStatus.PROPOSED,
    ReservationStatus.CONFIRMED,
    ReservationStatus.PENDING_PAYMENT,
)


def can_transition(from_status, to_status):
    return to_status in TRANSITIONS.get(from_status, ())


class ReservationQuerySet(models.QuerySet):

    def pending_queue(self, partner):
        """Unanswered requests of a supplier, most urgent first."""
        return (
            self.filter(experience__partner=partner, status=ReservationStatus.PENDING)
            .select_related('experience', 'session', 'hotel')
            .order_by('response_deadline', 'created_at')
        )

    def transition(self, reservation_id, from_statuses, to_status, **fields):
        """
        Compare-and-swap the status of one reservation.

        Only rows whose current status is in ``from_statuses`` are updated;
        raises ``InvalidTransition`` when nothing matched (wrong status, a
        concurrent request won, or the reservation does not exist).
        """
        if isinstance(from_statuses, str):
            from_statuses = (from_statuses,)
        for source in from_statuses:
            if not can_transition(source, to_status):
                raise ValueError(f"Illegal transition {source} -> {to_status}")

        updated = self.filter(id=reservation_id, status__in=from_statuses).update(
            status=to_status,
            updated_at=timezone.now(),
            **fields
        )
        if updated != 1:
            current = self.filter(id=reservation_id).values_list('status', flat=True).first()
            logger.info(
                f"⚠️ [RESERVATION] Transition to {to_status} rejected for {reservation_id} (current: {current})"
            )
            raise InvalidTransition(_already_processed_message(current))

        logger.info(f"✅ [RESERVATION] {reservation_id} -> {to_status}")
        return self.get(id=reservation_id)


def _already_processed_message(current):
    messages = {
        ReservationStatus.COMPLETED: 'This booking has already been marked as completed.',
        ReservationStatus.CANCELLED: 'This booking has been cancelled.',
        ReservationStatus.DECLINED: 'This booking has already been declined.',
        ReservationStatus.EXPIRED: 'This booking request has expired.',
    }
    if current is None:
        return 'Reservation not found.'
    return messages.get(current, f'This booking has already been processed (status: {current}).')


class Reservation(BaseModel):
    """A guest booking of an experience through a hotel. Amounts are in cents."""

    experience = models.ForeignKey(Experience, on_delete=models.PROTECT, related_name='reservations')
    hotel = models.ForeignKey(Partner, on_delete=models.PROTECT, related_name='hotel_reservations')
    hotel_config = models.ForeignKey(
        HotelConfig, on_delete=models.SET_NULL, null=True, blank=True, related_name='reservations'
    )
    session = models.ForeignKey(
        ExperienceSession, on_delete=models.SET_NULL, null=True, blank=True, related_name='reservations'
    )

    # Guest
    guest_name = models.CharField(_("guest name"), max_length=200)
    guest_email = models.EmailField(_("guest email"), max_length=320)
    guest_phone = models.CharField(_("guest phone"), max_length=200, blank=True)
    participants = models.PositiveIntegerField(_("participants"))
    total_cents = models.PositiveIntegerField(_("total (cents)"))
    currency = models.CharField(_("currency"), max_length=3, default='EUR')

    # Request (no session picked by the guest)
    is_request = models.BooleanField(_("is request"), default=False)
    requested_date = models.DateField(_("requested date"), null=True, blank=True)
    requested_time = models.TimeField(_("requested time"), null=True, blank=True)
    # [{"date": "YYYY-MM-DD", "time": "HH:MM"}] offered by the supplier
    proposed_times = models.JSONField(_("proposed times"), default=list, blank=True)

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=ReservationStatus.choices,
        default=ReservationStatus.PENDING,
        db_index=True
    )
    response_deadline = models.DateTimeField(_("response deadline"), null=True, blank=True, db_index=True)
    payment_deadline = models.DateTimeField(_("payment deadline"), null=True, blank=True)
    decline_reason = models.TextField(_("decline reason"), blank=True)

    # Stripe references
    stripe_payment_link_id = models.CharField(max_length=255, blank=True)
    stripe_payment_link_url = models.URLField(max_length=500, blank=True)
    stripe_payment_intent_id = models.CharField(max_length=255, blank=True)
    stripe_charge_id = models.CharField(max_length=255, blank=True)
    stripe_refund_id = models.CharField(max_length=255, blank=True)
    stripe_transfer_id = models.CharField(max_length=255, blank=True)

    # Revenue split, fixed when the guest pays
    supplier_amount_cents = models.PositiveIntegerField(null=True, blank=True)
    hotel_amount_cents = models.PositiveIntegerField(null=True, blank=True)
    platform_amount_cents = models.PositiveIntegerField(null=True, blank=True)

    # Settlement bookkeeping
    settlement_error = models.TextField(_("last settlement error"), blank=True)
    settlement_attempts = models.PositiveIntegerField(_("settlement attempts"), default=0)

    hotel_payout = models.ForeignKey(
        'payouts.HotelPayout', on_delete=models.SET_NULL, null=True, blank=True, related_name='reservations'
    )

    # Lifecycle timestamps
    confirmed_at = models.DateTimeField(null=True, blank=True)
    declined_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    completion_check_sent_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        verbose_name = _("reservation")
        verbose_name_plural = _("reservations")
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.guest_name} - {self.experience} ({self.status})"

    @property
    def supplier(self):
        return self.experience.partner

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def experience_date(self):
        if self.session_id:
            return self.session.session_date
        return self.requested_date

    @property
    def experience_time(self):
        if self.session_id:
            return self.session.start_time
        return self.requested_time

    @property
    def experience_start(self):
        """Start of the experience as an aware datetime, ``None`` if unknown."""
        day = self.experience_date
        if day is None:
            return None
        start = datetime.combine(day, self.experience_time or time.min)
        return timezone.make_aware(start, timezone.get_current_timezone())
