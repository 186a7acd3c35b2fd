"""Hotel payout batches."""

import logging

from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone
from rest_framework.exceptions import NotFound

from core.exceptions import InvalidTransition
from apps.reservations.models import Reservation, ReservationStatus
from .models import HotelPayout

logger = logging.getLogger(__name__)


def eligible_reservations(partner, period_start, period_end):
    """Completed bookings of the hotel in the period not yet in a payout (by experience date)."""
    return Reservation.objects.filter(
        hotel=partner,
        status=ReservationStatus.COMPLETED,
        hotel_payout__isnull=True,
    ).filter(
        Q(session__session_date__range=(period_start, period_end))
        | Q(session__isnull=True, requested_date__range=(period_start, period_end))
    )


def create_payout_for_period(partner, period_start, period_end, currency='EUR', created_by='admin'):
    """
    Create a pending payout summing the hotel shares of the period.

    Raises ``NotFound`` when no unpaid completed bookings fall in the period.
    Returns ``(payout, booking_count)``.
    """
    with transaction.atomic():
        reservations = eligible_reservations(partner, period_start, period_end).select_for_update(of=('self',))
        ids = list(reservations.values_list('id', flat=True))
        if not ids:
            raise NotFound('No unpaid completed bookings found in this period.')

        amount = Reservation.objects.filter(id__in=ids).aggregate(total=Sum('hotel_amount_cents'))['total'] or 0
        payout = HotelPayout.objects.create(
            partner=partner,
            period_start=period_start,
            period_end=period_end,
            amount_cents=amount,
            currency=currency,
            created_by=created_by,
        )
        Reservation.objects.filter(id__in=ids).update(hotel_payout=payout, updated_at=timezone.now())

    logger.info(f"🏨 [PAYOUT] Payout {payout.id} for {partner}: {len(ids)} bookings, {amount} {currency}")
    return payout, len(ids)


def mark_paid(payout_id, payment_ref='', payment_method='', notes=''):
    """``pending -> paid``; a payout that is already paid is rejected and left untouched."""
    with transaction.atomic():
        payout = HotelPayout.objects.select_for_update().filter(id=payout_id).first()
        if payout is None:
            raise NotFound('Payout not found.')
        if payout.status == 'paid':
            raise InvalidTransition('Payout already marked as paid.')

        payout.status = 'paid'
        payout.paid_at = timezone.now()
        update_fields = ['status', 'paid_at', 'updated_at']
        for field, value in (('payment_ref', payment_ref), ('payment_method', payment_method), ('notes', notes)):
            if value:
                setattr(payout, field, value)
                update_fields.append(field)
        payout.save(update_fields=update_fields)

    logger.info(f"✅ [PAYOUT] Payout {payout.id} marked as paid ({payout.payment_ref or 'no reference'})")
    return payout
