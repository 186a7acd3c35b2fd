"""
Celery tasks for reservations: outgoing email and the periodic
maintenance jobs scheduled in ``config/celery.py``.
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_reservation_email(self, kind, reservation_id):
    """
    🚀 ENTERPRISE: Send one reservation email, retrying SMTP failures.
    """
    from .models import Reservation
    from .notifications import send_reservation_notification

    try:
        reservation = Reservation.objects.select_related(
            'experience', 'experience__partner', 'session', 'hotel', 'hotel_config'
        ).get(id=reservation_id)
    except Reservation.DoesNotExist:
        logger.error(f"❌ [EMAIL] Reservation {reservation_id} not found for {kind}")
        return {'status': 'error', 'error': 'reservation_not_found'}

    try:
        sent = send_reservation_notification(kind, reservation)
        return {'status': 'sent' if sent else 'skipped', 'kind': kind}
    except Exception as e:
        logger.error(f"❌ [EMAIL] {kind} for {reservation_id} failed: {e}", exc_info=True)
        if self.request.retries < self.max_retries:
            logger.info(f"🔄 [EMAIL] Retrying... (attempt {self.request.retries + 1}/{self.max_retries})")
            raise self.retry(exc=e, countdown=60 * (self.request.retries + 1))
        return {'status': 'error', 'error': str(e), 'retries': self.request.retries}


@shared_task
def expire_pending_reservations():
    """Expire requests whose response deadline passed. Runs every 15 minutes."""
    from .services import expire_pending

    return {'expired': expire_pending()}


@shared_task
def expire_unpaid_reservations():
    """Expire accepted bookings that were not paid in time. Runs every 15 minutes."""
    from .services import expire_unpaid

    return {'expired': expire_unpaid()}


@shared_task
def auto_complete_reservations():
    """Complete and settle bookings whose experience is past. Runs daily."""
    from .services import auto_complete

    return auto_complete()


@shared_task
def send_completion_checks():
    """Ask suppliers about yesterday's experiences. Runs daily."""
    from .services import completion_check

    return {'sent': completion_check()}
