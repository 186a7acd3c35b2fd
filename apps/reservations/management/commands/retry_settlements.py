"""
Retry supplier payouts of paid bookings whose settlement failed.

Usage:
    python manage.py retry_settlements [--reservation-id UUID] [--dry-run]
"""

from django.core.management.base import BaseCommand

from core.exceptions import InvalidTransition, NoConnectedAccount, TransferFailed
from apps.reservations.models import Reservation, ReservationStatus
from apps.reservations.services import complete_reservation


class Command(BaseCommand):
    help = 'Retry the payout transfer of paid bookings with a recorded settlement error'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reservation-id',
            help='Retry a single reservation'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the reservations without contacting Stripe'
        )

    def handle(self, *args, **options):
        reservations = Reservation.objects.filter(status=ReservationStatus.PENDING_PAYMENT)
        if options.get('reservation_id'):
            reservations = reservations.filter(id=options['reservation_id'])
        else:
            reservations = reservations.exclude(settlement_error='')

        total = reservations.count()
        self.stdout.write(f'Found {total} reservations to settle')
        if total == 0:
            return

        completed = failed = 0
        for reservation in reservations.order_by('paid_at'):
            label = f'{reservation.id} ({reservation.settlement_attempts} attempts, {reservation.settlement_error or "no error"})'
            if options['dry_run']:
                self.stdout.write(self.style.WARNING(f'Would retry {label}'))
                continue
            try:
                complete_reservation(reservation.id)
            except (NoConnectedAccount, TransferFailed) as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f'❌ {reservation.id}: {e.detail}'))
            except InvalidTransition:
                continue
            else:
                completed += 1
                self.stdout.write(self.style.SUCCESS(f'✅ {reservation.id} completed'))

        if not options['dry_run']:
            self.stdout.write(f'Completed: {completed}, failed: {failed}')
