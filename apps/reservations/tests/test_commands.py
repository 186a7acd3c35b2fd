from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase

from core.exceptions import TransferFailed
from core.tests.factories import BookingFixtureMixin, make_reservation
from apps.reservations.models import Reservation, ReservationStatus
from payment_processor.services import StripePaymentService


class RetrySettlementsCommandTestCase(BookingFixtureMixin, TestCase):

    def setUp(self):
        self.create_booking_fixture()
        self.failed = make_reservation(
            self.experience, self.hotel, status=ReservationStatus.PENDING_PAYMENT,
            settlement_error='transfer_failed: The payout transfer could not be completed.',
            settlement_attempts=1,
        )
        self.untouched = make_reservation(self.experience, self.hotel, status=ReservationStatus.PENDING_PAYMENT)

    @mock.patch.object(StripePaymentService, 'create_transfer', return_value='tr_retry')
    def test_retries_only_failed_settlements(self, create_transfer):
        out = StringIO()

        call_command('retry_settlements', stdout=out)

        self.assertEqual(Reservation.objects.get(id=self.failed.id).status, ReservationStatus.COMPLETED)
        self.assertEqual(Reservation.objects.get(id=self.untouched.id).status, ReservationStatus.PENDING_PAYMENT)
        self.assertIn('Completed: 1, failed: 0', out.getvalue())

    @mock.patch.object(StripePaymentService, 'create_transfer', side_effect=TransferFailed())
    def test_failure_is_counted_again(self, create_transfer):
        out = StringIO()

        call_command('retry_settlements', stdout=out)

        self.assertEqual(Reservation.objects.get(id=self.failed.id).settlement_attempts, 2)
        self.assertIn('failed: 1', out.getvalue())

    @mock.patch.object(StripePaymentService, 'create_transfer')
    def test_dry_run(self, create_transfer):
        call_command('retry_settlements', '--dry-run', stdout=StringIO())

        create_transfer.assert_not_called()
