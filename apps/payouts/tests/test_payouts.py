from datetime import timedelta

from django.utils import timezone
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APITestCase

from core.exceptions import InvalidTransition
from core.tests.factories import BookingFixtureMixin, make_reservation, make_session
from apps.payouts import services
from apps.payouts.models import HotelPayout
from apps.reservations.models import ReservationStatus


class PayoutFixtureMixin(BookingFixtureMixin):

    def create_payout_fixture(self):
        self.create_booking_fixture()
        today = timezone.localdate()
        self.period_start = today - timedelta(days=30)
        self.period_end = today
        self.first = self.completed(days_ago=20, hotel_amount_cents=2040)
        self.second = self.completed(days_ago=5, hotel_amount_cents=1500)

    def completed(self, days_ago, **kwargs):
        return make_reservation(
            self.experience, self.hotel, status=ReservationStatus.COMPLETED,
            requested_date=timezone.localdate() - timedelta(days=days_ago), **kwargs
        )


class HotelPayoutServiceTestCase(PayoutFixtureMixin, TestCase):

    def setUp(self):
        self.create_payout_fixture()

    def test_payout_sums_hotel_shares_of_period(self):
        make_reservation(
            self.experience, self.hotel, status=ReservationStatus.PENDING_PAYMENT,
            requested_date=timezone.localdate() - timedelta(days=3), hotel_amount_cents=999,
        )
        self.completed(days_ago=45, hotel_amount_cents=700)

        payout, count = services.create_payout_for_period(self.hotel, self.period_start, self.period_end)

        self.assertEqual(count, 2)
        self.assertEqual(payout.amount_cents, 3540)
        self.assertEqual(payout.status, 'pending')
        self.assertEqual(set(payout.reservations.values_list('id', flat=True)), {self.first.id, self.second.id})

    def test_session_date_decides_the_period(self):
        session = make_session(self.experience, days_ahead=-10)
        booked = make_reservation(
            self.experience, self.hotel, status=ReservationStatus.COMPLETED, session=session,
            is_request=False, requested_date=None, hotel_amount_cents=300,
        )

        payout, count = services.create_payout_for_period(self.hotel, self.period_start, self.period_end)

        self.assertEqual(count, 3)
        self.assertTrue(payout.reservations.filter(id=booked.id).exists())

    def test_reservations_are_paid_out_once(self):
        services.create_payout_for_period(self.hotel, self.period_start, self.period_end)

        with self.assertRaises(NotFound):
            services.create_payout_for_period(self.hotel, self.period_start, self.period_end)

    def test_mark_paid_twice_keeps_first_payment(self):
        payout, _ = services.create_payout_for_period(self.hotel, self.period_start, self.period_end)
        paid = services.mark_paid(payout.id, payment_ref='SEPA-2041')

        with self.assertRaises(InvalidTransition):
            services.mark_paid(payout.id, payment_ref='SEPA-9999')

        payout.refresh_from_db()
        self.assertEqual(payout.paid_at, paid.paid_at)
        self.assertEqual(payout.payment_ref, 'SEPA-2041')


class HotelPayoutAPITestCase(PayoutFixtureMixin, APITestCase):

    url = '/api/v1/admin/hotel-payouts/'

    def setUp(self):
        self.create_payout_fixture()
        self.client.credentials(HTTP_AUTHORIZATION='Bearer test-cron-secret')

    def create(self):
        return self.client.post(self.url, {
            'partner_id': str(self.hotel.id),
            'period_start': self.period_start.isoformat(),
            'period_end': self.period_end.isoformat(),
        }, format='json')

    def test_create_and_list(self):
        response = self.create()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['booking_count'], 2)
        self.assertEqual(response.data['amount_cents'], 3540)

        listing = self.client.get(self.url, {'partner_id': str(self.hotel.id)})
        self.assertEqual(len(listing.data['payouts']), 1)
        self.assertEqual(listing.data['payouts'][0]['booking_count'], 2)

    def test_list_filters_by_partner(self):
        self.create()

        other = self.client.get(self.url, {'partner_id': str(self.supplier.id)})
        everything = self.client.get(self.url)
        paid = self.client.get(self.url, {'status': 'paid'})

        self.assertEqual(other.data['payouts'], [])
        self.assertEqual(len(everything.data['payouts']), 1)
        self.assertEqual(paid.data['payouts'], [])

    def test_list_rejects_malformed_partner_id(self):
        response = self.client.get(self.url, {'partner_id': 'not-a-uuid'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_empty_period(self):
        response = self.client.post(self.url, {
            'partner_id': str(self.hotel.id),
            'period_start': '2001-01-01',
            'period_end': '2001-01-31',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_paid_twice_conflicts(self):
        payout_id = self.create().data['payout']['id']
        detail_url = f"{self.url}{payout_id}/"

        first = self.client.patch(detail_url, {'status': 'paid', 'payment_ref': 'SEPA-2041'}, format='json')
        second = self.client.patch(detail_url, {'status': 'paid'}, format='json')

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['payout']['status'], 'paid')
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data['message'], 'Payout already marked as paid.')
        self.assertEqual(HotelPayout.objects.get(id=payout_id).payment_ref, 'SEPA-2041')

    def test_only_paid_status_is_accepted(self):
        payout_id = self.create().data['payout']['id']

        response = self.client.patch(f"{self.url}{payout_id}/", {'status': 'pending'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_cron_secret(self):
        self.client.credentials()

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
