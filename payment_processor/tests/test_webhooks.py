"""Tests for Stripe event handling."""

from unittest import mock

from django.test import TestCase

from core.tests.factories import BookingFixtureMixin, make_reservation
from apps.reservations.models import Reservation, ReservationStatus
from payment_processor.models import PaymentWebhook
from payment_processor.services import StripePaymentService
from payment_processor.webhooks import process_event


def stripe_event(event_id, event_type, obj):
    return {'id': event_id, 'type': event_type, 'data': {'object': obj}}


class ProcessEventTestCase(BookingFixtureMixin, TestCase):

    def setUp(self):
        self.create_booking_fixture()
        self.reservation = make_reservation(
            self.experience, self.hotel, status=ReservationStatus.CONFIRMED,
            stripe_payment_link_id='plink_1',
        )
        self.service = mock.Mock(spec=StripePaymentService)

    def succeeded_event(self, event_id='evt_1'):
        return stripe_event(event_id, 'payment_intent.succeeded', {
            'id': 'pi_1',
            'latest_charge': 'ch_1',
            'metadata': {'reservation_id': str(self.reservation.id)},
        })

    def test_payment_succeeded_records_payment(self):
        webhook = process_event(self.succeeded_event(), service=self.service)

        self.assertEqual(webhook.status, 'processed')
        self.assertEqual(webhook.reservation_id, self.reservation.id)
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.status, ReservationStatus.PENDING_PAYMENT)
        self.assertEqual(self.reservation.stripe_payment_intent_id, 'pi_1')
        self.assertEqual(self.reservation.stripe_charge_id, 'ch_1')
        self.assertEqual(
            (self.reservation.supplier_amount_cents, self.reservation.hotel_amount_cents,
             self.reservation.platform_amount_cents),
            (10880, 2040, 680),
        )

    def test_redelivered_event_is_not_handled_twice(self):
        process_event(self.succeeded_event(), service=self.service)

        with mock.patch('apps.reservations.services.record_payment') as record_payment:
            webhook = process_event(self.succeeded_event(), service=self.service)

        record_payment.assert_not_called()
        self.assertEqual(webhook.status, 'processed')
        self.assertEqual(PaymentWebhook.objects.filter(event_id='evt_1').count(), 1)

    def test_same_payment_from_two_events_is_idempotent(self):
        process_event(self.succeeded_event('evt_1'), service=self.service)
        webhook = process_event(self.succeeded_event('evt_2'), service=self.service)

        self.assertEqual(webhook.status, 'processed')
        self.assertEqual(Reservation.objects.get(id=self.reservation.id).status, ReservationStatus.PENDING_PAYMENT)

    def test_checkout_session_matched_by_payment_link(self):
        self.service.retrieve_payment_intent.return_value = {'id': 'pi_2', 'latest_charge': 'ch_2', 'metadata': {}}
        event = stripe_event('evt_3', 'checkout.session.completed', {
            'id': 'cs_1', 'payment_intent': 'pi_2', 'payment_link': 'plink_1', 'metadata': {},
        })

        webhook = process_event(event, service=self.service)

        self.assertEqual(webhook.status, 'processed')
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.stripe_payment_intent_id, 'pi_2')

    def test_payment_for_cancelled_reservation_is_recorded_as_failed(self):
        Reservation.objects.filter(id=self.reservation.id).update(status=ReservationStatus.CANCELLED)

        webhook = process_event(self.succeeded_event(), service=self.service)

        self.assertEqual(webhook.status, 'failed')
        self.assertTrue(webhook.error_message)

    def test_unknown_event_type_is_ignored(self):
        webhook = process_event(stripe_event('evt_4', 'customer.created', {'id': 'cus_1'}), service=self.service)

        self.assertEqual(webhook.status, 'ignored')

    def test_account_updated_sets_onboarding(self):
        self.supplier.stripe_onboarding_complete = False
        self.supplier.save()
        event = stripe_event('evt_5', 'account.updated', {
            'id': 'acct_supplier', 'charges_enabled': True, 'payouts_enabled': True,
        })

        process_event(event, service=self.service)

        self.supplier.refresh_from_db()
        self.assertTrue(self.supplier.stripe_onboarding_complete)

    def test_payment_failed_emails_guest(self):
        event = stripe_event('evt_6', 'payment_intent.payment_failed', {
            'id': 'pi_3',
            'metadata': {'reservation_id': str(self.reservation.id)},
            'last_payment_error': {'message': 'Your card was declined.'},
        })

        with mock.patch('apps.reservations.notifications.queue') as queue:
            webhook = process_event(event, service=self.service)

        self.assertEqual(webhook.status, 'processed')
        queue.assert_called_once_with('guest_payment_failed', str(self.reservation.id))
