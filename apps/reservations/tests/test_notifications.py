from unittest import mock

from django.core import mail
from django.test import TestCase

from core.tests.factories import BookingFixtureMixin, make_reservation
from core.tokens import TokenAction, verify_token
from apps.reservations import notifications
from apps.reservations.models import ReservationStatus
from apps.reservations.tasks import send_reservation_email


class ReservationEmailTestCase(BookingFixtureMixin, TestCase):

    def setUp(self):
        self.create_booking_fixture()
        self.reservation = make_reservation(self.experience, self.hotel)

    def test_new_request_email_carries_signed_links(self):
        sent = notifications.send_reservation_notification(notifications.SUPPLIER_NEW_REQUEST, self.reservation)

        self.assertEqual(sent, 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ['hello@kayaks.test'])
        self.assertEqual(message.subject, 'New booking request - Sunset Kayak Tour')

        context = notifications.build_context(notifications.SUPPLIER_NEW_REQUEST, self.reservation)
        self.assertIn(context['accept_url'], message.body)
        token = context['accept_url'].split('token=')[1]
        payload = verify_token(token, action=TokenAction.ACCEPT, subject_id=self.reservation.id)
        self.assertEqual(payload.subject_id, str(self.reservation.id))

    def test_guest_emails_go_to_guest(self):
        notifications.send_reservation_notification(notifications.GUEST_REQUEST_RECEIVED, self.reservation)

        self.assertEqual(mail.outbox[0].to, ['maija@example.com'])
        self.assertIn('€136.00', mail.outbox[0].body)

    def test_payment_confirmed_email_has_cancel_link(self):
        self.reservation.status = ReservationStatus.PENDING_PAYMENT

        context = notifications.build_context(notifications.GUEST_PAYMENT_CONFIRMED, self.reservation)

        self.assertIn(f"bookings/{self.reservation.id}/cancel/?token=", context['cancel_url'])
        self.assertEqual(context['cancellation_days'], 7)

    def test_booking_paid_email_has_no_complete_link(self):
        context = notifications.build_context(notifications.SUPPLIER_BOOKING_PAID, self.reservation)

        self.assertNotIn('complete_url', context)

    def test_completion_check_email_carries_both_answers(self):
        context = notifications.build_context(notifications.SUPPLIER_COMPLETION_CHECK, self.reservation)

        complete_token = context['complete_url'].split('token=')[1]
        no_experience_token = context['no_experience_url'].split('token=')[1]
        verify_token(complete_token, action=TokenAction.COMPLETE, subject_id=self.reservation.id)
        verify_token(no_experience_token, action=TokenAction.NO_EXPERIENCE, subject_id=self.reservation.id)
        self.assertIn(f"bookings/{self.reservation.id}/no-experience/", context['no_experience_url'])

    def test_time_proposed_email_has_one_link_per_slot(self):
        self.reservation.proposed_times = [
            {'date': '2031-06-01', 'time': '09:30'},
            {'date': '2031-06-02', 'time': '14:00'},
        ]

        context = notifications.build_context(notifications.GUEST_TIME_PROPOSED, self.reservation)

        slots = context['proposed_slots']
        self.assertEqual([slot['time'].strftime('%H:%M') for slot in slots], ['09:30', '14:00'])
        self.assertTrue(slots[1]['accept_url'].endswith('&slot=1'))
        token = slots[0]['accept_url'].split('token=')[1].split('&')[0]
        verify_token(token, action=TokenAction.ACCEPT_PROPOSED, subject_id=self.reservation.id)
        decline_token = context['decline_proposed_url'].split('token=')[1]
        verify_token(decline_token, action=TokenAction.DECLINE_PROPOSED, subject_id=self.reservation.id)

    def test_every_kind_renders(self):
        self.reservation.supplier_amount_cents = 10880
        for kind in notifications.SUBJECTS:
            with self.subTest(kind=kind):
                self.assertEqual(notifications.send_reservation_notification(kind, self.reservation), 1)
        self.assertEqual(len(mail.outbox), len(notifications.SUBJECTS))

    def test_unknown_kind(self):
        with self.assertRaises(ValueError):
            notifications.send_reservation_notification('guest_birthday', self.reservation)

    def test_queue_sends_after_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            notifications.queue(notifications.GUEST_EXPIRED, self.reservation.id)
        self.assertEqual(len(mail.outbox), 0)

        for callback in callbacks:
            callback()

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Booking expired - Sunset Kayak Tour')


class SendReservationEmailTaskTestCase(BookingFixtureMixin, TestCase):

    def setUp(self):
        self.create_booking_fixture()

    def test_missing_reservation(self):
        result = send_reservation_email.apply(args=['guest_expired', '00000000-0000-0000-0000-000000000000']).get()

        self.assertEqual(result, {'status': 'error', 'error': 'reservation_not_found'})

    def test_no_recipient_is_skipped(self):
        self.supplier.email = ''
        self.supplier.save()
        reservation = make_reservation(self.experience, self.hotel)

        result = send_reservation_email.apply(args=['supplier_new_request', str(reservation.id)]).get()

        self.assertEqual(result['status'], 'skipped')
        self.assertEqual(len(mail.outbox), 0)

    @mock.patch('apps.reservations.notifications.send_mail', side_effect=ConnectionRefusedError('smtp down'))
    def test_smtp_failure_is_retried(self, send_mail):
        reservation = make_reservation(self.experience, self.hotel)

        send_reservation_email.apply(args=['guest_expired', str(reservation.id)])

        self.assertEqual(send_mail.call_count, 4)
